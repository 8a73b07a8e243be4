"""
Entry point for running ijplatformkit CLI as a module.

Usage: python -m ijplatformkit [command] [options]
"""

from ijplatformkit.cli.parser import main

if __name__ == "__main__":
    main()
