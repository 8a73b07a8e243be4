"""
Entry point for running ijplatformkit CLI as a module.

Usage: python -m ijplatformkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
