"""
ijplatformkit CLI argument parser.

This module implements the command-line interface for ijplatformkit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("ijplatformkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """ijplatformkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="ijkit",
            description="ijplatformkit - IntelliJ Platform artifact resolution and caching",
            epilog='Use "ijkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"ijplatformkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./ijplatformkit.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_version_command(subparsers)
        self._add_locate_command(subparsers)
        self._add_ide_command(subparsers)
        self._add_plugin_command(subparsers)
        self._add_builtin_command(subparsers)

        return parser

    def _add_version_command(self, subparsers):
        """Add 'version' subcommand."""
        parser = subparsers.add_parser(
            "version",
            help="Resolve a symbolic version against Maven metadata",
            description="Resolve 'latest', 'closest:<version>' or an explicit version",
        )
        parser.add_argument(
            "url",
            metavar="URL",
            help="maven-metadata.xml URL",
        )
        parser.add_argument(
            "requested",
            nargs="?",
            default="latest",
            metavar="VERSION",
            help="latest | closest:<version> | <version> (default: latest)",
        )

    def _add_ide_arguments(self, parser):
        parser.add_argument(
            "--installer",
            action="store_true",
            help="Use the platform installer instead of the Maven archive",
        )
        parser.add_argument(
            "--sources",
            action="store_true",
            help="Also resolve the IDE sources jar",
        )

    def _add_locate_command(self, subparsers):
        """Add 'locate' subcommand."""
        parser = subparsers.add_parser(
            "locate",
            help="Show where an IDE artifact is published",
            description="Compute repository coordinates and URL of an IDE artifact",
        )
        parser.add_argument(
            "code", type=str.upper, metavar="CODE", help="Product type code (e.g., IC, IU, PY)"
        )
        parser.add_argument("ide_version", metavar="VERSION", help="IDE version")
        self._add_ide_arguments(parser)

    def _add_ide_command(self, subparsers):
        """Add 'ide' subcommand."""
        parser = subparsers.add_parser(
            "ide",
            help="Download, extract and register an IDE",
            description="Resolve an IDE dependency into the local cache",
        )
        parser.add_argument(
            "code",
            nargs="?",
            type=str.upper,
            metavar="CODE",
            help="Product type code (e.g., IC, IU, PY)",
        )
        parser.add_argument("ide_version", nargs="?", metavar="VERSION", help="IDE version")
        parser.add_argument(
            "--local",
            type=Path,
            metavar="PATH",
            help="Use a locally installed IDE instead of downloading one",
        )
        self._add_ide_arguments(parser)
        parser.add_argument(
            "--with-kotlin",
            action="store_true",
            help="Keep the bundled Kotlin runtime on the classpath",
        )
        parser.add_argument(
            "--refresh",
            action="store_true",
            help="Download again even if the archive is cached",
        )

    def _add_plugin_command(self, subparsers):
        """Add 'plugin' subcommand."""
        parser = subparsers.add_parser(
            "plugin",
            help="Resolve plugin dependencies",
            description="Resolve plugins by id[:version][@channel] or local path",
        )
        parser.add_argument(
            "notations",
            nargs="+",
            metavar="NOTATION",
            help="Plugin notation (id, id:version, id:version@channel, or a path)",
        )
        parser.add_argument(
            "--ide",
            type=Path,
            metavar="PATH",
            help="IDE directory providing builtin plugins",
        )

    def _add_builtin_command(self, subparsers):
        """Add 'builtin' subcommand."""
        parser = subparsers.add_parser(
            "builtin",
            help="Query the plugins bundled with an IDE",
            description="List bundled plugins or compute their dependency closure",
        )
        parser.add_argument("ide", type=Path, metavar="IDE_PATH", help="IDE directory")
        parser.add_argument(
            "plugin_ids",
            nargs="*",
            metavar="PLUGIN_ID",
            help="Plugins to look up (default: list all)",
        )
        parser.add_argument(
            "--closure",
            action="store_true",
            help="Print the transitive dependency closure of the given plugins",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        # Command module mapping
        command_map = {
            "version": "ijplatformkit.cli.commands.version",
            "locate": "ijplatformkit.cli.commands.locate",
            "ide": "ijplatformkit.cli.commands.ide",
            "plugin": "ijplatformkit.cli.commands.plugin",
            "builtin": "ijplatformkit.cli.commands.builtin",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error(f"Failed to load command module: {e}")
            if args.verbose:
                import traceback

                traceback.print_exc()
            return 1

        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
