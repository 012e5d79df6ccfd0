"""Command line argument parsing."""

import argparse

from termhold import __version__


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments namespace with:
        - path: Starting directory for new sessions (optional)
        - host / port: Bind address, overriding the config file
        - config: Path to the YAML config file
        - verbose: Whether to show debug logs
    """
    parser = argparse.ArgumentParser(
        prog="termhold",
        description="termhold - persistent terminal sessions over WebSocket",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Starting directory for new sessions (default: current directory)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Bind address (default: from config, 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Bind port (default: from config, 8000)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="termhold.yaml",
        help="Path to YAML config file (default: termhold.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed logs",
    )

    return parser.parse_args(argv)
