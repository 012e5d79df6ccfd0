"""Command line entry point."""

import os
import sys
from pathlib import Path

import uvicorn

from termhold.composition import build_launch_spec
from termhold.config import load_config
from termhold.logging_setup import setup_logging
from termhold.pty import EnvironmentCustomizer

from .args import parse_args
from .display import console, display_startup_screen


def main(argv: list[str] | None = None) -> None:
    """Run the termhold server."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    cwd = None
    if args.path:
        path = Path(args.path).expanduser().resolve()
        if not path.is_dir():
            console.print(f"[red]Not a directory:[/red] {args.path}")
            sys.exit(1)
        cwd = str(path)

    try:
        config = load_config(args.config)
    except ValueError as e:
        console.print(f"[red]Invalid config {args.config}:[/red] {e}")
        sys.exit(1)

    host = args.host or config.server.host
    port = args.port or config.server.port

    # The ASGI factory builds its container from these
    os.environ["TERMHOLD_CONFIG_PATH"] = args.config
    if cwd:
        os.environ["TERMHOLD_CWD"] = cwd
    if args.verbose:
        os.environ["TERMHOLD_VERBOSE"] = "1"

    launch = build_launch_spec(config, EnvironmentCustomizer())
    display_startup_screen(
        url=f"ws://{host}:{port}/api/terminal",
        shell=launch.command,
        cwd=cwd or config.terminal.cwd or os.getcwd(),
    )

    uvicorn.run(
        "termhold.asgi:create_app_from_env",
        factory=True,
        host=host,
        port=port,
        log_level="debug" if args.verbose else "info",
    )
