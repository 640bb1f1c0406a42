"""Application entry point."""

from __future__ import annotations

import argparse
import sys

from chessmirror.config import MirrorSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chessmirror",
        description="Mirror a live web chess board onto a local overlay.",
    )
    parser.add_argument("--host", help="hub host (default 127.0.0.1)")
    parser.add_argument("--port", type=int, help="hub port (default 3000)")
    parser.add_argument("--log-level", dest="log_level", help="logging level")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("hub", help="run the WebSocket broadcast hub")

    overlay = commands.add_parser("overlay", help="run the overlay window")
    overlay.add_argument("--engine", dest="engine_path", help="UCI engine binary")
    overlay.add_argument(
        "--movetime", dest="engine_movetime_ms", type=int, help="search time per position (ms)"
    )
    overlay.add_argument(
        "--no-animation",
        dest="animate_moves",
        action="store_const",
        const=False,
        help="snap pieces instead of sliding them",
    )

    producer = commands.add_parser("producer", help="watch a game page and publish snapshots")
    producer.add_argument("url", help="URL of the game page to open")
    producer.add_argument("--debounce", dest="debounce_ms", type=int, help="debounce window (ms)")
    producer.add_argument(
        "--poll", dest="poll_interval_ms", type=int, help="fallback poll interval (ms)"
    )
    return parser


def settings_from_args(
    args: argparse.Namespace, base: MirrorSettings | None = None
) -> MirrorSettings:
    """Environment settings with command-line flags layered on top."""
    settings = base if base is not None else MirrorSettings.from_env()
    names = (
        "host",
        "port",
        "log_level",
        "engine_path",
        "engine_movetime_ms",
        "animate_moves",
        "debounce_ms",
        "poll_interval_ms",
    )
    return settings.with_overrides(**{name: getattr(args, name, None) for name in names})


def main(argv: list[str] | None = None) -> None:
    """Launch one chessmirror process."""
    from chessmirror.bootstrap import configure_logging, run_hub, run_overlay, run_producer

    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    configure_logging(settings.log_level)

    if args.command == "hub":
        code = run_hub(settings)
    elif args.command == "overlay":
        code = run_overlay(settings)
    else:
        code = run_producer(settings, args.url)
    sys.exit(code)


if __name__ == "__main__":
    main()
