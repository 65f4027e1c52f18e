"""CLI launcher for Dragon Cursor."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dragon-cursor",
        description="Line-only dragon that stalks your pointer.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- run ---
    run_p = sub.add_parser("run", help="Open the window and animate.")
    run_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags below override it).",
    )
    run_p.add_argument("--width", type=int, default=None)
    run_p.add_argument("--height", type=int, default=None)
    run_p.add_argument("--fps", type=int, default=None)
    run_p.add_argument("--seed", type=int, default=None)
    run_p.add_argument(
        "--screenshot-dir", type=str, default=None,
        help="Directory screenshots (S key) are written to.",
    )

    # --- bench ---
    bench_p = sub.add_parser(
        "bench", help="Measure headless simulation throughput.",
    )
    bench_p.add_argument("--ticks", type=int, default=600)
    bench_p.add_argument("--seed", type=int, default=0)
    bench_p.add_argument(
        "--no-fire", action="store_true",
        help="Do not hold the fire button during the run.",
    )

    # --- config ---
    config_p = sub.add_parser(
        "config", help="Write the default config as JSON.",
    )
    config_p.add_argument("output", help="Path for the JSON file.")

    return parser


def _run_window(args: argparse.Namespace) -> int:
    from dragon_cursor.config import DragonConfig
    from dragon_cursor.driver import AnimationDriver

    config = DragonConfig.load(args.config) if args.config else DragonConfig()

    flag_map = {
        "width": "width",
        "height": "height",
        "fps": "fps",
        "seed": "seed",
        "screenshot_dir": "screenshot_dir",
    }
    overrides = {
        cfg_name: getattr(args, cli_name)
        for cli_name, cfg_name in flag_map.items()
        if getattr(args, cli_name, None) is not None
    }
    if overrides:
        config = dataclasses.replace(config, **overrides)

    AnimationDriver(config).run()
    return 0


def _run_bench(args: argparse.Namespace) -> int:
    from dragon_cursor.benchmark import benchmark_throughput

    result = benchmark_throughput(
        ticks=args.ticks, seed=args.seed, fire=not args.no_fire,
    )
    print(result.summary())  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    from dragon_cursor.config import DragonConfig

    DragonConfig().save(args.output)
    print(f"Wrote default config to {args.output}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``dragon-cursor`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "run": _run_window,
        "bench": _run_bench,
        "config": _run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
