"""Module entrypoint for launching the desktop or web app."""
from __future__ import annotations

import argparse

import app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="zengen", description="ZenGen meditation generator")
    parser.add_argument(
        "--web",
        action="store_true",
        help="serve the gradio web UI instead of the desktop window",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    if args.web:
        app.launch_web()
    else:
        app.launch()


if __name__ == "__main__":
    main()
