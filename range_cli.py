#!/usr/bin/env python3
"""CLI utility for parsing range text, drawing drill spots and progress stats."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from range_trainer.combos import expand_combos
from range_trainer.service import RangeTrainerService


def _add_range_text_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--raise", dest="raise_text", default="", help="Raise range text")
    parser.add_argument("--call", dest="call_text", default="", help="Call range text")
    parser.add_argument("--allin", dest="allin_text", default="", help="All-in range text")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Range trainer CLI")
    parser.add_argument(
        "--db",
        default="range_trainer/data/ranges.db",
        help="SQLite database path (default: range_trainer/data/ranges.db)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    sub = parser.add_subparsers(dest="command", required=True)

    parse = sub.add_parser("parse", help="Parse range text and print matrix, warnings and summary")
    _add_range_text_args(parse)

    detail = sub.add_parser("detail", help="Show actions and combos for one hand")
    detail.add_argument("hand", help="Hand class, e.g. AKs")
    _add_range_text_args(detail)

    combos = sub.add_parser("combos", help="List the concrete combos of a hand class")
    combos.add_argument("hand", help="Hand class, e.g. AKo")

    draw = sub.add_parser("draw", help="Draw one drill scenario from a saved range")
    draw.add_argument("--range-id", required=True)
    draw.add_argument("--seed", type=int, default=None)

    progress = sub.add_parser("progress", help="Show aggregate drill standings")
    progress.add_argument("--range-id", default="")
    return parser


def _text_payload(args: argparse.Namespace) -> dict:
    return {
        "raise": args.raise_text,
        "call": args.call_text,
        "allin": args.allin_text,
    }


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "combos":
        combos = expand_combos(args.hand)
        if not combos:
            parser.error(f"unknown hand: {args.hand}")
        print(json.dumps(combos, indent=2))
        return

    service = RangeTrainerService(db_path=Path(args.db))

    if args.command == "parse":
        print(json.dumps(service.preview(_text_payload(args)), indent=2))
        return

    if args.command == "detail":
        payload = _text_payload(args)
        payload["hand"] = args.hand
        try:
            print(json.dumps(service.hand_detail(payload), indent=2))
        except ValueError as exc:
            parser.error(str(exc))
        return

    if args.command == "draw":
        payload = {"range_id": args.range_id}
        if args.seed is not None:
            payload["seed"] = args.seed
        try:
            print(json.dumps(service.draw(payload), indent=2))
        except KeyError as exc:
            parser.error(str(exc.args[0]) if exc.args else "unknown range")
        return

    if args.command == "progress":
        print(json.dumps(service.progress(args.range_id), indent=2))
        return

    raise RuntimeError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    main()
