"""Command-line entry point.

Usage:
    trade-intel trade setup.json
    trade-intel trade setup.json --onchain onchain.json --format text
    trade-intel trade form.json --form
    trade-intel whales holders.json transfers.json --symbol PEPE
    python -m trade_intel whales holders.json transfers.json --symbol PEPE --now 2024-05-01T12:00:00Z
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from trade_intel import __version__
from trade_intel.config import get_settings
from trade_intel.ingestor.models import OnChainInsights, RecordParseError, parse_timestamp
from trade_intel.pipeline import TradeIntelPipeline
from trade_intel.report.formatter import ReportFormatter
from trade_intel.trade.models import TradeSetup
from trade_intel.trade.validation import InvalidTradeSetup, trade_setup_from_form

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 2


class InputError(Exception):
    """Raised when an input file cannot be read or decoded."""


def parse_args(args: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="trade-intel",
        description="Score trade setups and analyse whale activity from JSON snapshots",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    trade = sub.add_parser("trade", help="Score a trade setup")
    trade.add_argument("setup", type=Path, help="Trade setup JSON file")
    trade.add_argument(
        "--onchain",
        type=Path,
        default=None,
        help="On-chain insights JSON file (optional)",
    )
    trade.add_argument(
        "--form",
        action="store_true",
        help="Treat the setup file as raw form strings (e.g. leverage '10x')",
    )
    trade.add_argument("--format", choices=("json", "text"), default="json", dest="output_format")

    whales = sub.add_parser("whales", help="Whale tiers, behaviour and prediction")
    whales.add_argument("holders", type=Path, help="Holder records JSON file")
    whales.add_argument("transfers", type=Path, help="Transfer records JSON file")
    whales.add_argument("--symbol", required=True, help="Token symbol")
    whales.add_argument(
        "--now",
        type=str,
        default=None,
        help="Reference time (ISO-8601 or epoch); defaults to the current time",
    )
    whales.add_argument("--format", choices=("json", "text"), default="json", dest="output_format")
    return parser.parse_args(args)


def load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise InputError(f"Cannot read {path}: {e}") from e


def load_records(path: Path) -> list[dict[str, Any]]:
    """Load a record list, accepting a bare list or an ``{"items": [...]}`` page."""
    data = load_json(path)
    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list):
        raise InputError(f"{path} must contain a list of records")
    return data


def _run_trade(pipeline: TradeIntelPipeline, ns: argparse.Namespace) -> dict[str, Any] | str:
    raw = load_json(ns.setup)
    if not isinstance(raw, dict):
        raise InputError(f"{ns.setup} must contain a JSON object")
    try:
        setup = (
            trade_setup_from_form({k: str(v) for k, v in raw.items()})
            if ns.form
            else TradeSetup.from_dict(raw)
        )
    except (TypeError, ValueError) as e:
        raise InputError(f"Invalid trade setup in {ns.setup}: {e}") from e

    onchain = None
    if ns.onchain is not None:
        onchain_raw = load_json(ns.onchain)
        if not isinstance(onchain_raw, dict):
            raise InputError(f"{ns.onchain} must contain a JSON object")
        try:
            onchain = OnChainInsights.from_dict(onchain_raw)
        except RecordParseError as e:
            raise InputError(f"Invalid on-chain insights in {ns.onchain}: {e}") from e

    analysis = pipeline.evaluate_trade(setup, onchain)
    if ns.output_format == "text":
        return ReportFormatter().format_trade(analysis).plain_text
    return analysis.to_dict()


def _run_whales(pipeline: TradeIntelPipeline, ns: argparse.Namespace) -> dict[str, Any] | str:
    holders = load_records(ns.holders)
    transfers = load_records(ns.transfers)
    now = None
    if ns.now is not None:
        now = parse_timestamp(ns.now)
        if now is None:
            raise InputError(f"Invalid --now value: {ns.now!r}")

    intel = pipeline.whale_intelligence(holders, transfers, ns.symbol, now=now)
    if ns.output_format == "text":
        return ReportFormatter().format_whales(intel).plain_text
    return intel.to_dict()


def main(argv: Sequence[str] | None = None) -> int:
    ns = parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    logging.basicConfig(
        level=settings.get_logging_level(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.debug("Settings: %s", settings.redacted_summary())

    pipeline = TradeIntelPipeline(settings)
    try:
        if ns.command == "trade":
            result = _run_trade(pipeline, ns)
        else:
            result = _run_whales(pipeline, ns)
    except InvalidTradeSetup as e:
        for error in e.errors:
            print(f"error: {error}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except InputError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
