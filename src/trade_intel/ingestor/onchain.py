"""Build the on-chain aggregate from a holder/transfer snapshot.

The snapshot is trusted: records are parsed leniently and a single bad row
is logged and skipped rather than failing the whole aggregate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

from trade_intel.ingestor.exchanges import is_exchange_address
from trade_intel.ingestor.models import (
    HolderRecord,
    LargeTransfer,
    OnChainInsights,
    RecordParseError,
    TopHolder,
    TransferDirection,
    TransferRecord,
)

logger = logging.getLogger(__name__)

DEFAULT_WHALE_BALANCE = Decimal("1000000")
DEFAULT_LARGE_TRANSFER = Decimal("100000")


@dataclass(frozen=True)
class OnChainBuilderConfig:
    whale_balance: Decimal = DEFAULT_WHALE_BALANCE
    large_transfer: Decimal = DEFAULT_LARGE_TRANSFER
    max_large_transfers: int = 20
    recent_large_transfers: int = 5
    max_top_holders: int = 10
    volume_window: timedelta = timedelta(hours=24)


def parse_holders(raw: Iterable[HolderRecord | Mapping[str, Any]]) -> list[HolderRecord]:
    """Parse holder dicts into records, skipping malformed rows."""
    holders: list[HolderRecord] = []
    for item in raw:
        if isinstance(item, HolderRecord):
            holders.append(item)
            continue
        try:
            holders.append(HolderRecord.from_dict(dict(item)))
        except RecordParseError as e:
            logger.warning("Skipping holder record: %s", e)
    return holders


def parse_transfers(raw: Iterable[TransferRecord | Mapping[str, Any]]) -> list[TransferRecord]:
    """Parse transfer dicts into records, skipping malformed rows."""
    transfers: list[TransferRecord] = []
    for item in raw:
        if isinstance(item, TransferRecord):
            transfers.append(item)
            continue
        try:
            transfers.append(TransferRecord.from_dict(dict(item)))
        except RecordParseError as e:
            logger.warning("Skipping transfer record: %s", e)
    return transfers


def classify_transfer_direction(transfer: TransferRecord) -> TransferDirection:
    """Classify a transfer relative to known exchanges.

    ``in``: leaves an exchange for a wallet (accumulation).
    ``out``: leaves a wallet for an exchange (distribution).
    ``unknown``: neither or both endpoints are exchanges.
    """
    from_exchange = is_exchange_address(transfer.from_address)
    to_exchange = is_exchange_address(transfer.to_address)
    if from_exchange and not to_exchange:
        return "in"
    if to_exchange and not from_exchange:
        return "out"
    return "unknown"


def _recency_key(transfer: LargeTransfer) -> float:
    return transfer.timestamp.timestamp() if transfer.timestamp else float("-inf")


def build_onchain_insights(
    holders: Iterable[HolderRecord | Mapping[str, Any]],
    transfers: Iterable[TransferRecord | Mapping[str, Any]],
    now: datetime | None = None,
    config: OnChainBuilderConfig | None = None,
    price_usd: float | None = None,
) -> OnChainInsights:
    """Aggregate a snapshot into whale, volume and exchange-flow figures.

    Args:
        holders: Holder records or dicts.
        transfers: Transfer records or dicts, most recent first.
        now: Reference time for the volume window (defaults to current UTC time).
        config: Optional threshold overrides.
        price_usd: Token price; when given every amount is converted to USD.

    Returns:
        OnChainInsights with ``net_flow = exchange_inflows - exchange_outflows``.
    """
    cfg = config or OnChainBuilderConfig()
    now = now or datetime.now(UTC)
    scale = float(price_usd) if price_usd is not None else 1.0

    holder_records = parse_holders(holders)
    transfer_records = parse_transfers(transfers)

    whale_holders = [h for h in holder_records if h.amount > cfg.whale_balance]
    top_holders = tuple(
        TopHolder(address=h.address, balance=float(h.amount) * scale)
        for h in whale_holders[: cfg.max_top_holders]
    )

    large = [t for t in transfer_records if t.amount > cfg.large_transfer][: cfg.max_large_transfers]
    large_transfers = [
        LargeTransfer(
            amount=float(t.amount) * scale,
            direction=classify_transfer_direction(t),
            timestamp=t.timestamp,
        )
        for t in large
    ]
    inbound = sum(1 for t in large_transfers if t.direction == "in")
    outbound = sum(1 for t in large_transfers if t.direction == "out")
    recent = sorted(large_transfers, key=_recency_key, reverse=True)[: cfg.recent_large_transfers]

    window_start = now - cfg.volume_window
    in_window = [t for t in transfer_records if t.timestamp is not None and window_start <= t.timestamp <= now]
    total_volume = sum(float(t.amount) for t in in_window) * scale
    inflows = sum(float(t.amount) for t in in_window if is_exchange_address(t.to_address)) * scale
    outflows = sum(float(t.amount) for t in in_window if is_exchange_address(t.from_address)) * scale

    insights = OnChainInsights(
        whale_accumulation=inbound > outbound,
        whale_distribution=outbound > inbound,
        recent_large_transfers=tuple(recent),
        top_holders=top_holders,
        total_volume=total_volume,
        transfer_count=len(in_window),
        exchange_inflows=inflows,
        exchange_outflows=outflows,
        net_flow=inflows - outflows,
    )
    logger.debug(
        "On-chain aggregate: whales=%d, large=%d (in=%d out=%d), volume=%.2f over %d transfers, "
        "net_flow=%.2f",
        len(whale_holders),
        len(large_transfers),
        inbound,
        outbound,
        total_volume,
        insights.transfer_count,
        insights.net_flow,
    )
    return insights
