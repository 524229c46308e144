"""Data models for holder/transfer snapshots and the on-chain aggregate."""

from __future__ import annotations

import contextlib
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Literal

TransferDirection = Literal["in", "out", "unknown"]


class RecordParseError(ValueError):
    """Raised when a collaborator record is missing a field or is not numeric."""


def parse_decimal(value: Any, *, field_name: str) -> Decimal:
    """Parse a numeric string/number into a Decimal."""
    if value is None or value == "":
        raise RecordParseError(f"{field_name} is required")
    try:
        parsed = Decimal(str(value))
    except InvalidOperation as e:
        raise RecordParseError(f"{field_name} is not numeric: {value!r}") from e
    if not parsed.is_finite():
        raise RecordParseError(f"{field_name} is not finite: {value!r}")
    return parsed


def _first(data: dict[str, Any], *keys: str) -> Any:
    """Return the first non-None value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _float_field(data: dict[str, Any], *keys: str, default: float = 0.0) -> float:
    value = _first(data, *keys)
    if value is None:
        return default
    return float(parse_decimal(value, field_name=keys[0]))


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key, data)
    if not isinstance(section, dict):
        raise RecordParseError(f"{key} must be an object")
    return section


def _record_list(data: dict[str, Any], *keys: str) -> list[dict[str, Any]]:
    records = _first(data, *keys)
    if records is None:
        return []
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise RecordParseError(f"{keys[0]} must be a list of objects")
    return records


def parse_timestamp(raw: Any) -> datetime | None:
    """Parse epoch seconds, epoch milliseconds or ISO-8601 into an aware UTC datetime."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw if raw.tzinfo is not None else raw.replace(tzinfo=UTC)
    if isinstance(raw, (int, float)):
        ts_f = float(raw)
        if ts_f > 1e12:
            ts_f /= 1000.0
        return datetime.fromtimestamp(ts_f, tz=UTC)
    if isinstance(raw, str):
        text = raw.strip()
        with contextlib.suppress(ValueError):
            return parse_timestamp(float(text))
        with contextlib.suppress(ValueError):
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=UTC)
            return parsed.astimezone(UTC)
    return None


@dataclass(frozen=True)
class HolderRecord:
    """A token holder as reported by the blockchain-data collaborator."""

    address: str
    balance: Decimal
    balance_formatted: Decimal | None = None

    @property
    def amount(self) -> Decimal:
        """Effective balance: the formatted figure when present, else the raw one."""
        return self.balance_formatted if self.balance_formatted is not None else self.balance

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HolderRecord:
        """Create a HolderRecord from ``{address|ownerAddress, balance, balanceFormatted?}``."""
        address = data.get("address") or data.get("ownerAddress") or data.get("owner_address")
        if not address:
            raise RecordParseError("holder address is required")
        formatted = data.get("balanceFormatted", data.get("balance_formatted"))
        return cls(
            address=str(address),
            balance=parse_decimal(data.get("balance"), field_name="balance"),
            balance_formatted=(
                parse_decimal(formatted, field_name="balanceFormatted")
                if formatted not in (None, "")
                else None
            ),
        )


@dataclass(frozen=True)
class TransferRecord:
    """A token transfer as reported by the blockchain-data collaborator."""

    from_address: str
    to_address: str
    value: Decimal
    timestamp: datetime | None = None
    value_formatted: Decimal | None = None
    transaction_hash: str = ""

    @property
    def amount(self) -> Decimal:
        """Effective value: the formatted figure when present, else the raw one."""
        return self.value_formatted if self.value_formatted is not None else self.value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransferRecord:
        """Create a TransferRecord from ``{from, to, value, valueFormatted?, timestamp|blockTimestamp}``."""
        from_address = data.get("from", data.get("from_address"))
        to_address = data.get("to", data.get("to_address"))
        if from_address is None or to_address is None:
            raise RecordParseError("transfer from/to addresses are required")
        formatted = data.get("valueFormatted", data.get("value_formatted"))
        raw_ts = data.get("timestamp")
        if raw_ts in (None, ""):
            raw_ts = data.get("blockTimestamp")
        return cls(
            from_address=str(from_address),
            to_address=str(to_address),
            value=parse_decimal(data.get("value"), field_name="value"),
            timestamp=parse_timestamp(raw_ts),
            value_formatted=(
                parse_decimal(formatted, field_name="valueFormatted")
                if formatted not in (None, "")
                else None
            ),
            transaction_hash=str(data.get("transactionHash", data.get("transaction_hash", ""))),
        )


@dataclass(frozen=True)
class RankedHolders:
    """Holders sorted by balance, descending.

    Top-N concentration figures read the first N holders; wrapping a list in
    this type records that the order is by balance rather than arbitrary.
    """

    holders: tuple[HolderRecord, ...]

    @classmethod
    def from_unsorted(cls, holders: Iterable[HolderRecord]) -> RankedHolders:
        return cls(holders=tuple(sorted(holders, key=lambda h: h.amount, reverse=True)))

    def __iter__(self) -> Iterator[HolderRecord]:
        return iter(self.holders)

    def __len__(self) -> int:
        return len(self.holders)


def is_sorted_by_balance_desc(holders: Sequence[HolderRecord]) -> bool:
    """Return True if holders are ordered by descending effective balance."""
    return all(a.amount >= b.amount for a, b in zip(holders, holders[1:]))


@dataclass(frozen=True)
class LargeTransfer:
    """A large transfer with its inferred direction relative to exchanges."""

    amount: float
    direction: TransferDirection
    timestamp: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LargeTransfer:
        direction = str(data.get("direction", "unknown"))
        if direction not in ("in", "out", "unknown"):
            direction = "unknown"
        return cls(
            amount=_float_field(data, "amount"),
            direction=direction,  # type: ignore[arg-type]
            timestamp=parse_timestamp(data.get("timestamp")),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "amount": self.amount,
            "direction": self.direction,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass(frozen=True)
class TopHolder:
    """A whale-sized holder surfaced in the on-chain aggregate."""

    address: str
    balance: float

    def to_dict(self) -> dict[str, object]:
        return {"address": self.address, "balance": self.balance}


@dataclass(frozen=True)
class OnChainInsights:
    """Aggregate on-chain view consumed by the recommendation engine.

    Attributes:
        whale_accumulation: Large transfers lean towards leaving exchanges.
        whale_distribution: Large transfers lean towards entering exchanges.
        recent_large_transfers: Most recent large transfers.
        top_holders: Whale-sized holders, largest first.
        total_volume: Transfer volume over the volume window.
        transfer_count: Number of transfers in the volume window.
        exchange_inflows: Volume sent to known exchanges.
        exchange_outflows: Volume sent from known exchanges.
        net_flow: exchange_inflows - exchange_outflows (positive = onto exchanges).
    """

    whale_accumulation: bool = False
    whale_distribution: bool = False
    recent_large_transfers: tuple[LargeTransfer, ...] = ()
    top_holders: tuple[TopHolder, ...] = ()
    total_volume: float = 0.0
    transfer_count: int = 0
    exchange_inflows: float = 0.0
    exchange_outflows: float = 0.0
    net_flow: float = 0.0

    @property
    def net_outflow(self) -> float:
        """Net movement off exchanges (positive = bullish accumulation proxy)."""
        return -self.net_flow

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OnChainInsights:
        """Create from the nested collaborator shape or a flat snake_case dict.

        Raises:
            RecordParseError: If a section is not an object or a figure is not numeric.
        """
        whale = _section(data, "whaleActivity")
        volume = _section(data, "volumeAnalysis")
        liquidity = _section(data, "liquidityIndicators")

        transfers = _record_list(whale, "recentLargeTransfers", "recent_large_transfers")
        holders = _record_list(whale, "topHolders", "top_holders")
        inflows = _float_field(liquidity, "exchangeInflows", "exchange_inflows")
        outflows = _float_field(liquidity, "exchangeOutflows", "exchange_outflows")

        return cls(
            whale_accumulation=bool(_first(whale, "whaleAccumulation", "whale_accumulation")),
            whale_distribution=bool(_first(whale, "whaleDistribution", "whale_distribution")),
            recent_large_transfers=tuple(LargeTransfer.from_dict(t) for t in transfers),
            top_holders=tuple(
                TopHolder(
                    address=str(_first(h, "ownerAddress", "address") or ""),
                    balance=_float_field(h, "balanceFormatted", "balance"),
                )
                for h in holders
            ),
            total_volume=_float_field(volume, "totalVolume", "total_volume"),
            transfer_count=int(_float_field(volume, "transferCount", "transfer_count")),
            exchange_inflows=inflows,
            exchange_outflows=outflows,
            net_flow=_float_field(liquidity, "netFlow", "net_flow", default=inflows - outflows),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "whale_accumulation": self.whale_accumulation,
            "whale_distribution": self.whale_distribution,
            "recent_large_transfers": [t.to_dict() for t in self.recent_large_transfers],
            "top_holders": [h.to_dict() for h in self.top_holders],
            "total_volume": self.total_volume,
            "transfer_count": self.transfer_count,
            "exchange_inflows": self.exchange_inflows,
            "exchange_outflows": self.exchange_outflows,
            "net_flow": self.net_flow,
        }
