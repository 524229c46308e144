"""Snapshot ingestion: record parsing, exchange registry and on-chain aggregation."""

from trade_intel.ingestor.exchanges import (
    KNOWN_EXCHANGE_ADDRESSES,
    exchange_label,
    is_exchange_address,
)
from trade_intel.ingestor.models import (
    HolderRecord,
    LargeTransfer,
    OnChainInsights,
    RankedHolders,
    RecordParseError,
    TopHolder,
    TransferRecord,
)
from trade_intel.ingestor.onchain import (
    OnChainBuilderConfig,
    build_onchain_insights,
    classify_transfer_direction,
    parse_holders,
    parse_transfers,
)

__all__ = [
    "KNOWN_EXCHANGE_ADDRESSES",
    "HolderRecord",
    "LargeTransfer",
    "OnChainBuilderConfig",
    "OnChainInsights",
    "RankedHolders",
    "RecordParseError",
    "TopHolder",
    "TransferRecord",
    "build_onchain_insights",
    "classify_transfer_direction",
    "exchange_label",
    "is_exchange_address",
    "parse_holders",
    "parse_transfers",
]
