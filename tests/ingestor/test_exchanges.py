"""Tests for the known-exchange registry."""

import pytest

from trade_intel.ingestor.exchanges import (
    KNOWN_EXCHANGE_ADDRESSES,
    exchange_label,
    is_exchange_address,
)


class TestExchangeRegistry:
    def test_addresses_are_lowercase(self) -> None:
        assert all(address == address.lower() for address in KNOWN_EXCHANGE_ADDRESSES)

    def test_lookup_is_case_insensitive(self, exchange_address: str) -> None:
        assert is_exchange_address(exchange_address.upper().replace("0X", "0x"))
        assert exchange_label(exchange_address) == "Binance"

    @pytest.mark.parametrize("address", [None, "", "0x0000000000000000000000000000000000000000"])
    def test_unknown_addresses(self, address: str | None) -> None:
        assert is_exchange_address(address) is False
        assert exchange_label(address) is None
