"""Static registry of known exchange and router addresses (Ethereum mainnet)."""

from __future__ import annotations

# Lowercased address -> display label
KNOWN_EXCHANGE_ADDRESSES: dict[str, str] = {
    "0x3fc91a3afd70395cd496c647d5a6cc9d4b2b7fad": "Uniswap",
    "0x7a250d5630b4cf539739df2c5dacb4c659f2488d": "Uniswap Router",
    "0xe592427a0aece92de3edee1f18e0157c05861564": "Uniswap V3",
    "0xf977814e90da44bfa03b6295a0616a897441acec": "Alameda Research",
    "0x3f5ce5fbfe3e9af3971dd833d26ba9b5c936f0be": "Binance",
    "0xd551234ae421e3bcba99a0da6d736074f22192ff": "Binance",
    "0x564286362092d8e7936f0549571a803b203aced": "Binance",
    "0x0681d8db095565fe8a346fa0277bffde9c0edbf": "Kraken",
    "0x267be1c1d684f78cb4f6a176c4911b741e4ffdc0": "Kraken",
    "0x6262998ced04146fa42253a5c0af90ca02dfd2a3": "Coinbase",
    "0x503828976d22510aad0201ac7ec88293211d23da": "Coinbase",
    "0xddfabcdc4d8ffc6d5beaf154f18b778f892a0740": "Coinbase",
    "0x71660c4005ba85c37ccec55d0c4493e66fe775d3": "Coinbase",
    "0xa910f92acdaf488fa6ef02174fb86208ad7722ba": "Coinbase",
    "0x9696f59e4d72e237be84ffd425dcad154bf96976": "Coinbase",
}

EXCHANGE_ADDRESSES = frozenset(KNOWN_EXCHANGE_ADDRESSES)


def is_exchange_address(address: str | None) -> bool:
    """Return True if the address belongs to a known exchange (case-insensitive)."""
    if not address:
        return False
    return address.lower() in EXCHANGE_ADDRESSES


def exchange_label(address: str | None) -> str | None:
    """Return the exchange's display label, or None if not an exchange."""
    if not address:
        return None
    return KNOWN_EXCHANGE_ADDRESSES.get(address.lower())
