"""Trade Intel - rule-based trade scoring and on-chain whale intelligence."""

__version__ = "0.1.0"
