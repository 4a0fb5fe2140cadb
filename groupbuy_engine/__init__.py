"""Group-buy discount tier, progress and pricing engine."""

__version__ = "0.1.0"
