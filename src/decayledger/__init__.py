"""decayledger: balances that decay continuously at a fixed rate."""

__version__ = "0.1.0"
