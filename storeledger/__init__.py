"""Store Ledger: inventory and time-card tracking backend for retail stores."""

__version__ = "1.0.0"
