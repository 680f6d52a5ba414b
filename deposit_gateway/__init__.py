"""Non-custodial deposit gateway: per-order derived accounts and invoice tracking."""

__version__ = "0.3.0"
