from .client import ChainClient, ChainClientError, OfflineChainClient

__all__ = ["ChainClient", "ChainClientError", "OfflineChainClient"]
