"""Domain model for the service status snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True, slots=True)
class ServerStatus:
    version: str
    recipient: str
    rpc: str
    decimals: int
    store_reachable: bool
    chain_connected: bool
    pending_count: Optional[int] = None
    paid_count: Optional[int] = None
    supported_currencies: tuple[str, ...] = field(default_factory=tuple)
