"""
Domain models for annex-mega.

These are immutable (frozen) dataclasses representing the core domain concepts.
"""

from annex_mega.models.address import Address, Resolution, Root
from annex_mega.models.node import NodeType, RemoteNode
from annex_mega.models.transfer import Direction, TransferRequest

__all__ = [
    # Remote tree
    "NodeType",
    "RemoteNode",
    # Addresses
    "Root",
    "Address",
    "Resolution",
    # Transfers
    "Direction",
    "TransferRequest",
]
