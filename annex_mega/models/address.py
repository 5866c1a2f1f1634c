"""
Address models: parsed locations in the remote tree.
"""

from dataclasses import dataclass
from enum import StrEnum

from annex_mega.models.node import RemoteNode


class Root(StrEnum):
    """Well-known roots of the remote tree."""

    PRIMARY = "mega"
    TRASH = "trash"


@dataclass(frozen=True, kw_only=True)
class Address:
    """
    A root selector plus an ordered list of path segments.

    An address with no segments denotes the root itself.
    """

    root: Root
    segments: tuple[str, ...] = ()

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def name(self) -> str:
        """Last segment, or an empty string for the root."""
        return self.segments[-1] if self.segments else ""

    @property
    def parent(self) -> "Address":
        """Address one level up. The parent of a root is the root."""
        return Address(root=self.root, segments=self.segments[:-1])

    def __str__(self) -> str:
        return f"{self.root}:/" + "/".join(self.segments)


@dataclass(frozen=True, kw_only=True)
class Resolution:
    """
    Outcome of looking an address up in the remote store.

    ``nodes`` holds the matched nodes ordered from shallowest to deepest. The
    match is partial when fewer nodes than segments were found.
    """

    address: Address
    root: RemoteNode
    nodes: tuple[RemoteNode, ...] = ()

    @property
    def matched(self) -> int:
        return len(self.nodes)

    @property
    def is_complete(self) -> bool:
        return self.matched == len(self.address.segments)

    @property
    def deepest(self) -> RemoteNode:
        """Deepest matched node, or the root when nothing matched."""
        return self.nodes[-1] if self.nodes else self.root

    @property
    def missing(self) -> tuple[str, ...]:
        """Segments that do not exist yet, in order."""
        return self.address.segments[self.matched :]
