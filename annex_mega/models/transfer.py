"""
Transfer request models.
"""

from dataclasses import dataclass
from enum import StrEnum


class Direction(StrEnum):
    """Direction of a TRANSFER command."""

    STORE = "STORE"
    RETRIEVE = "RETRIEVE"


@dataclass(frozen=True, kw_only=True)
class TransferRequest:
    """
    A single TRANSFER command.

    Attributes:
        key: Content key supplied by the driver.
        local_path: Local file as written by the driver. Kept as text because a
            trailing separator is meaningful for RETRIEVE.
        direction: STORE uploads, RETRIEVE downloads.
    """

    key: str
    local_path: str
    direction: Direction
