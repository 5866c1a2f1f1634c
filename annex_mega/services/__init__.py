"""
Business logic services for annex-mega.
"""

from annex_mega.services.directory_service import DirectoryService
from annex_mega.services.session_service import Session, SessionService, SessionState
from annex_mega.services.shard_service import ShardService
from annex_mega.services.transfer_service import TransferService

__all__ = [
    "DirectoryService",
    "Session",
    "SessionService",
    "SessionState",
    "ShardService",
    "TransferService",
]
