"""
Line protocol spoken with the driving process.

The dispatcher lives in ``annex_mega.protocol.dispatcher``; it depends on the
services, which themselves use the channel and messages defined here.
"""

from annex_mega.protocol.channel import AnnexChannel, open_stdin_reader

__all__ = [
    "AnnexChannel",
    "open_stdin_reader",
]
