"""
pipesh IPC Module

Provides the channel that joins the two stages of a pipeline.
"""

from .pipe import Channel

__all__ = [
    'Channel',
]
