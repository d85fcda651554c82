"""
服务层模块
"""

from .live_coordinator import LiveCoordinator
from .websocket_service import WebSocketManager
from .vote_ledger import VoteLedger
from .session_registry import SessionRegistry
from .vote_guard import VoteAdmissionGuard
from .vote_aggregator import VoteAggregator
from .presence_service import PresenceTracker

__all__ = [
    "LiveCoordinator",
    "WebSocketManager",
    "VoteLedger",
    "SessionRegistry",
    "VoteAdmissionGuard",
    "VoteAggregator",
    "PresenceTracker",
]
