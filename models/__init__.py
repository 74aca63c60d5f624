"""
Lane Runner Models

Value types and validated schemas shared by the engine and the UI.
"""

from models.checkpoint import CheckpointResult, SegmentPhase
from models.schemas import GameConfig, GameSummary

__all__ = [
    "CheckpointResult",
    "SegmentPhase",
    "GameConfig",
    "GameSummary",
]
