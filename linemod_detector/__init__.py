"""LINE-MOD multi-modal object detection cell."""

from .config import DetectorConfig, load_config
from .detector import LinemodDetector
from .errors import InvariantViolation, LoadError
from .pose_types import Frame, Match, PoseResult

__all__ = [
    "DetectorConfig",
    "load_config",
    "LinemodDetector",
    "LoadError",
    "InvariantViolation",
    "Frame",
    "Match",
    "PoseResult",
]
