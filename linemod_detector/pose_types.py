from dataclasses import dataclass
from typing import Any, Optional

import numpy as np


@dataclass
class Frame:
    color: Any  # HxWx3 uint8 ndarray
    depth: Any  # HxW uint16 ndarray
    idx: int = 0
    ts_iso: Optional[str] = None


@dataclass
class Match:
    class_id: str
    template_id: int
    x: int
    y: int
    similarity: float


@dataclass
class PoseResult:
    object_id: str
    rotation: np.ndarray  # (3,3)
    translation: np.ndarray  # (3,1)
    similarity: float = 0.0
