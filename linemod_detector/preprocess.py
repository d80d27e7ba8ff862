from abc import ABC, abstractmethod

import cv2

from .pose_types import Frame

MAX_COLOR_HEIGHT = 960


class PreprocessStrategy(ABC):
    @abstractmethod
    def apply(self, f: Frame) -> Frame: ...


class PassThrough(PreprocessStrategy):
    """Used when no color height bound is configured."""

    def apply(self, f: Frame) -> Frame:
        return f


class BoundedHeight(PreprocessStrategy):
    """Halve the color image once when it is taller than ``max_height``.

    Depth is passed through at its original resolution.
    """

    def __init__(self, max_height: int = MAX_COLOR_HEIGHT):
        self.max_height = max_height

    def apply(self, f: Frame) -> Frame:
        if f.color.shape[0] <= self.max_height:
            return f
        small = cv2.pyrDown(f.color)
        return Frame(small, f.depth, f.idx, f.ts_iso)
