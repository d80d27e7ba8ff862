from __future__ import annotations

import logging
from typing import Optional, Sequence

import cv2
import numpy as np

# BGR, one per modality: blue, green, yellow, orange, red
MODALITY_COLORS = (
    (255, 0, 0),
    (0, 255, 0),
    (0, 255, 255),
    (0, 140, 255),
    (0, 0, 255),
)


def draw_response(
    templates: Sequence,
    num_modalities: int,
    dst: np.ndarray,
    offset: tuple[int, int],
    T: int,
) -> np.ndarray:
    """Draw every feature of a matched template, colored by modality."""
    ox, oy = offset
    for m in range(min(num_modalities, len(templates), len(MODALITY_COLORS))):
        color = MODALITY_COLORS[m]
        for f in templates[m].features:
            cv2.circle(dst, (int(f.x) + ox, int(f.y) + oy), T // 2, color)
    return dst


class ResponseVisualizer:
    """Debug view of the matches of one detection cycle."""

    def __init__(self, window_name: str = "LINEMOD", logger: Optional[logging.Logger] = None):
        self.window_name = window_name
        self.logger = logger or logging.getLogger("linemod_detector.visualize")
        self._window_ok = True

    def draw(
        self,
        display: np.ndarray,
        templates: Sequence,
        num_modalities: int,
        offset: tuple[int, int],
        T: int,
    ) -> None:
        draw_response(templates, num_modalities, display, offset, T)

    def show(self, display: np.ndarray) -> None:
        if not self._window_ok:
            return
        try:
            cv2.namedWindow(self.window_name)
            cv2.imshow(self.window_name, display)
            cv2.waitKey(1)
        except cv2.error as e:
            # No GUI backend; keep detecting without the window.
            self._window_ok = False
            self.logger.warning("visualization disabled: %s", e)
