import csv

import numpy as np

from .pose_types import PoseResult


class PoseCsvWriter:
    HEADER = [
        "frame_idx", "object_id", "similarity",
        "r00", "r01", "r02",
        "r10", "r11", "r12",
        "r20", "r21", "r22",
        "t_x", "t_y", "t_z",
    ]

    def __init__(self, csv_path: str):
        self.csv_path = csv_path
        self._opened = False
        self._fh = None
        self._w = None

    def open(self):
        self._fh = open(self.csv_path, "w", newline="")
        self._w = csv.writer(self._fh)
        self._w.writerow(self.HEADER)
        self._opened = True

    @staticmethod
    def _row(frame_idx, pose: PoseResult) -> list:
        r = np.asarray(pose.rotation, dtype=np.float64).reshape(-1).tolist()
        t = np.asarray(pose.translation, dtype=np.float64).reshape(-1).tolist()
        return [frame_idx, pose.object_id, f"{pose.similarity:.2f}", *r, *t]

    def append(self, frame_idx, pose: PoseResult):
        self._w.writerow(self._row(frame_idx, pose))

    def close(self):
        if self._opened and self._fh:
            self._fh.close()
            self._opened = False
            self._fh = None
            self._w = None
