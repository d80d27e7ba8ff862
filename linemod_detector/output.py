from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .csv_writer import PoseCsvWriter
from .pose_types import PoseResult


class OutputSink(ABC):
    @abstractmethod
    def open(self, out_dir: Path) -> None: ...

    @abstractmethod
    def write_pose(self, frame_idx: int, pose: PoseResult) -> None: ...

    @abstractmethod
    def close(self) -> None: ...


class CsvOutput(OutputSink):
    def __init__(self, filename: str = "poses.csv"):
        self.filename = filename
        self.path: Optional[Path] = None
        self._writer: Optional[PoseCsvWriter] = None

    def open(self, out_dir: Path) -> None:
        Path(out_dir).mkdir(parents=True, exist_ok=True)
        self.path = Path(out_dir) / self.filename
        self._writer = PoseCsvWriter(str(self.path))
        self._writer.open()

    def write_pose(self, frame_idx: int, pose: PoseResult) -> None:
        if self._writer is None:
            return
        self._writer.append(frame_idx, pose)

    def close(self) -> None:
        if self._writer is not None:
            self._writer.close()
            self._writer = None


class NullOutput(OutputSink):
    def open(self, out_dir: Path) -> None:
        return None

    def write_pose(self, frame_idx: int, pose: PoseResult) -> None:
        return None

    def close(self) -> None:
        return None
