from __future__ import annotations

import logging
from typing import Iterable, Optional

import numpy as np

from .config import DetectorConfig
from .engine import LinemodEngine, TemplateEngine, read_template_blob
from .loader import ModelLoader, PoseTable, TemplateReader
from .logging_utils import setup_logger
from .model_store import DirectoryModelStore, ModelDocument
from .pose import synthesize_pose
from .pose_types import Frame, PoseResult
from .preprocess import BoundedHeight, PassThrough, PreprocessStrategy
from .visualize import ResponseVisualizer


class LinemodDetector:
    """
    Multi-modal (color + depth) LINE-MOD object detector.

    The engine and pose table are filled once, before the first frame, and
    only read while processing frames.
    """

    def __init__(
        self,
        config: DetectorConfig,
        engine: TemplateEngine,
        poses: PoseTable,
        logger: Optional[logging.Logger] = None,
        preprocess: Optional[PreprocessStrategy] = None,
        visualizer: Optional[ResponseVisualizer] = None,
    ):
        self.config = config
        self.engine = engine
        self.poses = poses
        self.logger = logger or setup_logger(config.detector_name)
        if preprocess is None:
            if config.max_color_height is None:
                preprocess = PassThrough()
            else:
                preprocess = BoundedHeight(config.max_color_height)
        self.preprocess = preprocess
        self.visualizer = visualizer or ResponseVisualizer(config.window_name, self.logger)
        self.last_display: Optional[np.ndarray] = None

    @classmethod
    def from_documents(
        cls,
        config: DetectorConfig,
        documents: Iterable[ModelDocument],
        engine: Optional[TemplateEngine] = None,
        template_reader: TemplateReader = read_template_blob,
        logger: Optional[logging.Logger] = None,
    ) -> "LinemodDetector":
        """Load every document into an empty engine and build a detector on it.

        ``engine`` defaults to a new LINE-MOD engine. An injected engine must
        be empty and must be discarded by the caller when loading fails.

        Raises:
            ValueError: the injected engine already holds templates
            LoadError: a document is missing or has malformed data; no
                detector is built
        """
        logger = logger or setup_logger(config.detector_name)
        if engine is None:
            engine = LinemodEngine()
        elif engine.template_count() != 0:
            raise ValueError("engine must be empty before loading models")
        poses = ModelLoader(engine, template_reader, logger).load(documents)
        if len(poses) == 0:
            logger.info("no objects loaded; detection will return no poses")
        return cls(config, engine, poses, logger=logger)

    @classmethod
    def from_store(cls, config: DetectorConfig, **kwargs) -> "LinemodDetector":
        store = DirectoryModelStore(config.model_root, config.object_ids)
        return cls.from_documents(config, store.documents(), **kwargs)

    def _feature_window(self) -> int:
        if self.config.feature_window is not None:
            return self.config.feature_window
        return self.engine.pyramid_step(0)

    def process_frame(self, frame: Frame) -> list[PoseResult]:
        f = self.preprocess.apply(frame)

        if self.engine.template_count() == 0:
            self.logger.info("frame=%d no templates registered, skipping match", f.idx)
            return []

        matches = self.engine.match([f.color, f.depth], self.config.threshold)

        results: list[PoseResult] = []
        for match in matches:
            results.append(synthesize_pose(match, self.poses))

        if self.config.visualize:
            self._visualize(f, matches)

        self.logger.info("frame=%d matches=%d", f.idx, len(results))
        return results

    def _visualize(self, f: Frame, matches) -> None:
        display = f.color.copy()
        try:
            T = self._feature_window()
            num_modalities = self.engine.num_modalities()
            for match in matches:
                templates = self.engine.get_templates(match.class_id, match.template_id)
                self.visualizer.draw(display, templates, num_modalities, (match.x, match.y), T)
            self.last_display = display
            self.visualizer.show(display)
        except Exception as e:
            # Debug view only; poses are already built.
            self.logger.warning("visualization failed: %s", e)
