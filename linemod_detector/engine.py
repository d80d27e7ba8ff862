"""Template matching engines.

The detector only talks to :class:`TemplateEngine`; :class:`LinemodEngine`
adapts OpenCV's LINE-MOD implementation (``cv2.linemod``, opencv-contrib) to it.
"""

from __future__ import annotations

import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

import cv2

from .pose_types import Match

# cv2.linemod.getDefaultLINEMOD(): pyramid step of level 0, color + depth modalities
DEFAULT_PYRAMID_STEP = 5
DEFAULT_NUM_MODALITIES = 2


class TemplateEngine(ABC):
    @abstractmethod
    def register_template(self, class_id: str, template: Any) -> int:
        """Add one synthetic template under ``class_id`` and return its index."""
        ...

    @abstractmethod
    def match(self, sources: Sequence[Any], threshold: float) -> list[Match]: ...

    @abstractmethod
    def template_count(self, class_id: Optional[str] = None) -> int:
        """Templates held for ``class_id``, or in total when it is None."""
        ...

    @abstractmethod
    def get_templates(self, class_id: str, template_id: int) -> list[Any]:
        """Templates of one index: one per modality, repeated for each pyramid level."""
        ...

    def pyramid_step(self, level: int = 0) -> int:
        return DEFAULT_PYRAMID_STEP

    def num_modalities(self) -> int:
        """Modalities per template; get_templates may also return lower pyramid levels after them."""
        return DEFAULT_NUM_MODALITIES


class LinemodEngine(TemplateEngine):
    def __init__(self, detector=None):
        self._detector = detector if detector is not None else cv2.linemod.getDefaultLINEMOD()

    def register_template(self, class_id: str, template) -> int:
        template_id = self._detector.addSyntheticTemplate(template, class_id)
        if template_id < 0:
            raise ValueError(f"template rejected by LINE-MOD for class {class_id!r}")
        return int(template_id)

    def match(self, sources, threshold: float) -> list[Match]:
        raw, _quantized = self._detector.match(list(sources), float(threshold))
        return [
            Match(str(m.class_id), int(m.template_id), int(m.x), int(m.y), float(m.similarity))
            for m in raw
        ]

    def template_count(self, class_id: Optional[str] = None) -> int:
        if class_id is None:
            return int(self._detector.numTemplates())
        if class_id not in self._detector.classIds():
            return 0
        return int(self._detector.numTemplates(class_id))

    def get_templates(self, class_id: str, template_id: int) -> list:
        return list(self._detector.getTemplates(class_id, template_id))

    def pyramid_step(self, level: int = 0) -> int:
        return int(self._detector.getT(level))

    def num_modalities(self) -> int:
        return len(self._detector.getModalities())


def read_template_blob(blob: bytes) -> list[list]:
    """Decode a serialized LINE-MOD class file into its synthetic templates.

    ``blob`` is the text written by ``Detector.writeClasses`` for a single
    class (OpenCV FileStorage YAML). Returns one per-modality template list
    per template index, in stored order.
    """
    text = blob.decode("utf-8") if isinstance(blob, (bytes, bytearray)) else str(blob)
    fs = cv2.FileStorage(text, cv2.FILE_STORAGE_READ | cv2.FILE_STORAGE_MEMORY)
    try:
        class_id = fs.getNode("class_id").string()
    finally:
        fs.release()
    if not class_id:
        raise ValueError("template blob has no class_id")

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, f"templates_{class_id}.yml")
        with open(path, "w", encoding="utf-8") as fp:
            fp.write(text)
        detector = cv2.linemod.getDefaultLINEMOD()
        detector.readClasses([class_id], os.path.join(tmp, "templates_%s.yml"))

    return [
        list(detector.getTemplates(class_id, template_id))
        for template_id in range(detector.numTemplates(class_id))
    ]
