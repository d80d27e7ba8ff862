from __future__ import annotations

import io
import logging
from typing import Callable, Iterable, Optional

import numpy as np

from .engine import TemplateEngine, read_template_blob
from .errors import InvariantViolation, LoadError
from .model_store import ModelDocument

TemplateReader = Callable[[bytes], list]


class PoseTable:
    """Reference rotations/translations per object, one entry per template index."""

    def __init__(self):
        self.rotations: dict[str, list[np.ndarray]] = {}
        self.translations: dict[str, list[np.ndarray]] = {}

    def __contains__(self, object_id: str) -> bool:
        return object_id in self.rotations

    def __len__(self) -> int:
        return len(self.rotations)

    def add(self, object_id: str, rotations: list[np.ndarray], translations: list[np.ndarray]) -> None:
        self.rotations[object_id] = rotations
        self.translations[object_id] = translations

    def count(self, object_id: str) -> int:
        return len(self.rotations.get(object_id, ()))

    def lookup(self, object_id: str, template_id: int) -> tuple[np.ndarray, np.ndarray]:
        try:
            if template_id < 0:
                raise IndexError(template_id)
            return (
                self.rotations[object_id][template_id],
                self.translations[object_id][template_id],
            )
        except (KeyError, IndexError) as exc:
            raise InvariantViolation(
                f"no pose for object {object_id!r} template {template_id}"
            ) from exc


def _decode_matrices(object_id: str, name: str, blob: bytes, shape: tuple[int, int]) -> list[np.ndarray]:
    try:
        arr = np.load(io.BytesIO(blob), allow_pickle=False)
    except (ValueError, OSError, EOFError) as exc:
        raise LoadError(object_id, f"attachment {name!r} is not a numpy array: {exc}") from exc

    arr = np.asarray(arr, dtype=np.float64)
    rows, cols = shape
    if arr.ndim == 2 and cols == 1 and arr.shape[1] == rows:
        arr = arr.reshape(-1, rows, 1)
    if arr.ndim != 3 or arr.shape[1:] != shape:
        raise LoadError(
            object_id,
            f"attachment {name!r} has shape {arr.shape}, expected (N, {rows}, {cols})",
        )
    return [m.copy() for m in arr]


class ModelLoader:
    """Fills a template engine and a pose table from model documents."""

    def __init__(
        self,
        engine: TemplateEngine,
        template_reader: TemplateReader = read_template_blob,
        logger: Optional[logging.Logger] = None,
    ):
        self.engine = engine
        self.template_reader = template_reader
        self.logger = logger or logging.getLogger("linemod_detector.loader")

    def _attachment(self, doc: ModelDocument, object_id: str, name: str) -> bytes:
        try:
            blob = doc.get_attachment(name)
        except (KeyError, OSError) as exc:
            raise LoadError(object_id, f"missing attachment {name!r}") from exc
        if not blob:
            raise LoadError(object_id, f"attachment {name!r} is empty")
        return blob

    def _read_document(self, doc: ModelDocument):
        try:
            object_id = doc.get_field("object_id")
        except KeyError as exc:
            raise LoadError(None, "document has no 'object_id' field") from exc
        if not isinstance(object_id, str) or not object_id:
            raise LoadError(object_id, "'object_id' must be a non-empty string")

        blob = self._attachment(doc, object_id, "detector")
        try:
            templates = list(self.template_reader(blob))
        except Exception as exc:
            raise LoadError(object_id, f"attachment 'detector' could not be decoded: {exc}") from exc
        if not templates:
            raise LoadError(object_id, "attachment 'detector' holds no templates")

        rotations = _decode_matrices(object_id, "Rs", self._attachment(doc, object_id, "Rs"), (3, 3))
        translations = _decode_matrices(object_id, "Ts", self._attachment(doc, object_id, "Ts"), (3, 1))
        if not len(rotations) == len(translations) == len(templates):
            raise LoadError(
                object_id,
                f"{len(templates)} templates but {len(rotations)} Rs and {len(translations)} Ts",
            )
        return object_id, templates, rotations, translations

    def load(self, documents: Iterable[ModelDocument], poses: Optional[PoseTable] = None) -> PoseTable:
        poses = poses if poses is not None else PoseTable()
        for doc in documents:
            object_id, templates, rotations, translations = self._read_document(doc)
            if object_id in poses:
                raise LoadError(object_id, "object loaded twice")

            first = self.engine.template_count(object_id)
            if first != 0:
                raise LoadError(object_id, f"engine already holds {first} templates for this object")
            for offset, template in enumerate(templates):
                try:
                    template_id = self.engine.register_template(object_id, template)
                except Exception as exc:
                    raise LoadError(object_id, f"template {offset} rejected: {exc}") from exc
                if template_id != first + offset:
                    raise LoadError(
                        object_id,
                        f"engine assigned index {template_id}, expected {first + offset}",
                    )

            poses.add(object_id, rotations, translations)
            self.logger.info("Loaded %s (%d templates)", object_id, len(templates))
        return poses
