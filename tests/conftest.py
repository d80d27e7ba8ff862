import io
import json
from pathlib import Path
from types import SimpleNamespace

import numpy as np
import pytest

from linemod_detector.engine import TemplateEngine
from linemod_detector.model_store import MemoryDocument
from linemod_detector.pose_types import Match


class FakeEngine(TemplateEngine):
    """In-memory engine returning canned matches."""

    def __init__(self, matches=None, step=8, modalities=2):
        self.templates = {}
        self.matches = list(matches or [])
        self.match_calls = []
        self.step = step
        self.modalities = modalities

    def register_template(self, class_id, template):
        self.templates.setdefault(class_id, []).append(template)
        return len(self.templates[class_id]) - 1

    def match(self, sources, threshold):
        self.match_calls.append((list(sources), threshold))
        return list(self.matches)

    def template_count(self, class_id=None):
        if class_id is None:
            return sum(len(t) for t in self.templates.values())
        return len(self.templates.get(class_id, []))

    def get_templates(self, class_id, template_id):
        return self.templates[class_id][template_id]

    def pyramid_step(self, level=0):
        return self.step

    def num_modalities(self):
        return self.modalities


def make_template(points_per_modality):
    """One per-modality template list with features at the given points."""
    return [
        SimpleNamespace(features=[SimpleNamespace(x=x, y=y) for x, y in points])
        for points in points_per_modality
    ]


def read_json_templates(blob):
    """Test template reader: JSON list of templates, each a list of per-modality point lists."""
    return [make_template(t) for t in json.loads(blob.decode("utf-8"))]


def save_document(root, object_id, attachments, **fields):
    """Write a model directory; ``attachments`` maps name -> (filename, payload)."""
    doc_dir = Path(root) / object_id
    doc_dir.mkdir(parents=True, exist_ok=True)
    for filename, payload in attachments.values():
        (doc_dir / filename).write_bytes(payload)
    meta = dict(fields)
    meta["object_id"] = object_id
    meta["attachments"] = {name: filename for name, (filename, _) in attachments.items()}
    (doc_dir / "document.json").write_text(json.dumps(meta, indent=2), encoding="utf-8")
    return doc_dir


def npy_bytes(arr):
    buf = io.BytesIO()
    np.save(buf, np.asarray(arr, dtype=np.float64))
    return buf.getvalue()


def make_document(object_id, rotations, translations, templates=None):
    if templates is None:
        templates = [[[[1, 2], [3, 4]], [[5, 6]]] for _ in rotations]
    return MemoryDocument(
        {"object_id": object_id},
        {
            "detector": json.dumps(templates).encode("utf-8"),
            "Rs": npy_bytes(rotations),
            "Ts": npy_bytes(translations),
        },
    )


@pytest.fixture
def mug_document():
    I = np.eye(3)
    return make_document(
        "mug",
        [I, I],
        [[[0.0], [0.0], [1.0]], [[0.0], [1.0], [0.0]]],
    )


@pytest.fixture
def mug_match():
    return Match("mug", 0, 10, 20, 95.5)
