import json
from pathlib import Path

import numpy as np
import pytest

from linemod_detector.loader import ModelLoader
from linemod_detector.model_store import DirectoryModelStore, FileDocument

from conftest import FakeEngine, npy_bytes, read_json_templates, save_document


def _save(store, object_id, n=1):
    return save_document(
        store.root,
        object_id,
        {
            "detector": ("detector.yml", json.dumps([[[[0, 0]]]] * n).encode("utf-8")),
            "Rs": ("Rs.npy", npy_bytes([np.eye(3)] * n)),
            "Ts": ("Ts.npy", npy_bytes([[[0.0], [0.0], [1.0]]] * n)),
        },
        name=f"{object_id} model",
    )


def test_read_document_fields_and_attachments(tmp_path: Path):
    store = DirectoryModelStore(tmp_path)
    doc_dir = _save(store, "mug")

    doc = FileDocument(doc_dir)
    assert doc.get_field("object_id") == "mug"
    assert doc.get_field("name") == "mug model"
    assert doc.get_attachment("Rs") == (doc_dir / "Rs.npy").read_bytes()


def test_missing_attachment_raises_key_error(tmp_path: Path):
    doc = FileDocument(_save(DirectoryModelStore(tmp_path), "mug"))
    with pytest.raises(KeyError):
        doc.get_attachment("depth")


def test_documents_are_filtered_by_object_id(tmp_path: Path):
    store = DirectoryModelStore(tmp_path)
    for oid in ("bowl", "mug", "cup"):
        _save(store, oid)
    (tmp_path / "not_a_model").mkdir()

    all_ids = [d.get_field("object_id") for d in DirectoryModelStore(tmp_path).documents()]
    some_ids = [d.get_field("object_id") for d in DirectoryModelStore(tmp_path, ["mug"]).documents()]

    assert all_ids == ["bowl", "cup", "mug"]
    assert some_ids == ["mug"]


def test_missing_store_root(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        list(DirectoryModelStore(tmp_path / "missing").documents())


def test_store_feeds_loader(tmp_path: Path):
    store = DirectoryModelStore(tmp_path)
    _save(store, "mug", n=3)
    engine = FakeEngine()

    poses = ModelLoader(engine, read_json_templates).load(store.documents())

    assert engine.template_count("mug") == poses.count("mug") == 3
