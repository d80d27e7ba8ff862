from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterator, Optional


class ModelDocument(ABC):
    """One object's entry in the model store: plain fields plus binary attachments."""

    @abstractmethod
    def get_field(self, name: str) -> Any: ...

    @abstractmethod
    def get_attachment(self, name: str) -> bytes: ...


class MemoryDocument(ModelDocument):
    def __init__(self, fields: dict[str, Any], attachments: Optional[dict[str, bytes]] = None):
        self.fields = dict(fields)
        self.attachments = dict(attachments or {})

    def get_field(self, name: str) -> Any:
        return self.fields[name]

    def get_attachment(self, name: str) -> bytes:
        return self.attachments[name]


class FileDocument(ModelDocument):
    """Document stored as ``document.json`` plus attachment files beside it."""

    MANIFEST = "document.json"

    def __init__(self, doc_dir: Path):
        self.doc_dir = Path(doc_dir)
        with open(self.doc_dir / self.MANIFEST, "r", encoding="utf-8") as fp:
            raw = json.load(fp)
        if not isinstance(raw, dict):
            raise ValueError(f"{self.doc_dir / self.MANIFEST}: root must be an object")
        self.fields = raw
        self.attachment_files = dict(raw.get("attachments") or {})

    def get_field(self, name: str) -> Any:
        return self.fields[name]

    def get_attachment(self, name: str) -> bytes:
        filename = self.attachment_files[name]
        return (self.doc_dir / filename).read_bytes()


class DirectoryModelStore:
    """Model store laid out as ``<root>/<object dir>/document.json``."""

    def __init__(self, root: str | Path, object_ids: Optional[list[str]] = None):
        self.root = Path(root)
        self.object_ids = None if object_ids is None else {str(o) for o in object_ids}

    def documents(self) -> Iterator[FileDocument]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Model store not found: {self.root}")
        for doc_dir in sorted(p for p in self.root.iterdir() if p.is_dir()):
            if not (doc_dir / FileDocument.MANIFEST).exists():
                continue
            doc = FileDocument(doc_dir)
            if self.object_ids is not None and str(doc.fields.get("object_id")) not in self.object_ids:
                continue
            yield doc
