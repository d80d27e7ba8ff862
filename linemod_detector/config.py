from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Optional


@dataclass
class DetectorConfig:
    detector_name: str = "linemod"
    threshold: float = 93.0  # percent
    visualize: bool = False
    model_root: str = "models"
    object_ids: Optional[list[str]] = None
    window_name: str = "LINEMOD"
    max_color_height: Optional[int] = 960  # None disables downsampling
    feature_window: Optional[int] = None  # defaults to the engine's pyramid step

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    def apply_overrides(self, **kwargs: Any) -> "DetectorConfig":
        for key, value in kwargs.items():
            if value is not None and hasattr(self, key):
                setattr(self, key, value)
        return self


def _normalize_object_ids(value: Any) -> Optional[list[str]]:
    if value is None:
        return None
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value]
    if isinstance(value, str):
        return [value]
    raise ValueError("object_ids must be a string or a list of strings")


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        import yaml  # type: ignore
    except Exception as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "YAML config requested but PyYAML is not installed. "
            "Install with: pip install pyyaml"
        ) from exc
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError("YAML config root must be a mapping")
    return data


def load_config(path: str | Path) -> DetectorConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")

    if p.suffix.lower() in {".yaml", ".yml"}:
        raw = _load_yaml(p)
    else:
        with p.open("r", encoding="utf-8") as fp:
            raw = json.load(fp)

    if not isinstance(raw, dict):
        raise ValueError("Config root must be a JSON/YAML object")

    cfg = DetectorConfig()
    cfg.detector_name = str(raw.get("detector_name", cfg.detector_name))
    cfg.threshold = float(raw.get("threshold", cfg.threshold))
    cfg.visualize = bool(raw.get("visualize", cfg.visualize))
    cfg.model_root = str(raw.get("model_root", cfg.model_root))
    cfg.object_ids = _normalize_object_ids(raw.get("object_ids", cfg.object_ids))
    cfg.window_name = str(raw.get("window_name", cfg.window_name))
    cfg.max_color_height = raw.get("max_color_height", cfg.max_color_height)
    if cfg.max_color_height is not None:
        cfg.max_color_height = int(cfg.max_color_height)
    cfg.feature_window = raw.get("feature_window", cfg.feature_window)
    if cfg.feature_window is not None:
        cfg.feature_window = int(cfg.feature_window)
    return cfg
