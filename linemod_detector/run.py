import argparse
import sys
from pathlib import Path
from typing import Optional

import cv2

from .config import DetectorConfig, load_config
from .detector import LinemodDetector
from .errors import LoadError
from .logging_utils import add_file_handler, setup_logger
from .output import CsvOutput, NullOutput, OutputSink
from .pose_types import Frame


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Detect objects in a color/depth image pair with LINE-MOD")
    ap.add_argument("--config", help="Path to JSON/YAML config")
    ap.add_argument("--color", required=True, help="Color image (3-channel)")
    ap.add_argument("--depth", required=True, help="16-bit depth image")

    ap.add_argument("--models", help="Model store directory")
    ap.add_argument("--object-ids", nargs="+")
    ap.add_argument("--threshold", type=float)
    ap.add_argument("--visualize", action="store_true")
    ap.add_argument("--out", help="Directory for poses.csv")
    ap.add_argument("--log-file")

    return ap


def _apply_args(cfg: DetectorConfig, args: argparse.Namespace) -> DetectorConfig:
    cfg.apply_overrides(
        model_root=args.models,
        object_ids=args.object_ids,
        threshold=args.threshold,
        visualize=True if args.visualize else None,
    )
    return cfg


def _read_frame(color_path: str, depth_path: str) -> Optional[Frame]:
    color = cv2.imread(color_path, cv2.IMREAD_COLOR)
    depth = cv2.imread(depth_path, cv2.IMREAD_ANYDEPTH)
    if color is None or depth is None:
        return None
    return Frame(color, depth, idx=1)


def main(argv=None) -> int:
    ap = _build_parser()
    args = ap.parse_args(argv)

    cfg = load_config(args.config) if args.config else DetectorConfig()
    cfg = _apply_args(cfg, args)

    logger = setup_logger(cfg.detector_name)
    if args.log_file:
        add_file_handler(logger, cfg.detector_name, args.log_file)
    logger.info("config: %s", cfg.as_dict())

    try:
        detector = LinemodDetector.from_store(cfg, logger=logger)
    except (LoadError, FileNotFoundError) as e:
        logger.error("model load failed: %s", e)
        return 2

    frame = _read_frame(args.color, args.depth)
    if frame is None:
        logger.error("could not read images %s / %s", args.color, args.depth)
        return 1

    out: OutputSink = CsvOutput() if args.out else NullOutput()
    out.open(Path(args.out) if args.out else Path("."))
    try:
        poses = detector.process_frame(frame)
        for pose in poses:
            out.write_pose(frame.idx, pose)
            print(
                f"{pose.object_id} similarity={pose.similarity:.1f} "
                f"t={pose.translation.reshape(-1).round(4).tolist()}"
            )
    finally:
        out.close()

    logger.info("summary poses=%d", len(poses))
    return 0


if __name__ == "__main__":
    sys.exit(main())
