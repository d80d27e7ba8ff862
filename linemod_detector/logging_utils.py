import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(detector)s] %(message)s"


class DetectorNameFilter(logging.Filter):
    """Stamps every record with the detector instance it came from."""

    def __init__(self, detector_name: str):
        super().__init__()
        self.detector_name = detector_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.detector = self.detector_name
        return True


def _attach(logger: logging.Logger, handler: logging.Handler, detector_name: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(DetectorNameFilter(detector_name))
    logger.addHandler(handler)
    return handler


def setup_logger(detector_name: str, level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(f"linemod_detector.{detector_name}")
    logger.setLevel(level)
    if not logger.handlers:
        _attach(logger, logging.StreamHandler(), detector_name)
    return logger


def add_file_handler(logger: logging.Logger, detector_name: str, log_path: str) -> logging.Handler:
    return _attach(logger, logging.FileHandler(log_path), detector_name)
