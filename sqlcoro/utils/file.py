import logging
from typing import Any, Dict, Optional

from chardet.universaldetector import UniversalDetector

logger = logging.getLogger(__name__)


def detect_encoding(file_path: str, max_lines: Optional[int] = None) -> Dict[str, Any]:
    """
    Detect file encoding using chardet UniversalDetector

    :param file_path: path to file to detect
    :param max_lines: stop feeding the detector after this many lines. Reads until
    the detector is confident if left undefined.
    :return: result from detector, e.g. `{"encoding": "utf-8", "confidence": 0.99}`
    """
    detector = UniversalDetector()
    with open(file_path, "rb") as f:
        for line_number, line in enumerate(f, start=1):
            detector.feed(line)
            if detector.done or (max_lines is not None and line_number >= max_lines):
                break
    result = detector.close()
    logger.debug(f"Detected encoding of `{file_path}`: {result}")
    return result
