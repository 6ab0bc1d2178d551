"""YuNet face detector wrapper around ``cv2.FaceDetectorYN``."""

from __future__ import annotations

import logging
import os
from typing import List, Tuple

import cv2
import numpy as np

from ..errors import CapabilityError, InvariantViolation, ModelLoadError
from .types import FaceRegion

logger = logging.getLogger(__name__)


class YuNetDetector:
    """Detector pre-sized to one input resolution at a time."""

    def __init__(
        self,
        *,
        model_path: str,
        input_size: Tuple[int, int] = (320, 320),
        score_threshold: float = 0.9,
        nms_threshold: float = 0.3,
        top_k: int = 5000,
        backend_id: int = 0,
        target_id: int = 0,
    ) -> None:
        if not os.path.exists(model_path):
            raise ModelLoadError(f"Face detection model not found: {model_path}")

        self.model_path = model_path
        self.score_threshold = score_threshold
        self.nms_threshold = nms_threshold
        self.top_k = top_k
        self._input_size = (int(input_size[0]), int(input_size[1]))

        try:
            self._net = cv2.FaceDetectorYN.create(
                model_path,
                "",
                self._input_size,
                score_threshold,
                nms_threshold,
                top_k,
                backend_id,
                target_id,
            )
        except cv2.error as exc:
            raise ModelLoadError(f"Could not load face detector {model_path}: {exc}") from exc

        logger.info("Loaded YuNet face detector from %s", model_path)

    @property
    def input_size(self) -> Tuple[int, int]:
        """Configured (width, height)."""
        return self._input_size

    def set_input_size(self, size: Tuple[int, int]) -> None:
        width, height = int(size[0]), int(size[1])
        if width <= 0 or height <= 0:
            raise InvariantViolation(f"Invalid detector input size: {width}x{height}")
        self._net.setInputSize((width, height))
        self._input_size = (width, height)
        logger.debug("Detector input size set to %dx%d", width, height)

    def detect(self, frame: np.ndarray) -> List[FaceRegion]:
        """
        Detect faces in a frame of exactly ``input_size`` dimensions
        Args:
            frame: BGR image
        Returns:
            Regions in detector order, possibly empty
        """
        height, width = frame.shape[:2]
        if (width, height) != self._input_size:
            raise InvariantViolation(
                f"Frame is {width}x{height} but detector is configured for "
                f"{self._input_size[0]}x{self._input_size[1]}"
            )

        try:
            _, faces = self._net.detect(frame)
        except cv2.error as exc:
            raise CapabilityError(f"Face detection failed: {exc}") from exc

        if faces is None or len(faces) == 0:
            return []
        return [FaceRegion.from_row(row) for row in faces]
