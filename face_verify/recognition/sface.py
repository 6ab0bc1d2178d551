"""SFace recognizer wrapper around ``cv2.FaceRecognizerSF``."""

from __future__ import annotations

import logging
import os

import cv2
import numpy as np

from ..detectors.types import FaceRegion
from ..errors import AlignmentFailed, CapabilityError, FeatureExtractionFailed, ModelLoadError

logger = logging.getLogger(__name__)


class SFaceRecognizer:
    """Align, embed and compare faces with the OpenCV SFace model."""

    def __init__(self, *, model_path: str, backend_id: int = 0, target_id: int = 0) -> None:
        if not os.path.exists(model_path):
            raise ModelLoadError(f"Face recognition model not found: {model_path}")

        self.model_path = model_path
        try:
            self._net = cv2.FaceRecognizerSF.create(model_path, "", backend_id, target_id)
        except cv2.error as exc:
            raise ModelLoadError(f"Could not load face recognizer {model_path}: {exc}") from exc

        logger.info("Loaded SFace recognizer from %s", model_path)

    def align(self, image: np.ndarray, region: FaceRegion) -> np.ndarray:
        if not region.has_landmarks:
            raise AlignmentFailed("SFace alignment needs five landmarks")
        try:
            aligned = self._net.alignCrop(image, region.to_row())
        except cv2.error as exc:
            raise CapabilityError(f"alignCrop failed: {exc}") from exc
        if aligned is None or aligned.size == 0:
            raise AlignmentFailed("alignCrop returned an empty crop")
        return aligned

    def extract(self, aligned: np.ndarray) -> np.ndarray:
        try:
            feature = self._net.feature(aligned)
        except cv2.error as exc:
            raise CapabilityError(f"feature() failed: {exc}") from exc
        if feature is None or feature.size == 0:
            raise FeatureExtractionFailed("feature() returned an empty embedding")
        return np.asarray(feature, dtype=np.float32).reshape(-1).copy()

    def cosine_similarity(self, feature_a: np.ndarray, feature_b: np.ndarray) -> float:
        return float(
            self._net.match(
                np.asarray(feature_a, dtype=np.float32).reshape(1, -1),
                np.asarray(feature_b, dtype=np.float32).reshape(1, -1),
                cv2.FaceRecognizerSF_FR_COSINE,
            )
        )
