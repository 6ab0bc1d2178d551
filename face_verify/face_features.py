#!/usr/bin/env python3
"""
Face Feature Extraction Module
Turns a detected face region into a normalized identity descriptor by
aligning it with the recognizer and running the embedding model.

Created: 2025
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from .detectors.types import FaceRegion
from .errors import AlignmentFailed, FeatureExtractionFailed, InvariantViolation

logger = logging.getLogger(__name__)


class DescriptorExtractor:
    """Align + embed a face region with a recognizer capability"""

    def __init__(self, recognizer: Any):
        """
        Initialize descriptor extractor
        Args:
            recognizer: Object exposing ``align(image, region)`` and ``extract(aligned)``
        """
        self.recognizer = recognizer

    def extract(self, image: np.ndarray, region: FaceRegion) -> np.ndarray:
        """
        Extract the feature vector of one face
        Args:
            image: Frame the region was detected in (left untouched)
            region: Detected face region
        Returns:
            Flat float32 feature vector
        Raises:
            AlignmentFailed: Image or region geometry is unusable, or alignment failed
            FeatureExtractionFailed: The recognizer produced no usable embedding
        """
        if image is None or image.size == 0:
            raise AlignmentFailed("Cannot align a face in an empty image")

        height, width = image.shape[:2]
        if not region.is_within(width, height):
            raise AlignmentFailed(f"Face region {region.rect} is outside the {width}x{height} frame")

        aligned = self.recognizer.align(image, region)
        if aligned is None or np.asarray(aligned).size == 0:
            raise AlignmentFailed("Recognizer returned an empty aligned crop")

        feature = self.recognizer.extract(aligned)
        feature = np.asarray(feature, dtype=np.float32).reshape(-1)
        if feature.size == 0:
            raise FeatureExtractionFailed("Recognizer returned an empty feature vector")
        if not np.isfinite(feature).all():
            raise FeatureExtractionFailed("Recognizer returned a non-finite feature vector")

        logger.debug("Extracted %d-dim feature for region %s", feature.size, region.int_rect())
        return feature.copy()


def extract(image: np.ndarray, face_region: FaceRegion, detector: Any, recognizer: Any) -> np.ndarray:
    """
    Extract the feature vector of a face found by ``detector`` in ``image``
    Raises:
        InvariantViolation: The detector is sized for a different frame
    """
    if image is not None and image.size > 0:
        height, width = image.shape[:2]
        if tuple(detector.input_size) != (width, height):
            raise InvariantViolation(
                f"Region comes from a {detector.input_size[0]}x{detector.input_size[1]} "
                f"detection, image is {width}x{height}"
            )
    return DescriptorExtractor(recognizer).extract(image, face_region)
