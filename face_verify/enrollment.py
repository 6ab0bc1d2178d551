#!/usr/bin/env python3
"""
Enrollment Module
Computes the known identity's feature vector once from a reference image

Created: 2025
"""

from __future__ import annotations

import logging
import os
from typing import Any

import cv2
import numpy as np

from .detectors.types import select_face
from .errors import NoFaceInReference, ReferenceImageMissing
from .face_features import DescriptorExtractor

logger = logging.getLogger(__name__)


def load_reference_image(path: str) -> np.ndarray:
    """
    Load the reference photo
    Args:
        path: Image file path
    Returns:
        BGR image
    Raises:
        ReferenceImageMissing: File is missing, unreadable or empty
    """
    if not path or not os.path.isfile(path):
        raise ReferenceImageMissing(f"{path} not found!")

    image = cv2.imread(path, cv2.IMREAD_COLOR)
    if image is None or image.size == 0:
        raise ReferenceImageMissing(f"{path} could not be read as an image")
    return image


def enroll(
    reference_image_path: str,
    detector: Any,
    recognizer: Any,
    *,
    selection: str = "first",
) -> np.ndarray:
    """
    Enroll the single known identity
    Args:
        reference_image_path: Reference photo containing the identity
        detector: Face detector capability (``set_input_size`` / ``detect``)
        recognizer: Face recognizer capability (``align`` / ``extract``)
        selection: Face selection policy when several faces are found
    Returns:
        Read-only known feature vector
    Raises:
        ReferenceImageMissing, NoFaceInReference, AlignmentFailed, FeatureExtractionFailed
    """
    image = load_reference_image(reference_image_path)
    height, width = image.shape[:2]
    detector.set_input_size((width, height))

    faces = detector.detect(image)
    if not faces:
        raise NoFaceInReference(f"No face found in {reference_image_path}")
    if len(faces) > 1:
        logger.info(
            "%d faces in %s, using the %s one",
            len(faces),
            reference_image_path,
            "first detected" if selection == "first" else "most confident",
        )

    region = select_face(faces, selection)
    feature = DescriptorExtractor(recognizer).extract(image, region)
    feature.setflags(write=False)

    logger.info("Enrolled %d-dim feature from %s", feature.size, reference_image_path)
    return feature
