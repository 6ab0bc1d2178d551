"""Draw the face box and verdict onto a copy of a frame."""

from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from .detectors.types import FaceRegion

FONT = cv2.FONT_HERSHEY_SIMPLEX
DEFAULT_COLOR = (0, 255, 0)


def annotate(
    frame: np.ndarray,
    region: FaceRegion,
    verdict_text: str,
    *,
    color: Tuple[int, int, int] = DEFAULT_COLOR,
    thickness: int = 2,
    font_scale: float = 0.8,
    show_landmarks: bool = False,
) -> np.ndarray:
    result = frame.copy()
    x, y, w, h = region.int_rect()
    cv2.rectangle(result, (x, y), (x + w, y + h), color, thickness, cv2.LINE_8)

    if show_landmarks and region.landmark:
        for lx, ly in region.landmark:
            cv2.circle(result, (int(lx), int(ly)), 2, (0, 255, 255), -1)

    # keep the label inside the frame
    (text_width, text_height), baseline = cv2.getTextSize(verdict_text, FONT, font_scale, thickness)
    tx = min(max(x, 0), max(result.shape[1] - text_width, 0))
    ty = min(max(y, text_height + baseline), result.shape[0] - 1)
    cv2.putText(result, verdict_text, (tx, ty), FONT, font_scale, color, thickness, cv2.LINE_8)
    return result
