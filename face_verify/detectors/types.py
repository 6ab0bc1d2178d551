"""Shared detector data structures in the YuNet row layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple

import numpy as np

# x, y, w, h, 5 landmark pairs, score
YUNET_ROW_SIZE = 15
NUM_LANDMARKS = 5

SELECTION_POLICIES = ("first", "best")


@dataclass(frozen=True)
class FaceRegion:
    """Where a face was found in a frame."""

    rect: Tuple[float, float, float, float]
    landmark: Tuple[Tuple[float, float], ...] = field(default_factory=tuple)
    face_prob: float = 0.0

    @classmethod
    def from_row(cls, row: Sequence[float]) -> "FaceRegion":
        values = np.asarray(row, dtype=np.float32).reshape(-1)
        if values.size < 4:
            raise ValueError(f"Detection row too short: {values.size} values")

        rect = tuple(float(v) for v in values[:4])
        landmark: Tuple[Tuple[float, float], ...] = ()
        if values.size >= 4 + 2 * NUM_LANDMARKS:
            pts = values[4 : 4 + 2 * NUM_LANDMARKS].reshape(NUM_LANDMARKS, 2)
            landmark = tuple((float(x), float(y)) for x, y in pts)
        face_prob = float(values[YUNET_ROW_SIZE - 1]) if values.size >= YUNET_ROW_SIZE else 0.0
        return cls(rect=rect, landmark=landmark, face_prob=face_prob)

    def to_row(self) -> np.ndarray:
        """Return the region as a (1, 15) float32 row accepted by ``alignCrop``."""
        row = np.zeros((1, YUNET_ROW_SIZE), dtype=np.float32)
        row[0, :4] = self.rect
        for i, (lx, ly) in enumerate(self.landmark[:NUM_LANDMARKS]):
            row[0, 4 + 2 * i] = lx
            row[0, 5 + 2 * i] = ly
        row[0, YUNET_ROW_SIZE - 1] = self.face_prob
        return row

    @property
    def has_landmarks(self) -> bool:
        return len(self.landmark) >= NUM_LANDMARKS

    def int_rect(self) -> Tuple[int, int, int, int]:
        x, y, w, h = self.rect
        return int(x), int(y), int(w), int(h)

    def is_within(self, width: int, height: int) -> bool:
        """True when the rectangle has positive size and overlaps the frame."""
        x, y, w, h = self.rect
        if not (np.isfinite([x, y, w, h]).all()) or w <= 0 or h <= 0:
            return False
        return x < width and y < height and x + w > 0 and y + h > 0


def select_face(regions: Sequence[FaceRegion], policy: str = "first") -> FaceRegion:
    """
    Pick the single region used for a frame.
    Args:
        regions: Detections in detector order (must not be empty)
        policy: ``first`` keeps detector order, ``best`` takes the highest face_prob
    Returns:
        The selected region
    """
    if not regions:
        raise ValueError("No regions to select from")
    if policy == "first":
        return regions[0]
    if policy == "best":
        # max() returns the earliest element among equal scores
        return max(regions, key=lambda region: region.face_prob)
    raise ValueError(f"Unknown face selection policy: {policy}")
