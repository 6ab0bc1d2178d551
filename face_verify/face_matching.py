#!/usr/bin/env python3
"""
Face Matching Module
Cosine similarity scoring and the match / no-match decision

Created: 2025
"""

from __future__ import annotations

import enum
from typing import Callable, Optional

import numpy as np

from .errors import InvariantViolation

# Calibrated for face_recognition_sface_2021dec.onnx
DEFAULT_MATCH_THRESHOLD = 0.363


class Verdict(enum.Enum):
    MATCH = "Match"
    NO_MATCH = "Unknown Person"

    @property
    def label(self) -> str:
        return self.value


def cosine_similarity(feature1: np.ndarray, feature2: np.ndarray) -> float:
    """
    Calculate cosine similarity between two feature vectors
    Args:
        feature1: First feature vector
        feature2: Second feature vector
    Returns:
        Cosine similarity score in [-1, 1], 0.0 if either vector has zero norm
    """
    a = np.asarray(feature1, dtype=np.float64).reshape(-1)
    b = np.asarray(feature2, dtype=np.float64).reshape(-1)

    norm1 = np.linalg.norm(a)
    norm2 = np.linalg.norm(b)
    if norm1 == 0 or norm2 == 0:
        return 0.0

    similarity = float(np.dot(a, b) / (norm1 * norm2))
    return float(np.clip(similarity, -1.0, 1.0))


def decide(score: float, threshold: float = DEFAULT_MATCH_THRESHOLD) -> Verdict:
    """Scores at or above the threshold are a match."""
    return Verdict.MATCH if score >= threshold else Verdict.NO_MATCH


class SimilarityScorer:
    """Scores a live feature against the enrolled one."""

    def __init__(
        self,
        threshold: float = DEFAULT_MATCH_THRESHOLD,
        metric: Optional[Callable[[np.ndarray, np.ndarray], float]] = None,
    ) -> None:
        self.threshold = float(threshold)
        self.metric = metric or cosine_similarity

    def score(self, known: np.ndarray, current: np.ndarray) -> float:
        known = np.asarray(known).reshape(-1)
        current = np.asarray(current).reshape(-1)
        if known.size == 0 or current.size == 0:
            raise InvariantViolation("Cannot score an empty feature vector")
        if known.size != current.size:
            raise InvariantViolation(
                f"Feature length mismatch: known={known.size} current={current.size}"
            )
        return float(self.metric(known, current))

    def decide(self, score: float) -> Verdict:
        return decide(score, self.threshold)
