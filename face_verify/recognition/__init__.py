"""Face recognizer backends exposing align / extract / cosine_similarity."""

from .arcface import ArcFaceRecognizer, estimate_alignment
from .sface import SFaceRecognizer

RECOGNIZER_BACKENDS = ("sface", "arcface")

__all__ = ["ArcFaceRecognizer", "SFaceRecognizer", "RECOGNIZER_BACKENDS", "estimate_alignment"]
