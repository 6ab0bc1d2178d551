#!/usr/bin/env python3
"""
Python Face Verification System
Init file for the face_verify package

Created: 2025
"""

from .config_manager import ConfigManager
from .detectors import FaceRegion, YuNetDetector, select_face
from .enrollment import enroll
from .face_features import DescriptorExtractor, extract
from .face_matching import DEFAULT_MATCH_THRESHOLD, SimilarityScorer, Verdict, cosine_similarity, decide
from .live_loop import FrameResult, LiveVerificationLoop, LoopState
from .recognition import ArcFaceRecognizer, SFaceRecognizer

__version__ = "1.0.0"

__all__ = [
    "ConfigManager",
    "FaceRegion",
    "YuNetDetector",
    "select_face",
    "enroll",
    "DescriptorExtractor",
    "extract",
    "DEFAULT_MATCH_THRESHOLD",
    "SimilarityScorer",
    "Verdict",
    "cosine_similarity",
    "decide",
    "FrameResult",
    "LiveVerificationLoop",
    "LoopState",
    "ArcFaceRecognizer",
    "SFaceRecognizer",
]
