"""Face detector backends and shared region types."""

from .types import FaceRegion, SELECTION_POLICIES, select_face
from .yunet import YuNetDetector

__all__ = ["FaceRegion", "SELECTION_POLICIES", "select_face", "YuNetDetector"]
