"""In-memory stand-ins for the detector, recognizer, camera and window."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pytest

from face_verify.detectors.types import FaceRegion
from face_verify.errors import AlignmentFailed, FeatureExtractionFailed, InvariantViolation
from face_verify.face_matching import cosine_similarity

FRAME_SIZE = (64, 48)

# identity encoded by pixel value: 10 is the enrolled person, 200 someone else
KNOWN = [1.0, 0.0, 0.0, 0.0]
FEATURES: Dict[int, List[float]] = {
    10: [1.0, 0.0, 0.0, 0.0],
    11: [0.9, 0.1, 0.0, 0.0],
    200: [0.0, 1.0, 0.0, 0.0],
}

LANDMARKS = ((14.0, 16.0), (26.0, 16.0), (20.0, 22.0), (15.0, 27.0), (25.0, 27.0))


def make_region(rect=(8.0, 8.0, 24.0, 24.0), face_prob: float = 0.95) -> FaceRegion:
    return FaceRegion(rect=tuple(rect), landmark=LANDMARKS, face_prob=face_prob)


def make_frame(value: int, size: Tuple[int, int] = FRAME_SIZE) -> np.ndarray:
    width, height = size
    return np.full((height, width, 3), value, dtype=np.uint8)


def faces_unless_blank(frame: np.ndarray) -> List[FaceRegion]:
    """A blank (all-zero) frame has no face, anything else has one."""
    return [] if not frame.any() else [make_region()]


class FakeDetector:
    def __init__(
        self,
        faces: Union[Sequence[FaceRegion], Callable[[np.ndarray], Sequence[FaceRegion]], None] = None,
        input_size: Tuple[int, int] = (320, 320),
    ) -> None:
        self.faces = faces_unless_blank if faces is None else faces
        self.input_size = input_size
        self.size_calls: List[Tuple[int, int]] = []
        self.detect_sizes: List[Tuple[int, int]] = []

    def set_input_size(self, size) -> None:
        self.input_size = (int(size[0]), int(size[1]))
        self.size_calls.append(self.input_size)

    def detect(self, frame: np.ndarray) -> List[FaceRegion]:
        height, width = frame.shape[:2]
        if (width, height) != self.input_size:
            raise InvariantViolation(f"detect() at {width}x{height}, configured {self.input_size}")
        self.detect_sizes.append((width, height))
        faces = self.faces(frame) if callable(self.faces) else self.faces
        return list(faces)


class FakeRecognizer:
    def __init__(self, features: Optional[Dict[int, List[float]]] = None) -> None:
        self.features = FEATURES if features is None else features
        self.fail_align = False
        self.fail_extract = False
        self.extract_calls = 0

    def align(self, image: np.ndarray, region: FaceRegion) -> np.ndarray:
        if self.fail_align:
            raise AlignmentFailed("cannot align")
        x, y, w, h = region.int_rect()
        return image[max(y, 0) : y + h, max(x, 0) : x + w].copy()

    def extract(self, aligned: np.ndarray) -> np.ndarray:
        self.extract_calls += 1
        if self.fail_extract:
            raise FeatureExtractionFailed("cannot extract")
        return np.array(self.features[int(aligned[0, 0, 0])], dtype=np.float32)

    def cosine_similarity(self, a: np.ndarray, b: np.ndarray) -> float:
        return cosine_similarity(a, b)


class FakeSource:
    def __init__(self, frames: Sequence[Optional[np.ndarray]], size: Tuple[int, int] = FRAME_SIZE) -> None:
        self.frames = list(frames)
        self.size = size
        self.reads = 0
        self.opened = True
        self.released = False

    def is_open(self) -> bool:
        return self.opened

    def frame_size(self) -> Tuple[int, int]:
        return self.size

    def read(self) -> Optional[np.ndarray]:
        if self.reads >= len(self.frames):
            raise AssertionError("read past the scripted frames")
        frame = self.frames[self.reads]
        self.reads += 1
        return frame

    def release(self) -> None:
        self.released = True


class FakeSink:
    def __init__(self, keys: Sequence[Optional[int]] = ()) -> None:
        self.keys = list(keys)
        self.shown: List[np.ndarray] = []
        self.poll_timeouts: List[int] = []
        self.closed = False

    def show(self, frame: np.ndarray) -> None:
        self.shown.append(frame)

    def poll_key(self, timeout_ms: int = 1) -> Optional[int]:
        self.poll_timeouts.append(timeout_ms)
        return self.keys.pop(0) if self.keys else None

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def detector() -> FakeDetector:
    return FakeDetector()


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def known_feature() -> np.ndarray:
    return np.array(KNOWN, dtype=np.float32)
