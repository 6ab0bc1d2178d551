"""Camera source and window sink backed by OpenCV highgui / videoio."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from .errors import CameraUnavailable, CapabilityError

logger = logging.getLogger(__name__)


class CameraSource:
    """Exclusive owner of one ``cv2.VideoCapture`` device."""

    def __init__(self, index: int = 0, api_preference: int = cv2.CAP_ANY) -> None:
        self.index = int(index)
        self.api_preference = api_preference
        self._cap: Optional[cv2.VideoCapture] = None

    def open(self) -> "CameraSource":
        self._cap = cv2.VideoCapture(self.index, self.api_preference)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise CameraUnavailable(f"Cannot open camera {self.index}")
        logger.info("Opened camera %d", self.index)
        return self

    def is_open(self) -> bool:
        return self._cap is not None and bool(self._cap.isOpened())

    def read(self) -> Optional[np.ndarray]:
        """Return the next frame, or None when the read yields nothing."""
        if self._cap is None:
            raise CameraUnavailable("Camera is not open")
        try:
            ok, frame = self._cap.read()
        except cv2.error as exc:
            raise CapabilityError(f"Camera read failed: {exc}") from exc
        if not ok or frame is None or frame.size == 0:
            return None
        return frame

    def frame_size(self) -> Tuple[int, int]:
        if self._cap is None:
            raise CameraUnavailable("Camera is not open")
        width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        if width <= 0 or height <= 0:
            raise CameraUnavailable(f"Camera {self.index} did not report its frame size")
        return width, height

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None


class WindowSink:
    """Named highgui window plus the keyboard poll."""

    def __init__(self, window_name: str = "Camera - Face Recognition") -> None:
        self.window_name = window_name

    def show(self, frame: np.ndarray) -> None:
        cv2.imshow(self.window_name, frame)

    def poll_key(self, timeout_ms: int = 1) -> Optional[int]:
        key = cv2.waitKey(max(1, int(timeout_ms)))
        if key < 0:
            return None
        return key & 0xFF

    def close(self) -> None:
        cv2.destroyAllWindows()
