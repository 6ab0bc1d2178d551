#!/usr/bin/env python3
"""
Live Verification Loop
Capture -> detect -> score -> annotate -> display -> poll, one frame at a time,
against a single enrolled feature vector.

Created: 2025
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

from .annotator import DEFAULT_COLOR, annotate
from .detectors.types import FaceRegion, select_face
from .errors import CameraUnavailable, DescriptorError, InvariantViolation
from .face_features import DescriptorExtractor
from .face_matching import SimilarityScorer, Verdict

logger = logging.getLogger(__name__)


class LoopState(enum.Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    DETECTING = "detecting"
    SCORING = "scoring"
    ANNOTATING = "annotating"
    DISPLAYING = "displaying"
    TERMINATED = "terminated"


@dataclass
class FaceMatch:
    region: FaceRegion
    score: float
    verdict: Verdict


@dataclass
class FrameResult:
    """What was displayed for one iteration."""

    frame: np.ndarray
    region: Optional[FaceRegion] = None
    score: Optional[float] = None
    verdict: Optional[Verdict] = None

    @property
    def annotated(self) -> bool:
        return self.verdict is not None


def score_faces(
    frame: np.ndarray,
    faces: Sequence[FaceRegion],
    known_feature: np.ndarray,
    extractor: DescriptorExtractor,
    scorer: SimilarityScorer,
    selection: str = "first",
) -> Optional[FaceMatch]:
    """
    Score the selected face of a frame against the known feature
    Returns:
        The match, or None when no face is usable this frame
    """
    if not faces:
        return None

    region = select_face(faces, selection)
    try:
        current = extractor.extract(frame, region)
    except DescriptorError as exc:
        logger.info("Skipping frame, face not usable: %s", exc)
        return None

    score = scorer.score(known_feature, current)
    verdict = scorer.decide(score)
    logger.debug("Cosine similarity: %.3f -> %s", score, verdict.label)
    return FaceMatch(region=region, score=score, verdict=verdict)


def verify_frame(
    frame: np.ndarray,
    known_feature: np.ndarray,
    detector: Any,
    extractor: DescriptorExtractor,
    scorer: SimilarityScorer,
    selection: str = "first",
) -> Optional[FaceMatch]:
    """Detect, then score; the detector must already be sized for ``frame``."""
    faces = detector.detect(frame)
    return score_faces(frame, faces, known_feature, extractor, scorer, selection)


class LiveVerificationLoop:
    """Single-threaded verification loop over a video source and display sink."""

    def __init__(
        self,
        known_feature: np.ndarray,
        detector: Any,
        extractor: DescriptorExtractor,
        scorer: SimilarityScorer,
        source: Any,
        sink: Any,
        *,
        quit_key: str = "q",
        poll_interval_ms: int = 1,
        selection: str = "first",
        stage_deadline_ms: float = 0.0,
        show_landmarks: bool = False,
        color: Tuple[int, int, int] = DEFAULT_COLOR,
        thickness: int = 2,
        font_scale: float = 0.8,
    ) -> None:
        if known_feature is None or np.asarray(known_feature).size == 0:
            raise InvariantViolation("Live verification needs an enrolled feature vector")
        if len(quit_key) != 1:
            raise ValueError(f"Quit key must be a single character, got {quit_key!r}")

        known = np.array(known_feature, dtype=np.float32).reshape(-1)
        known.setflags(write=False)
        self._known_feature = known

        self.detector = detector
        self.extractor = extractor
        self.scorer = scorer
        self.source = source
        self.sink = sink

        self.quit_code = ord(quit_key)
        self.poll_interval_ms = int(poll_interval_ms)
        self.selection = selection
        self.stage_deadline_ms = float(stage_deadline_ms or 0.0)
        self.draw_options = {
            "color": tuple(color),
            "thickness": int(thickness),
            "font_scale": float(font_scale),
            "show_landmarks": bool(show_landmarks),
        }

        self.state: Optional[LoopState] = None
        self.frames_processed = 0
        self.empty_reads = 0
        self.slow_stages: List[Tuple[str, float]] = []

    @property
    def known_feature(self) -> np.ndarray:
        return self._known_feature

    def start(self) -> None:
        """Size the detector for the source and enter IDLE."""
        if not self.source.is_open():
            raise CameraUnavailable("Video source is not open")

        width, height = self.source.frame_size()
        self.detector.set_input_size((width, height))
        logger.info("Live verification at %dx%d", width, height)
        self.state = LoopState.IDLE

    def step(self) -> Optional[FrameResult]:
        """
        Run one iteration
        Returns:
            The displayed frame result, or None when the capture was empty
        """
        if self.state is None:
            raise InvariantViolation("Loop must be started before stepping")
        if self.state is LoopState.TERMINATED:
            raise InvariantViolation("Loop has already terminated")

        self.state = LoopState.CAPTURING
        frame = self._timed("capture", self.source.read)
        if frame is None or frame.size == 0:
            self.empty_reads += 1
            logger.debug("Empty frame from source (%d so far)", self.empty_reads)
            return None

        self._match_input_size(frame)

        self.state = LoopState.DETECTING
        faces = self._timed("detect", self.detector.detect, frame)

        result = FrameResult(frame=frame.copy())
        if faces:
            self.state = LoopState.SCORING
            match = self._timed(
                "score",
                score_faces,
                frame,
                faces,
                self._known_feature,
                self.extractor,
                self.scorer,
                self.selection,
            )
            if match is not None:
                self.state = LoopState.ANNOTATING
                annotated = annotate(frame, match.region, match.verdict.label, **self.draw_options)
                result = FrameResult(
                    frame=annotated,
                    region=match.region,
                    score=match.score,
                    verdict=match.verdict,
                )

        self.state = LoopState.DISPLAYING
        self.sink.show(result.frame)
        key = self.sink.poll_key(self.poll_interval_ms)
        self.frames_processed += 1

        if key == self.quit_code:
            logger.info("Quit key pressed after %d frames", self.frames_processed)
            self.state = LoopState.TERMINATED
        else:
            self.state = LoopState.IDLE
        return result

    def run(self) -> int:
        """Loop until the quit key is seen; returns the process exit code."""
        if self.state is None:
            self.start()
        while self.state is not LoopState.TERMINATED:
            self.step()
        return 0

    def _match_input_size(self, frame: np.ndarray) -> None:
        height, width = frame.shape[:2]
        if tuple(self.detector.input_size) != (width, height):
            logger.warning(
                "Frame size changed to %dx%d, resizing detector input",
                width,
                height,
            )
            self.detector.set_input_size((width, height))

    def _timed(self, stage: str, func: Callable[..., Any], *args: Any) -> Any:
        if self.stage_deadline_ms <= 0:
            return func(*args)

        start = time.perf_counter()
        try:
            return func(*args)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            if elapsed_ms > self.stage_deadline_ms:
                self.slow_stages.append((stage, elapsed_ms))
                logger.warning(
                    "Stage '%s' took %.0f ms (deadline %.0f ms)",
                    stage,
                    elapsed_ms,
                    self.stage_deadline_ms,
                )
