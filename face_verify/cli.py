#!/usr/bin/env python3
"""CLI entry point for the live face verification application."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, List, Optional, Tuple

import cv2

from .capture import CameraSource, WindowSink
from .config_manager import ConfigManager
from .detectors import YuNetDetector
from .enrollment import enroll, load_reference_image
from .errors import CapabilityError, FaceVerifyError
from .face_features import DescriptorExtractor
from .face_matching import SimilarityScorer
from .live_loop import LiveVerificationLoop, verify_frame
from .recognition import RECOGNIZER_BACKENDS, ArcFaceRecognizer, SFaceRecognizer

logger = logging.getLogger(__name__)


def build_detector(config: ConfigManager) -> YuNetDetector:
    det = config.get("models.face_detector")
    return YuNetDetector(
        model_path=det["model_path"],
        input_size=(det["input_width"], det["input_height"]),
        score_threshold=det["score_threshold"],
        nms_threshold=det["nms_threshold"],
        top_k=det["top_k"],
        backend_id=det.get("backend_id", 0),
        target_id=det.get("target_id", 0),
    )


def build_recognizer(config: ConfigManager) -> Any:
    if config.get("recognizer_backend") == "arcface":
        arc = config.get("models.arcface")
        return ArcFaceRecognizer(model_path=arc["model_path"], input_size=tuple(arc["input_size"]))

    rec = config.get("models.face_recognizer")
    return SFaceRecognizer(
        model_path=rec["model_path"],
        backend_id=rec.get("backend_id", 0),
        target_id=rec.get("target_id", 0),
    )


def build_capabilities(config: ConfigManager) -> Tuple[Any, Any]:
    """Load the detector and recognizer models."""
    print("Loading face detection and recognition models...")
    return build_detector(config), build_recognizer(config)


def open_camera(config: ConfigManager) -> CameraSource:
    return CameraSource(config.get("camera_index")).open()


def check_image(image_path: str, known_feature, detector, extractor, scorer, selection: str) -> int:
    """Verify a still image against the enrolled identity and print the result."""
    image = load_reference_image(image_path)
    height, width = image.shape[:2]
    detector.set_input_size((width, height))

    match = verify_frame(image, known_feature, detector, extractor, scorer, selection)
    if match is None:
        print(f"No usable face in {image_path}")
    else:
        print(f"Cosine similarity: {match.score:.3f} -> {match.verdict.label}")
    return 0


def run(config: ConfigManager, image_path: Optional[str] = None) -> int:
    """Enroll, then verify a still image or run the live loop."""
    config.validate_config()

    detector, recognizer = build_capabilities(config)
    selection = config.get("face_selection")

    known_feature = enroll(config.get("reference_image"), detector, recognizer, selection=selection)
    print(f"✅ Known face feature extracted from {config.get('reference_image')}")

    extractor = DescriptorExtractor(recognizer)
    scorer = SimilarityScorer(config.get("match_threshold"), metric=recognizer.cosine_similarity)

    if image_path:
        return check_image(image_path, known_feature, detector, extractor, scorer, selection)

    source = open_camera(config)
    sink = WindowSink(config.get("window_name"))
    loop = None
    try:
        loop = LiveVerificationLoop(
            known_feature,
            detector,
            extractor,
            scorer,
            source,
            sink,
            quit_key=config.get("quit_key"),
            poll_interval_ms=config.get("poll_interval_ms"),
            selection=selection,
            stage_deadline_ms=config.get("stage_deadline_ms"),
            show_landmarks=config.get("show_landmarks"),
            color=tuple(config.get("annotation.color")),
            thickness=config.get("annotation.thickness"),
            font_scale=config.get("annotation.font_scale"),
        )

        print("📹 Running face recognition on live video...")
        print(f"Press '{config.get('quit_key')}' to quit.")
        return loop.run()
    except KeyboardInterrupt:
        print("Interrupted by user")
        return 0
    finally:
        source.release()
        sink.close()
        if loop is not None:
            print(f"Face verification stopped after {loop.frames_processed} frames")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Live face verification against a single enrolled identity",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("reference", type=str, nargs="?", help="Reference image of the enrolled identity")
    parser.add_argument("--config", type=str, help="Configuration file path")
    parser.add_argument("--camera", type=int, help="Camera device index")
    parser.add_argument("--threshold", type=float, help="Cosine similarity match threshold")
    parser.add_argument(
        "--selection",
        type=str,
        choices=["first", "best"],
        help="Face to use when several are detected: detector order or highest confidence",
    )
    parser.add_argument("--recognizer", type=str, choices=list(RECOGNIZER_BACKENDS), help="Recognizer backend")
    parser.add_argument("--detector-model", type=str, help="Path to the YuNet ONNX model")
    parser.add_argument("--recognizer-model", type=str, help="Path to the recognizer ONNX model")
    parser.add_argument("--show-landmarks", action="store_true", default=None, help="Draw the five facial landmarks")
    parser.add_argument("--image", type=str, help="Verify a still image instead of the camera")
    parser.add_argument("--print-config", action="store_true", help="Print the effective configuration and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-frame similarity scores")
    return parser


def apply_overrides(config: ConfigManager, args: argparse.Namespace) -> None:
    if args.reference:
        config.set("reference_image", args.reference)
    if args.camera is not None:
        config.set("camera_index", args.camera)
    if args.threshold is not None:
        config.set("match_threshold", args.threshold)
    if args.selection:
        config.set("face_selection", args.selection)
    if args.recognizer:
        config.set("recognizer_backend", args.recognizer)
    if args.detector_model:
        config.set("models.face_detector.model_path", args.detector_model)
    if args.recognizer_model:
        backend = config.get("recognizer_backend")
        key = "models.arcface.model_path" if backend == "arcface" else "models.face_recognizer.model_path"
        config.set(key, args.recognizer_model)
    if args.show_landmarks is not None:
        config.set("show_landmarks", args.show_landmarks)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ConfigManager(args.config)
        apply_overrides(config, args)
        if args.print_config:
            config.print_config()
            return 0
        return run(config, image_path=args.image)
    except FaceVerifyError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return exc.exit_code
    except cv2.error as exc:
        print(f"❌ OpenCV error: {exc}", file=sys.stderr)
        return CapabilityError.exit_code


if __name__ == "__main__":
    sys.exit(main())
