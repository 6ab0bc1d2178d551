"""ArcFace ONNX recognizer with 5-point similarity alignment."""

from __future__ import annotations

import logging
import os
from typing import Tuple

import cv2
import numpy as np
import onnxruntime as ort

from ..detectors.types import FaceRegion
from ..errors import AlignmentFailed, CapabilityError, FeatureExtractionFailed, ModelLoadError
from ..face_matching import cosine_similarity

logger = logging.getLogger(__name__)

# InsightFace 112x112 template: left eye, right eye, nose, left mouth, right mouth
ARCFACE_TEMPLATE = np.array(
    [
        [38.2946, 51.6963],
        [73.5318, 51.5014],
        [56.0252, 71.7366],
        [41.5493, 92.3655],
        [70.7299, 92.2041],
    ],
    dtype=np.float32,
)


def estimate_alignment(landmarks: np.ndarray, out_size: Tuple[int, int] = (112, 112)) -> np.ndarray:
    """
    Build the 2x3 similarity transform mapping five landmarks onto the template
    Args:
        landmarks: (5, 2) points in frame coordinates
        out_size: Output crop (width, height)
    Returns:
        2x3 float32 affine matrix
    """
    src = np.asarray(landmarks, dtype=np.float32).reshape(5, 2)
    dst = ARCFACE_TEMPLATE * np.array([out_size[0] / 112.0, out_size[1] / 112.0], dtype=np.float32)

    matrix, _ = cv2.estimateAffinePartial2D(src, dst, method=cv2.LMEDS)
    if matrix is None:
        raise AlignmentFailed("Landmarks do not define a similarity transform")
    return matrix.astype(np.float32)


class ArcFaceRecognizer:
    """
    ArcFace-style ONNX embedder
    Input: 112x112 BGR crop -> RGB, (x - 127.5) / 128, NCHW float32
    Output: L2-normalized embedding
    """

    def __init__(self, *, model_path: str, input_size: Tuple[int, int] = (112, 112)) -> None:
        if not os.path.exists(model_path):
            raise ModelLoadError(f"ArcFace model not found: {model_path}")

        self.model_path = model_path
        self.input_size = (int(input_size[0]), int(input_size[1]))
        self.mean = np.array([127.5, 127.5, 127.5], dtype=np.float32)
        self.std = np.array([128.0, 128.0, 128.0], dtype=np.float32)

        try:
            self.session = ort.InferenceSession(model_path, providers=["CPUExecutionProvider"])
        except Exception as exc:
            raise ModelLoadError(f"Could not load ArcFace model {model_path}: {exc}") from exc

        self.input_name = self.session.get_inputs()[0].name
        self.output_name = self.session.get_outputs()[0].name
        logger.info(
            "Loaded ArcFace ONNX model %s (input %s %s)",
            model_path,
            self.input_name,
            self.session.get_inputs()[0].shape,
        )

    def align(self, image: np.ndarray, region: FaceRegion) -> np.ndarray:
        if not region.has_landmarks:
            raise AlignmentFailed("ArcFace alignment needs five landmarks")
        matrix = estimate_alignment(np.array(region.landmark), self.input_size)
        try:
            return cv2.warpAffine(
                image,
                matrix,
                self.input_size,
                flags=cv2.INTER_LINEAR,
                borderMode=cv2.BORDER_CONSTANT,
                borderValue=(0, 0, 0),
            )
        except cv2.error as exc:
            raise CapabilityError(f"warpAffine failed: {exc}") from exc

    def _preprocess(self, aligned: np.ndarray) -> np.ndarray:
        if (aligned.shape[1], aligned.shape[0]) != self.input_size:
            aligned = cv2.resize(aligned, self.input_size, interpolation=cv2.INTER_LINEAR)
        rgb = cv2.cvtColor(aligned, cv2.COLOR_BGR2RGB).astype(np.float32)
        normalized = (rgb - self.mean) / self.std
        return np.transpose(normalized, (2, 0, 1))[None, ...].astype(np.float32)

    def extract(self, aligned: np.ndarray) -> np.ndarray:
        if aligned is None or aligned.size == 0:
            raise FeatureExtractionFailed("Empty aligned crop")
        try:
            outputs = self.session.run([self.output_name], {self.input_name: self._preprocess(aligned)})
        except Exception as exc:
            raise CapabilityError(f"ArcFace inference failed: {exc}") from exc

        feature = np.asarray(outputs[0], dtype=np.float32).reshape(-1)
        norm = float(np.linalg.norm(feature))
        if norm == 0.0:
            raise FeatureExtractionFailed("ArcFace returned a zero embedding")
        return feature / norm

    @staticmethod
    def cosine_similarity(feature_a: np.ndarray, feature_b: np.ndarray) -> float:
        return cosine_similarity(feature_a, feature_b)
