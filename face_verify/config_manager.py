#!/usr/bin/env python3
"""
Configuration Management Module
Handles loading and validating configuration files

Created: 2025
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

from .detectors.types import SELECTION_POLICIES
from .errors import ConfigurationError
from .face_matching import DEFAULT_MATCH_THRESHOLD
from .recognition import RECOGNIZER_BACKENDS

logger = logging.getLogger(__name__)


class ConfigManager:
    """Configuration manager for the face verification system"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager
        Args:
            config_path: Path to configuration file
        """
        self.config_path = config_path or "config.json"
        self.config = self._get_default_config()

        if os.path.exists(self.config_path):
            self.load_config()
        elif config_path:
            raise ConfigurationError(f"Configuration file not found: {config_path}")

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration"""
        return {
            "reference_image": "known_face.jpg",
            "camera_index": 0,
            "match_threshold": DEFAULT_MATCH_THRESHOLD,
            "face_selection": "first",
            "recognizer_backend": "sface",
            "window_name": "Camera - Face Recognition",
            "quit_key": "q",
            "poll_interval_ms": 1,
            "stage_deadline_ms": 500,
            "show_landmarks": False,
            "models": {
                "face_detector": {
                    "model_path": "models/face_detection_yunet_2021dec.onnx",
                    "input_width": 320,
                    "input_height": 320,
                    "score_threshold": 0.9,
                    "nms_threshold": 0.3,
                    "top_k": 5000,
                    "backend_id": 0,
                    "target_id": 0,
                },
                "face_recognizer": {
                    "model_path": "models/face_recognition_sface_2021dec.onnx",
                    "backend_id": 0,
                    "target_id": 0,
                },
                "arcface": {
                    "model_path": "models/arcface.onnx",
                    "input_size": [112, 112],
                },
            },
            "annotation": {
                "color": [0, 255, 0],
                "thickness": 2,
                "font_scale": 0.8,
            },
        }

    def load_config(self) -> None:
        """Load configuration from file and merge it over the defaults"""
        try:
            with open(self.config_path, "r") as f:
                loaded_config = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Error loading configuration {self.config_path}: {exc}") from exc

        if not isinstance(loaded_config, dict):
            raise ConfigurationError(f"{self.config_path} must contain a JSON object")

        self._deep_update(self.config, loaded_config)
        logger.info("Configuration loaded from %s", self.config_path)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value
        Args:
            key: Configuration key (supports dot notation, e.g., 'models.face_detector.top_k')
            default: Default value if key not found
        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any):
        """
        Set configuration value
        Args:
            key: Configuration key (supports dot notation)
            value: Value to set
        """
        keys = key.split(".")
        config = self.config

        # Navigate to parent of target key
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def _deep_update(self, base_dict: Dict, update_dict: Dict):
        """
        Deep update dictionary
        Args:
            base_dict: Base dictionary to update
            update_dict: Dictionary with updates
        """
        for key, value in update_dict.items():
            if key in base_dict and isinstance(base_dict[key], dict) and isinstance(value, dict):
                self._deep_update(base_dict[key], value)
            else:
                base_dict[key] = value

    def validation_errors(self) -> List[str]:
        """Collect every invalid setting"""
        errors = []

        threshold = self.get("match_threshold")
        if not isinstance(threshold, (int, float)) or not -1.0 <= threshold <= 1.0:
            errors.append("match_threshold must be between -1 and 1")

        if self.get("face_selection") not in SELECTION_POLICIES:
            errors.append(f"face_selection must be one of {', '.join(SELECTION_POLICIES)}")

        if self.get("recognizer_backend") not in RECOGNIZER_BACKENDS:
            errors.append(f"recognizer_backend must be one of {', '.join(RECOGNIZER_BACKENDS)}")

        quit_key = self.get("quit_key")
        if not isinstance(quit_key, str) or len(quit_key) != 1:
            errors.append("quit_key must be a single character")

        if not isinstance(self.get("poll_interval_ms"), int) or self.get("poll_interval_ms") <= 0:
            errors.append("poll_interval_ms must be a positive integer")

        if not isinstance(self.get("camera_index"), int) or self.get("camera_index") < 0:
            errors.append("camera_index must be a non-negative integer")

        deadline = self.get("stage_deadline_ms")
        if not isinstance(deadline, (int, float)) or deadline < 0:
            errors.append("stage_deadline_ms must be >= 0")

        for key in ("input_width", "input_height", "top_k"):
            value = self.get(f"models.face_detector.{key}")
            if not isinstance(value, int) or value <= 0:
                errors.append(f"models.face_detector.{key} must be a positive integer")

        for key in ("score_threshold", "nms_threshold"):
            value = self.get(f"models.face_detector.{key}")
            if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
                errors.append(f"models.face_detector.{key} must be between 0 and 1")

        color = self.get("annotation.color")
        if not isinstance(color, (list, tuple)) or len(color) != 3:
            errors.append("annotation.color must be a [B, G, R] triple")

        return errors

    def validate_config(self) -> None:
        """
        Validate configuration values
        Raises:
            ConfigurationError: Listing every invalid setting
        """
        errors = self.validation_errors()
        if errors:
            raise ConfigurationError(
                "Configuration validation errors:\n" + "\n".join(f"  - {error}" for error in errors)
            )

    def print_config(self):
        """Print current configuration"""
        print("=== Current Configuration ===")
        self._print_dict(self.config, indent=0)

    def _print_dict(self, d: Dict, indent: int):
        """Recursively print dictionary"""
        for key, value in d.items():
            if isinstance(value, dict):
                print("  " * indent + f"{key}:")
                self._print_dict(value, indent + 1)
            else:
                print("  " * indent + f"{key}: {value}")
