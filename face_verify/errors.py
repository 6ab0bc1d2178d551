"""Exception hierarchy for the verification pipeline.

Startup failures abort the process with the class ``exit_code``. Descriptor
errors are recoverable inside the live loop and fatal during enrollment.
"""


class FaceVerifyError(Exception):
    """Base exception for face verification errors."""

    exit_code = 1


class ConfigurationError(FaceVerifyError):
    """Raised when configuration values are invalid."""

    exit_code = 8


class ModelLoadError(FaceVerifyError):
    """Raised when a detector or recognizer model cannot be loaded."""

    exit_code = 5


class ReferenceImageMissing(FaceVerifyError):
    """Raised when the reference image cannot be read or is empty."""

    exit_code = 2


class NoFaceInReference(FaceVerifyError):
    """Raised when no face is detected in the reference image."""

    exit_code = 3


class CameraUnavailable(FaceVerifyError):
    """Raised when the video source cannot be opened."""

    exit_code = 4


class CapabilityError(FaceVerifyError):
    """Raised when an underlying detector or capture call fails unexpectedly."""

    exit_code = 6


class InvariantViolation(FaceVerifyError):
    """Raised when pipeline preconditions are broken."""

    exit_code = 7


class DescriptorError(FaceVerifyError):
    """Base exception for per-face descriptor failures."""

    pass


class AlignmentFailed(DescriptorError):
    """Raised when a face region cannot be aligned."""

    pass


class FeatureExtractionFailed(DescriptorError):
    """Raised when the recognizer cannot produce an embedding."""

    pass
