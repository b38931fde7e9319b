"""Error taxonomy for scanning and product lookups."""

from enum import StrEnum


class ScanErrorKind(StrEnum):
    """Distinct failure kinds surfaced by camera scanning."""

    PERMISSION_DENIED = "permission_denied"
    NO_CAMERA_FOUND = "no_camera_found"
    CAMERA_UNSUPPORTED = "camera_unsupported"
    STREAM_ENDED = "stream_ended"
    OTHER = "other"


class ScanError(Exception):
    """Base class for camera and decoding failures."""

    kind: ScanErrorKind = ScanErrorKind.OTHER
    default_message = "Failed to start camera"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class CameraPermissionDenied(ScanError):
    """Camera access was refused."""

    kind = ScanErrorKind.PERMISSION_DENIED
    default_message = "Camera access was denied. Allow camera access and try again."


class NoCameraFound(ScanError):
    """No video input device is available."""

    kind = ScanErrorKind.NO_CAMERA_FOUND
    default_message = "No camera devices found"


class CameraUnsupported(ScanError):
    """The selected device cannot be opened by the capture backend."""

    kind = ScanErrorKind.CAMERA_UNSUPPORTED
    default_message = "This camera is not supported"


class StreamEnded(ScanError):
    """The video stream ended because scanning was stopped."""

    kind = ScanErrorKind.STREAM_ENDED
    default_message = "Video stream ended"


class ScanFailed(ScanError):
    """Any other scanning failure."""


class ProductError(Exception):
    """Base class for product resolution failures."""


class ProductNotFound(ProductError):
    """The product database has no entry for the barcode."""

    def __init__(self, barcode: str) -> None:
        super().__init__(f"Product {barcode} not found")
        self.barcode = barcode


class ProductLookupError(ProductError):
    """The product database could not be reached or returned garbage."""
