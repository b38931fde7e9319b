"""Domain models for camera scan sessions."""

from dataclasses import dataclass
from enum import StrEnum


class ScanState(StrEnum):
    """Lifecycle of a scan session."""

    IDLE = "idle"
    REQUESTING_PERMISSION = "requesting_permission"
    DEVICE_SELECTION = "device_selection"
    SCANNING = "scanning"
    SUCCESS = "success"
    ERROR = "error"


ACTIVE_SCAN_STATES = frozenset(
    {ScanState.REQUESTING_PERMISSION, ScanState.DEVICE_SELECTION, ScanState.SCANNING}
)


@dataclass(frozen=True)
class CameraDevice:
    """A video input device."""

    device_id: str
    label: str
