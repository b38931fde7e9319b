"""Camera device enumeration and selection."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from product_scanner.domain.errors import NoCameraFound
from product_scanner.domain.scanning import CameraDevice

REAR_CAMERA_HINTS = ("back", "rear", "environment")


class CameraBackend(Protocol):
    """Platform access to cameras."""

    async def request_access(self) -> None:
        """Ensure the process may use the camera; raise CameraPermissionDenied."""

    async def list_video_inputs(self) -> list[CameraDevice]:
        """Return the currently available video input devices."""


@dataclass
class DeviceSelector:
    """Lists cameras and picks the one best suited for barcode scanning."""

    backend: CameraBackend

    async def list_cameras(self) -> list[CameraDevice]:
        """Return available video inputs; raise NoCameraFound if there are none."""
        devices = await self.backend.list_video_inputs()
        if not devices:
            raise NoCameraFound()
        return list(devices)

    @staticmethod
    def pick_preferred(devices: Sequence[CameraDevice]) -> CameraDevice:
        """Prefer a rear-facing camera, else the first one listed."""
        if not devices:
            raise NoCameraFound()
        for device in devices:
            label = device.label.lower()
            if any(hint in label for hint in REAR_CAMERA_HINTS):
                return device
        return devices[0]
