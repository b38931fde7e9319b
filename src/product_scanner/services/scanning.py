"""Scan session state machine."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from product_scanner.domain.errors import ScanError, ScanFailed, StreamEnded
from product_scanner.domain.scanning import ACTIVE_SCAN_STATES, CameraDevice, ScanState
from product_scanner.services.devices import CameraBackend, DeviceSelector

_logger = logging.getLogger(__name__)


class VideoSink(Protocol):
    """Receives live frames while a scan is running."""

    def show(self, frame: object) -> None:
        """Display or keep a captured frame."""


class BarcodeDecoder(Protocol):
    """Decodes a single symbol from a live camera stream."""

    async def decode_once(
        self, device_id: str, sink: VideoSink | None = None
    ) -> str:
        """Return the first decoded barcode text from the device stream."""

    def stop(self) -> None:
        """Release the camera and interrupt any decode; never raises."""


@dataclass
class ScanSessionController:
    """Drives permission, device selection and decoding for one scan surface.

    States move Idle -> RequestingPermission -> DeviceSelection -> Scanning
    and end in Success or Error. stop_scanning() returns to Idle from any
    state; results of a stopped session are dropped.
    """

    camera: CameraBackend
    decoder: BarcodeDecoder
    on_scan_success: Callable[[str], None] | None = None
    on_scan_error: Callable[[str], None] | None = None
    state: ScanState = ScanState.IDLE
    error: ScanError | None = None
    barcode: str | None = None
    device: CameraDevice | None = None
    sink: VideoSink | None = None
    _selector: DeviceSelector = field(init=False, repr=False)
    _session: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self._selector = DeviceSelector(self.camera)

    @property
    def is_scanning(self) -> bool:
        """Whether a session is between start and a terminal state."""
        return self.state in ACTIVE_SCAN_STATES

    @property
    def error_message(self) -> str | None:
        """User-displayable message for the last error."""
        return self.error.message if self.error else None

    async def start_scanning(self, sink: VideoSink | None = None) -> str | None:
        """Run a scan session and return the barcode, or None on error or stop.

        Calling this while a session is active is a programming error.
        """
        if self.is_scanning:
            raise RuntimeError("Scan already in progress; call stop_scanning() first")

        self._session += 1
        session = self._session
        self.sink = sink
        self.error = None
        self.barcode = None
        self.device = None
        self.state = ScanState.REQUESTING_PERMISSION
        try:
            await self.camera.request_access()
            if session != self._session:
                return None

            self.state = ScanState.DEVICE_SELECTION
            devices = await self._selector.list_cameras()
            if session != self._session:
                return None

            self.device = self._selector.pick_preferred(devices)
            self.state = ScanState.SCANNING
            barcode = await self.decoder.decode_once(self.device.device_id, sink)
        except ScanError as exc:
            if session != self._session:
                if not isinstance(exc, StreamEnded):
                    _logger.info("Discarding error from stopped scan: %s", exc)
                return None
            self._fail(exc)
            return None
        except Exception as exc:
            if session != self._session:
                _logger.info("Discarding error from stopped scan: %s", exc)
                return None
            self._fail(ScanFailed(str(exc) or type(exc).__name__))
            return None

        if session != self._session:
            return None
        self.barcode = barcode
        self.state = ScanState.SUCCESS
        self.decoder.stop()
        if self.on_scan_success:
            self.on_scan_success(barcode)
        return barcode

    def stop_scanning(self) -> None:
        """Stop any scan in progress and return to Idle."""
        self._session += 1
        self.decoder.stop()
        self.state = ScanState.IDLE
        self.error = None
        self.sink = None

    def _fail(self, exc: ScanError) -> None:
        self.decoder.stop()
        self.error = exc
        self.state = ScanState.ERROR
        _logger.warning("Scan failed (%s): %s", exc.kind, exc.message)
        if self.on_scan_error:
            self.on_scan_error(exc.message)
