"""OpenCV-backed camera access and barcode decoding."""

import asyncio
import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path

import cv2

from product_scanner.domain.errors import (
    CameraPermissionDenied,
    CameraUnsupported,
    ScanError,
    ScanFailed,
    StreamEnded,
)
from product_scanner.domain.scanning import CameraDevice
from product_scanner.services.devices import CameraBackend
from product_scanner.services.scanning import BarcodeDecoder, VideoSink

_logger = logging.getLogger(__name__)


@dataclass
class OpenCvCameraBackend(CameraBackend):
    """Camera discovery via V4L2 sysfs on Linux, index probing elsewhere."""

    probe_limit: int = 4
    sysfs_root: Path = Path("/sys/class/video4linux")
    dev_root: Path = Path("/dev")

    async def request_access(self) -> None:
        """Fail if camera device nodes exist but none is accessible."""
        await asyncio.to_thread(self._check_access)

    async def list_video_inputs(self) -> list[CameraDevice]:
        """Enumerate capture devices with their labels."""
        return await asyncio.to_thread(self._enumerate)

    def _check_access(self) -> None:
        nodes = [self.dev_root / entry.name for entry in self._capture_entries()]
        if nodes and not any(os.access(node, os.R_OK | os.W_OK) for node in nodes):
            raise CameraPermissionDenied()

    def _enumerate(self) -> list[CameraDevice]:
        if self.sysfs_root.is_dir():
            return [
                CameraDevice(device_id=_node_index(entry), label=_read_label(entry))
                for entry in self._capture_entries()
            ]
        return self._probe_indices()

    def _capture_entries(self) -> list[Path]:
        """Return sysfs video nodes that are capture interfaces, by index."""
        if not self.sysfs_root.is_dir():
            return []
        entries = [
            entry
            for entry in self.sysfs_root.glob("video*")
            if _node_index(entry).isdigit() and _is_primary_node(entry)
        ]
        return sorted(entries, key=lambda entry: int(_node_index(entry)))

    def _probe_indices(self) -> list[CameraDevice]:
        devices: list[CameraDevice] = []
        for index in range(self.probe_limit):
            capture = cv2.VideoCapture(index)
            opened = capture.isOpened()
            capture.release()
            if opened:
                devices.append(
                    CameraDevice(device_id=str(index), label=f"Camera {index}")
                )
        return devices


@dataclass
class OpenCvBarcodeDecoder(BarcodeDecoder):
    """Reads frames from a camera until a barcode or QR code decodes."""

    frame_width: int = 1280
    frame_height: int = 720
    max_failed_reads: int = 30
    _stop_event: threading.Event | None = field(default=None, init=False, repr=False)
    _camera_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    async def decode_once(self, device_id: str, sink: VideoSink | None = None) -> str:
        """Decode the first symbol seen on the device.

        Raises StreamEnded when stop() interrupts the scan.
        """
        stop_event = threading.Event()
        self._stop_event = stop_event
        return await asyncio.to_thread(self._decode_loop, device_id, sink, stop_event)

    def stop(self) -> None:
        """Interrupt the running decode; the worker releases the camera."""
        if self._stop_event is not None:
            self._stop_event.set()

    def _decode_loop(
        self, device_id: str, sink: VideoSink | None, stop_event: threading.Event
    ) -> str:
        # One capture at a time: a new scan waits for the previous release.
        with self._camera_lock:
            if stop_event.is_set():
                raise StreamEnded()
            capture = cv2.VideoCapture(_capture_source(device_id))
            try:
                if not capture.isOpened():
                    raise CameraUnsupported(f"Unable to open camera {device_id}")
                capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.frame_width)
                capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.frame_height)
                barcode_detector = cv2.barcode.BarcodeDetector()
                qr_detector = cv2.QRCodeDetector()
                failed_reads = 0
                while not stop_event.is_set():
                    ok, frame = capture.read()
                    if not ok:
                        failed_reads += 1
                        if failed_reads > self.max_failed_reads:
                            raise ScanFailed("Camera stopped producing frames")
                        continue
                    failed_reads = 0
                    if sink is not None:
                        sink.show(frame)
                    text = decode_frame(frame, barcode_detector, qr_detector)
                    if text:
                        _logger.debug("Decoded barcode from camera %s", device_id)
                        return text
            except ScanError:
                raise
            except cv2.error as exc:
                raise ScanFailed(f"Camera error: {exc}") from exc
            except Exception as exc:
                raise ScanFailed(f"Scan failed: {exc}") from exc
            finally:
                capture.release()
        raise StreamEnded()


@dataclass
class LatestFrameSink(VideoSink):
    """Keeps the most recent frame so it can be saved after a scan."""

    frame: object | None = None
    frames_seen: int = 0

    def show(self, frame: object) -> None:
        self.frame = frame
        self.frames_seen += 1

    def save(self, path: Path) -> bool:
        """Write the last frame as an image; False when nothing was captured."""
        if self.frame is None:
            return False
        return bool(cv2.imwrite(str(path), self.frame))


def decode_frame(
    frame: object,
    barcode_detector: "cv2.barcode.BarcodeDetector",
    qr_detector: "cv2.QRCodeDetector",
) -> str | None:
    """Return the first linear barcode or QR payload found in a frame."""
    ok, decoded_info, _types, _points = barcode_detector.detectAndDecodeWithType(frame)
    if ok:
        for text in decoded_info:
            if text:
                return text
    text, _points, _straight = qr_detector.detectAndDecode(frame)
    return text or None


def _capture_source(device_id: str) -> int | str:
    """Numeric ids are OpenCV indices; anything else is a path or stream URL."""
    return int(device_id) if device_id.isdigit() else device_id


def _node_index(entry: Path) -> str:
    return entry.name.removeprefix("video")


def _read_label(entry: Path) -> str:
    try:
        return (entry / "name").read_text(encoding="utf-8").strip()
    except OSError:
        return ""


def _is_primary_node(entry: Path) -> bool:
    """V4L2 exposes metadata nodes next to capture nodes; keep index 0 only."""
    try:
        return (entry / "index").read_text(encoding="utf-8").strip() == "0"
    except OSError:
        return True
