"""Tests for the scan session state machine."""

import asyncio

import pytest

from product_scanner.domain.errors import CameraUnsupported, ScanErrorKind
from product_scanner.domain.scanning import ScanState
from product_scanner.services.scanning import ScanSessionController
from tests.conftest import NUTELLA_BARCODE, FakeBarcodeDecoder, FakeCameraBackend


def _controller(
    camera: FakeCameraBackend | None = None,
    decoder: FakeBarcodeDecoder | None = None,
) -> tuple[ScanSessionController, FakeCameraBackend, FakeBarcodeDecoder]:
    camera = camera or FakeCameraBackend()
    decoder = decoder or FakeBarcodeDecoder()
    return ScanSessionController(camera=camera, decoder=decoder), camera, decoder


async def _wait_for_state(controller: ScanSessionController, state: ScanState) -> None:
    for _ in range(100):
        if controller.state == state:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"controller never reached {state}")


def test_scan_success_prefers_back_camera_and_releases_stream() -> None:
    controller, camera, decoder = _controller()
    scanned: list[str] = []
    controller.on_scan_success = scanned.append

    barcode = asyncio.run(controller.start_scanning())

    assert barcode == NUTELLA_BARCODE
    assert scanned == [NUTELLA_BARCODE]
    assert controller.state == ScanState.SUCCESS
    assert controller.barcode == NUTELLA_BARCODE
    assert controller.device is not None
    assert controller.device.label == "Back Camera"
    assert decoder.device_ids == ["1"]
    assert decoder.stop_calls == 1
    assert not decoder.stream_open
    assert camera.calls == ["request_access", "list_video_inputs"]


def test_permission_denied_stops_before_enumeration() -> None:
    controller, camera, decoder = _controller(camera=FakeCameraBackend(deny=True))
    errors: list[str] = []
    controller.on_scan_error = errors.append

    barcode = asyncio.run(controller.start_scanning())

    assert barcode is None
    assert controller.state == ScanState.ERROR
    assert controller.error is not None
    assert controller.error.kind == ScanErrorKind.PERMISSION_DENIED
    assert errors == [controller.error_message]
    assert camera.calls == ["request_access"]
    assert decoder.opened == 0


def test_no_devices_is_an_error() -> None:
    controller, _, decoder = _controller(camera=FakeCameraBackend(devices=[]))

    asyncio.run(controller.start_scanning())

    assert controller.state == ScanState.ERROR
    assert controller.error is not None
    assert controller.error.kind == ScanErrorKind.NO_CAMERA_FOUND
    assert decoder.opened == 0


def test_decoder_failure_is_an_error() -> None:
    decoder = FakeBarcodeDecoder(error=CameraUnsupported())
    controller, _, _ = _controller(decoder=decoder)

    asyncio.run(controller.start_scanning())

    assert controller.state == ScanState.ERROR
    assert controller.error is not None
    assert controller.error.kind == ScanErrorKind.CAMERA_UNSUPPORTED
    assert not decoder.stream_open


def test_unexpected_decoder_exception_ends_in_error_and_allows_retry() -> None:
    decoder = FakeBarcodeDecoder(error=OSError("device vanished"))
    controller, _, _ = _controller(decoder=decoder)
    errors: list[str] = []
    controller.on_scan_error = errors.append

    barcode = asyncio.run(controller.start_scanning())

    assert barcode is None
    assert controller.state == ScanState.ERROR
    assert controller.error is not None
    assert controller.error.kind == ScanErrorKind.OTHER
    assert controller.error_message == "device vanished"
    assert errors == ["device vanished"]
    assert not decoder.stream_open

    decoder.error = None
    assert asyncio.run(controller.start_scanning()) == NUTELLA_BARCODE
    assert controller.state == ScanState.SUCCESS


def test_stop_right_after_start_returns_to_idle() -> None:
    controller, camera, decoder = _controller()

    async def scenario() -> str | None:
        task = asyncio.create_task(controller.start_scanning())
        await asyncio.sleep(0)
        assert controller.state == ScanState.REQUESTING_PERMISSION
        controller.stop_scanning()
        return await task

    result = asyncio.run(scenario())

    assert result is None
    assert controller.state == ScanState.IDLE
    assert controller.error is None
    assert decoder.opened == 0
    assert not decoder.stream_open
    assert camera.calls == ["request_access"]


def test_stop_during_decode_swallows_stream_end() -> None:
    decoder = FakeBarcodeDecoder(block=True)
    controller, _, _ = _controller(decoder=decoder)
    errors: list[str] = []
    controller.on_scan_error = errors.append

    async def scenario() -> str | None:
        task = asyncio.create_task(controller.start_scanning())
        await _wait_for_state(controller, ScanState.SCANNING)
        await asyncio.sleep(0)
        controller.stop_scanning()
        return await task

    result = asyncio.run(scenario())

    assert result is None
    assert controller.state == ScanState.IDLE
    assert controller.error is None
    assert errors == []
    assert not decoder.stream_open


def test_second_start_while_scanning_is_rejected() -> None:
    decoder = FakeBarcodeDecoder(block=True)
    controller, _, _ = _controller(decoder=decoder)

    async def scenario() -> None:
        task = asyncio.create_task(controller.start_scanning())
        await _wait_for_state(controller, ScanState.SCANNING)
        with pytest.raises(RuntimeError):
            await controller.start_scanning()
        controller.stop_scanning()
        await task

    asyncio.run(scenario())

    assert decoder.opened == 1
    assert controller.state == ScanState.IDLE


def test_restart_after_error() -> None:
    camera = FakeCameraBackend(deny=True)
    controller, _, _ = _controller(camera=camera)

    asyncio.run(controller.start_scanning())
    assert controller.state == ScanState.ERROR

    camera.deny = False
    barcode = asyncio.run(controller.start_scanning())

    assert barcode == NUTELLA_BARCODE
    assert controller.state == ScanState.SUCCESS
    assert controller.error is None


def test_stop_when_idle_is_safe() -> None:
    controller, _, decoder = _controller()

    controller.stop_scanning()
    controller.stop_scanning()

    assert controller.state == ScanState.IDLE
    assert decoder.stop_calls == 2
