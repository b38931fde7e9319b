"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from product_scanner.adapters.open_facts_client import ProductDatabaseClient
from product_scanner.config import Settings
from product_scanner.containers import AppContainer
from product_scanner.domain.errors import (
    CameraPermissionDenied,
    ProductLookupError,
    StreamEnded,
)
from product_scanner.domain.products import ProductDomain
from product_scanner.domain.scanning import CameraDevice
from product_scanner.services.cache import InMemoryCache
from product_scanner.services.devices import CameraBackend
from product_scanner.services.products import ProductService
from product_scanner.services.scanning import BarcodeDecoder, VideoSink

NUTELLA_BARCODE = "3017620422003"


def nutella_payload() -> dict[str, object]:
    return {
        "code": NUTELLA_BARCODE,
        "status": 1,
        "status_verbose": "product found",
        "product": {
            "product_name": "Nutella",
            "brands": "Ferrero",
            "image_url": "https://images.openfoodfacts.org/nutella.jpg",
            "nutriscore_grade": "e",
            "quantity": "400 g",
            "nutriments": {
                "energy-kcal_100g": 539,
                "energy_100g": 2252,
                "fat_100g": 30.9,
                "sugars_100g": 56.3,
                "proteins_100g": 6.3,
            },
        },
    }


def not_found_payload(barcode: str) -> dict[str, object]:
    return {"code": barcode, "status": 0, "status_verbose": "product not found"}


@dataclass
class FakeProductDatabaseClient(ProductDatabaseClient):
    """Fake product database that records lookups."""

    payloads: dict[tuple[ProductDomain, str], dict[str, object]] = field(
        default_factory=lambda: {
            (ProductDomain.FOOD, NUTELLA_BARCODE): nutella_payload()
        }
    )
    error: ProductLookupError | None = None
    calls: list[tuple[str, ProductDomain]] = field(default_factory=list)

    async def fetch_product(
        self, barcode: str, domain: ProductDomain
    ) -> dict[str, object]:
        self.calls.append((barcode, domain))
        if self.error is not None:
            raise self.error
        return self.payloads.get((domain, barcode), not_found_payload(barcode))


@dataclass
class FakeCameraBackend(CameraBackend):
    """Fake camera platform with configurable devices and permission."""

    devices: list[CameraDevice] = field(
        default_factory=lambda: [
            CameraDevice(device_id="0", label="Front Camera"),
            CameraDevice(device_id="1", label="Back Camera"),
        ]
    )
    deny: bool = False
    calls: list[str] = field(default_factory=list)

    async def request_access(self) -> None:
        self.calls.append("request_access")
        await asyncio.sleep(0)
        if self.deny:
            raise CameraPermissionDenied()

    async def list_video_inputs(self) -> list[CameraDevice]:
        self.calls.append("list_video_inputs")
        await asyncio.sleep(0)
        return list(self.devices)


@dataclass
class FakeBarcodeDecoder(BarcodeDecoder):
    """Fake decoder that tracks camera acquisition and release."""

    barcode: str = NUTELLA_BARCODE
    error: Exception | None = None
    block: bool = False
    opened: int = 0
    released: int = 0
    stop_calls: int = 0
    device_ids: list[str] = field(default_factory=list)
    _stopped: asyncio.Event | None = None

    @property
    def stream_open(self) -> bool:
        return self.opened > self.released

    async def decode_once(self, device_id: str, sink: VideoSink | None = None) -> str:
        self.device_ids.append(device_id)
        self.opened += 1
        self._stopped = asyncio.Event()
        try:
            if sink is not None:
                sink.show("frame")
            if self.block:
                await self._stopped.wait()
                raise StreamEnded()
            if self.error is not None:
                raise self.error
            return self.barcode
        finally:
            self.released += 1

    def stop(self) -> None:
        self.stop_calls += 1
        if self._stopped is not None:
            self._stopped.set()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        food_database_url="https://food.test",
        pet_database_url="https://pet.test",
        beauty_database_url="https://beauty.test",
    )


@pytest.fixture
def product_client() -> FakeProductDatabaseClient:
    return FakeProductDatabaseClient()


@pytest.fixture
def camera_backend() -> FakeCameraBackend:
    return FakeCameraBackend()


@pytest.fixture
def container(
    settings: Settings,
    product_client: FakeProductDatabaseClient,
    camera_backend: FakeCameraBackend,
) -> AppContainer:
    product_service = ProductService(client=product_client, cache=InMemoryCache())

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        product_service=product_service,
        camera_backend=camera_backend,
        decoder_factory=FakeBarcodeDecoder,
        close_resources=close_resources,
    )
