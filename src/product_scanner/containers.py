"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from product_scanner.adapters.open_facts_client import HttpxOpenFactsClient
from product_scanner.adapters.opencv_camera import (
    OpenCvBarcodeDecoder,
    OpenCvCameraBackend,
)
from product_scanner.config import Settings
from product_scanner.services.cache import InMemoryCache
from product_scanner.services.devices import CameraBackend
from product_scanner.services.products import ProductService
from product_scanner.services.scanning import BarcodeDecoder, ScanSessionController


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    product_service: ProductService
    camera_backend: CameraBackend
    decoder_factory: Callable[[], BarcodeDecoder]
    close_resources: Callable[[], Awaitable[None]]

    def new_scan_session(self) -> ScanSessionController:
        """Create a scan controller owning its own decoder."""
        return ScanSessionController(
            camera=self.camera_backend,
            decoder=self.decoder_factory(),
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    client = HttpxOpenFactsClient.create(
        base_urls=resolved_settings.database_urls(),
        user_agent=resolved_settings.user_agent,
        timeout_seconds=resolved_settings.http_timeout_seconds,
    )
    product_service = ProductService(
        client=client,
        cache=InMemoryCache(),
        product_ttl_seconds=resolved_settings.product_cache_ttl_seconds,
        debug=resolved_settings.debug,
    )
    camera_backend = OpenCvCameraBackend(
        probe_limit=resolved_settings.camera_probe_limit
    )

    async def close_resources() -> None:
        await client.close()

    return AppContainer(
        settings=resolved_settings,
        product_service=product_service,
        camera_backend=camera_backend,
        decoder_factory=OpenCvBarcodeDecoder,
        close_resources=close_resources,
    )
