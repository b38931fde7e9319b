"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from product_scanner.api.models import DomainResponse, ProductResponse, domain_responses
from product_scanner.app_logging import configure_logging
from product_scanner.containers import AppContainer
from product_scanner.domain.errors import ProductLookupError, ProductNotFound
from product_scanner.domain.products import ProductDomain


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/domains")
    async def domains() -> list[DomainResponse]:
        """Return display data for the scan domains."""
        return domain_responses()

    @app.get("/api/product/{barcode}", response_model=ProductResponse)
    async def product(
        barcode: str,
        request: Request,
        domain: ProductDomain = Query(default=ProductDomain.FOOD, alias="type"),
    ) -> ProductResponse | JSONResponse:
        """Resolve a barcode in the requested domain."""
        state_container: AppContainer = request.app.state.container
        try:
            resolved = await state_container.product_service.resolve(barcode, domain)
        except ProductNotFound:
            return JSONResponse(
                status_code=404, content={"message": "Product not found"}
            )
        except ProductLookupError:
            logger.exception("Error fetching product %s (%s)", barcode, domain)
            return JSONResponse(
                status_code=500, content={"message": "Error fetching product data"}
            )
        return ProductResponse.from_product(resolved)

    return app
