"""Command-line scanner: scan a barcode with a local camera or look one up."""

import argparse
import asyncio
import logging
from pathlib import Path

from product_scanner.adapters.opencv_camera import LatestFrameSink
from product_scanner.app_logging import configure_logging
from product_scanner.containers import AppContainer, build_container
from product_scanner.domain.errors import ProductLookupError, ProductNotFound
from product_scanner.domain.nutrition import NutritionFacts
from product_scanner.domain.products import (
    DOMAIN_PROFILES,
    ProductDomain,
    ResolvedProduct,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="product-scanner",
        description="Scan product barcodes and show nutrition and advice.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="scan a barcode with the camera")
    _add_domain_argument(scan)
    scan.add_argument("--timeout", type=float, default=30.0, help="seconds to wait")
    scan.add_argument("--snapshot", type=Path, help="save the last camera frame")
    scan.add_argument("--per-package", action="store_true")

    lookup = subparsers.add_parser("lookup", help="look up a barcode")
    lookup.add_argument("barcode")
    _add_domain_argument(lookup)
    lookup.add_argument("--per-package", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the product-scanner command."""
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    return asyncio.run(run(args, build_container()))


async def run(args: argparse.Namespace, container: AppContainer) -> int:
    """Execute a parsed command and return the exit code."""
    try:
        if args.command == "scan":
            barcode = await scan_barcode(container, args.timeout, args.snapshot)
            if barcode is None:
                return 1
        else:
            barcode = args.barcode
        return await lookup_barcode(
            container, barcode, ProductDomain(args.type), args.per_package
        )
    finally:
        await container.close_resources()


async def scan_barcode(
    container: AppContainer, timeout: float, snapshot: Path | None = None
) -> str | None:
    """Scan until a barcode decodes, the timeout passes or an error occurs."""
    controller = container.new_scan_session()
    sink = LatestFrameSink() if snapshot else None
    print("Point the camera at a barcode...")
    try:
        barcode = await asyncio.wait_for(controller.start_scanning(sink), timeout)
    except TimeoutError:
        print(f"No barcode detected within {timeout:g}s.")
        return None
    finally:
        if controller.is_scanning:
            controller.stop_scanning()
    if sink is not None and snapshot is not None and sink.save(snapshot):
        print(f"Saved snapshot to {snapshot}")
    if barcode is None:
        print(controller.error_message or "Scan stopped.")
        return None
    print(f"Scanned {barcode} with {controller.device.label or 'camera'}")
    return barcode


async def lookup_barcode(
    container: AppContainer,
    barcode: str,
    domain: ProductDomain,
    per_package: bool = False,
) -> int:
    try:
        product = await container.product_service.resolve(barcode, domain)
    except ProductNotFound:
        print(f"Product {barcode} not found in the {domain} database.")
        return 1
    except ProductLookupError as exc:
        print(f"Could not fetch product data: {exc}")
        return 1
    print(format_product(product, per_package=per_package))
    return 0


def format_product(product: ResolvedProduct, per_package: bool = False) -> str:
    """Render a product as plain text."""
    title = product.name if not product.brand else f"{product.name} ({product.brand})"
    details = [f"Type: {DOMAIN_PROFILES[product.domain].label}"]
    if product.grade:
        details.append(f"Grade: {product.grade}")
    if product.quantity:
        details.append(f"Quantity: {product.quantity}")
    lines = [title, "  ".join(details)]
    lines.append(f"Per 100g: {_format_nutrition(product.nutrition)}")
    if per_package:
        package = product.package_nutrition()
        if package is None:
            lines.append("Per package: package size unknown")
        else:
            lines.append(f"Per package: {_format_nutrition(package)}")
    lines.append(f"Advice: {product.advice}")
    return "\n".join(lines)


def _format_nutrition(facts: NutritionFacts) -> str:
    return (
        f"{facts.calories:.0f} kcal, fat {facts.fat:.1f}g, "
        f"sugars {facts.sugars:.1f}g, proteins {facts.proteins:.1f}g"
    )


def _add_domain_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--type",
        choices=[domain.value for domain in ProductDomain],
        default=ProductDomain.FOOD.value,
        help="product database to query",
    )
