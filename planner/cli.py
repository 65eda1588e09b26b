"""CLI entry point for batch-adding delivery addresses.

Usage:
    python -m planner.cli addresses.txt --document /tmp/entregas.json
    cat addresses.txt | python -m planner.cli --kmpl 9.5
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root (must be before other imports)
load_dotenv()
import httpx  # noqa: E402

from planner.contracts.batch import BatchProgress  # noqa: E402
from planner.contracts.enums import FallbackCachePolicy  # noqa: E402
from planner.engine import RoutePlanner  # noqa: E402
from planner.errors import BaseResolutionError  # noqa: E402
from planner.persistence.document_store import DocumentStore  # noqa: E402
from planner.persistence.errors import PersistenceError  # noqa: E402
from planner.services.batch import split_queries  # noqa: E402
from planner.services.geocoding import NominatimClient  # noqa: E402
from planner.services.routing import OsrmClient  # noqa: E402

logger = logging.getLogger(__name__)


def _log_progress(progress: BatchProgress) -> None:
    logger.info(
        "(%d/%d) %s: %s", progress.index, progress.total, progress.status.value, progress.query
    )


async def run(args: argparse.Namespace) -> int:
    text = args.input.read_text(encoding="utf-8") if args.input else sys.stdin.read()
    queries = split_queries(text)
    store = DocumentStore(args.document)
    policy = FallbackCachePolicy.RETRY if args.retry_fallback else FallbackCachePolicy.CACHE

    async with httpx.AsyncClient(timeout=float(os.environ.get("HTTP_TIMEOUT_SECONDS", "15"))) as http:
        planner = RoutePlanner(
            NominatimClient(http_client=http),
            OsrmClient(http_client=http),
            fallback_policy=policy,
        )
        planner.load_document(store.load())
        if args.kmpl is not None:
            planner.set_fuel_efficiency(args.kmpl)

        # 1. Base (fatal if unresolved)
        try:
            base = await planner.resolve_base()
        except BaseResolutionError as exc:
            logger.error("%s", exc)
            return 2
        logger.info("Base: %s (%.6f, %.6f)", base.name, base.lat, base.lng)

        # 2. Batch
        if queries:
            summary = await planner.run_batch(queries, on_progress=_log_progress)
            logger.info("Done: %d added, %d failed", summary.succeeded, summary.failed)
        else:
            logger.info("No addresses to process")

        # 3. Labels, save, summary
        await planner.wait_for_lookups()
        try:
            store.save(planner.to_document())
        except PersistenceError as exc:
            logger.error("%s", exc)
            return 3
        logger.info("Saved %d stops to %s", len(planner.stops), store.path)

        result = await planner.summary()
        print(f"Stops:  {result.stop_count}")
        print(f"Km:     {result.distance_km:.2f} ({result.source})")
        print(f"Liters: {result.liters_needed:.2f}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Delivery route batch import")
    parser.add_argument("input", type=Path, nargs="?", help="Addresses, one per line (default: stdin)")
    parser.add_argument("--document", type=Path, default=None, help="Stop list JSON document")
    parser.add_argument("--kmpl", type=float, default=None, help="Fuel efficiency in km per liter")
    parser.add_argument(
        "--retry-fallback",
        action="store_true",
        help="Do not cache straight-line results; retry road routing on every read",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()
    if args.kmpl is not None and args.kmpl < 0:
        parser.error("--kmpl must not be negative")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
