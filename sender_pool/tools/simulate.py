"""Simulate concurrent senders drawing from the pool.

Usage:
    python -m sender_pool.tools.simulate
    python -m sender_pool.tools.simulate --requests 500 --backend memory
    python -m sender_pool.tools.simulate --lease +6281234567890 --lease-after 0.5
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections import Counter

from sender_pool.adapters.store.factory import build_store
from sender_pool.application.coordinator import Coordinator
from sender_pool.config import Settings, settings
from sender_pool.domain.errors import AlreadyExists, PoolError

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

DEFAULT_RESOURCES = [
    "+6281234567890",
    "+6281234567891",
    "+6281234567892",
    "+6281234567893",
]


async def _send(coordinator: Coordinator, request_no: int, send_delay: float) -> str | None:
    try:
        resource_id = await coordinator.select_next()
    except PoolError as e:
        logger.warning("Request %d: failed to get next resource: %s", request_no, e)
        return None
    logger.info("Request %d: sending message using %s", request_no, resource_id)
    await asyncio.sleep(send_delay)
    return resource_id


async def _lease_later(
    coordinator: Coordinator, resource_ids: list[str], after: float, duration: float
) -> None:
    await asyncio.sleep(after)
    for resource_id in resource_ids:
        try:
            await coordinator.lease_resource(resource_id, duration)
        except PoolError as e:
            logger.warning("Could not lease %s: %s", resource_id, e)


async def simulate(
    run_settings: Settings,
    resources: list[str],
    requests: int,
    lease_ids: list[str],
    lease_after: float,
    lease_seconds: float,
    send_delay: float,
) -> dict[str, int]:
    """Run the workload and return selections observed per resource."""
    store = build_store(run_settings)
    coordinator = Coordinator.from_settings(store, run_settings)
    try:
        for resource_id in resources:
            try:
                resource = await coordinator.add_resource(resource_id)
                logger.info("Added %s (rank %d)", resource.id, resource.rank)
            except AlreadyExists:
                logger.info("Already registered: %s", resource_id)

        tasks = [_send(coordinator, i, send_delay) for i in range(requests)]
        if lease_ids:
            tasks.append(_lease_later(coordinator, lease_ids, lease_after, lease_seconds))
        results = await asyncio.gather(*tasks)

        observed = Counter(r for r in results if isinstance(r, str))
        await _print_summary(coordinator, observed)
        return dict(observed)
    finally:
        await store.close()


async def _print_summary(coordinator: Coordinator, observed: Counter) -> None:
    snapshot = await coordinator.snapshot()

    print(f"\n{'='*50}")
    print("USAGE SUMMARY")
    print(f"{'='*50}")
    for entry in snapshot.entries:
        flag = " (leased)" if entry.leased else ""
        print(
            f"{entry.resource.id} - {entry.count} total, "
            f"{observed.get(entry.resource.id, 0)} this run{flag}"
        )
    print(f"Successful selections this run: {sum(observed.values())}")
    print(f"Cursor: {snapshot.cursor}")
    print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Simulate concurrent senders on the pool")
    parser.add_argument(
        "--resources", nargs="+", default=DEFAULT_RESOURCES,
        help="Resource ids to register before the run",
    )
    parser.add_argument(
        "--requests", type=int, default=100,
        help="Number of concurrent select requests (default: 100)",
    )
    parser.add_argument(
        "--lease", nargs="*", default=DEFAULT_RESOURCES[:2],
        help="Resource ids to lease while the run is in progress",
    )
    parser.add_argument(
        "--lease-after", type=float, default=2.0,
        help="Seconds before leases are installed (default: 2.0)",
    )
    parser.add_argument(
        "--lease-minutes", type=float, default=50.0,
        help="Lease duration in minutes (default: 50)",
    )
    parser.add_argument(
        "--send-delay", type=float, default=1.0,
        help="Simulated message send time in seconds (default: 1.0)",
    )
    parser.add_argument(
        "--backend", choices=["redis", "sql", "memory"], default=None,
        help="Override STORE_BACKEND",
    )
    parser.add_argument(
        "--namespace", type=str, default=None,
        help="Override POOL_NAMESPACE",
    )
    args = parser.parse_args()

    overrides = {}
    if args.backend:
        overrides["store_backend"] = args.backend
    if args.namespace:
        overrides["pool_namespace"] = args.namespace
    run_settings = settings.model_copy(update=overrides)

    asyncio.run(
        simulate(
            run_settings,
            resources=args.resources,
            requests=args.requests,
            lease_ids=args.lease,
            lease_after=args.lease_after,
            lease_seconds=args.lease_minutes * 60,
            send_delay=args.send_delay,
        )
    )


if __name__ == "__main__":
    main()
