"""
Notification worker entry point.

Wires the application-scoped singletons from the container and runs until
SIGINT or SIGTERM:

- Startup: build listener registry, dispatcher and business event processor;
  start the cache sweep; subscribe the notification stream consumer
- Shutdown: stop the stream broker (consumer tasks, then connection), wait
  for pending listener dispatches, then cancel the cache sweep

Run:
    python -m src.main
"""

import asyncio
import signal
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.core.config import get_settings
from src.core.container import (
    get_business_event_emitter,
    get_cache,
    get_listener_registry,
    get_logger,
    get_notification_stream_consumer,
    get_stream_broker,
)


@asynccontextmanager
async def lifespan() -> AsyncGenerator[None, None]:
    """Worker lifespan context manager.

    Yields:
        None while the worker is running.
    """
    settings = get_settings()
    logger = get_logger()

    # Building the emitter builds the processor, dispatcher and registry.
    get_business_event_emitter()

    cache = get_cache()
    cache.start()

    broker = get_stream_broker()
    consumer = get_notification_stream_consumer()
    descriptor = await broker.subscribe(
        settings.notification_stream,
        settings.notification_stream_group,
        settings.consumer_name,
        consumer.handle,
        batch_size=settings.stream_batch_size,
        block_ms=settings.stream_block_ms,
    )
    logger.info(
        "worker_started",
        app=settings.app_name,
        version=settings.app_version,
        environment=settings.environment.value,
        subscription=descriptor.key,
    )

    try:
        yield
    finally:
        await broker.shutdown()
        await get_listener_registry().drain()
        await cache.stop()
        logger.info("worker_stopped")


async def wait_for_shutdown_signal() -> None:
    """Block until SIGINT or SIGTERM is received."""
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)
    try:
        await stop.wait()
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)


async def run() -> None:
    """Run the worker until a shutdown signal arrives."""
    async with lifespan():
        await wait_for_shutdown_signal()
        get_logger().info("shutdown_signal_received")


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
