"""CLI interface for taskbot."""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

import uvicorn

from taskbot.core.config import load_config
from taskbot.core.logging import setup_logging
from taskbot.runner import TaskBotRunner

logger = logging.getLogger(__name__)


async def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="taskbot - turn chat messages into Basecamp to-dos")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to configuration file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(
        level="DEBUG" if args.verbose else config.logging.level,
        directory=config.logging.directory,
        max_size_mb=config.logging.max_size_mb,
        backup_count=config.logging.backup_count,
    )

    runner = TaskBotRunner(config)

    uvicorn_config = uvicorn.Config(
        runner.app,
        host=config.server.host,
        port=config.server.port,
        log_level="debug" if args.verbose else "info",
    )
    server = uvicorn.Server(uvicorn_config)

    # Setup signal handlers for graceful shutdown
    stop_event = asyncio.Event()

    def signal_handler() -> None:
        stop_event.set()

    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, signal_handler)
    loop.add_signal_handler(signal.SIGTERM, signal_handler)

    await runner.start()
    server_task = asyncio.create_task(server.serve())

    try:
        await stop_event.wait()
        logger.info("Shutdown signal received, stopping...")
    finally:
        await runner.stop()
        server.should_exit = True
        await server_task


def run() -> None:
    """Entry point for the taskbot console script."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
