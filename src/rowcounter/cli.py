"""Command line entry point: one probe cycle against a report server.

Settings come from ``ROWCOUNTER_*`` environment variables (optionally a
.env file); the published samples are printed as NDJSON.
"""

from __future__ import annotations

import argparse
import asyncio
import sqlite3
import sys

from .adapters.logging import configure_logging, get_logger
from .adapters.storage import InMemoryMetricsStorage, SQLiteMetricsStorage
from .config import ProbeConfig
from .core.encoding import encode_metrics
from .core.errors import ConfigError
from .monitor import RowCounterMonitor

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_SETUP = 2


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rowcounter",
        description="Count rows of a report export and print them as NDJSON metric samples.",
    )
    p.add_argument("--host", required=True, help="Report server host name or address.")
    p.add_argument(
        "--env-file",
        default=".env",
        help="Optional .env file with ROWCOUNTER_* settings (default: ./.env).",
    )
    p.add_argument(
        "--sqlite",
        default=None,
        help="Also store the published samples in this SQLite database.",
    )
    p.add_argument(
        "--execution-timeout",
        type=float,
        default=120.0,
        help="Cancel the run if it takes longer than this many seconds (default: 120).",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for stderr output (default: INFO).",
    )
    return p


async def run_once(
    config: ProbeConfig,
    host: str,
    *,
    execution_timeout: float,
    sqlite_path: str | None = None,
    monitor: RowCounterMonitor | None = None,
    storage: InMemoryMetricsStorage | None = None,
) -> int:
    """Run one setup/execute/teardown cycle and print the published samples."""
    storage = storage or InMemoryMetricsStorage()
    monitor = monitor or RowCounterMonitor(storage)

    if not monitor.setup(config).ok:
        monitor.teardown()
        return EXIT_SETUP
    try:
        status = await asyncio.wait_for(monitor.execute(host), timeout=execution_timeout)
    except TimeoutError:
        logger.error("Execution exceeded %gs and was cancelled", execution_timeout)
        return EXIT_FAILED
    finally:
        monitor.teardown()

    if not status.ok:
        return EXIT_FAILED

    samples = [s async for s in storage.read()]
    sys.stdout.write(encode_metrics(samples))
    if sqlite_path:
        sink = SQLiteMetricsStorage(sqlite_path)
        try:
            await sink.write_many(samples)
        except sqlite3.Error as e:
            logger.error("Could not store samples in %s: %s", sqlite_path, e)
            return EXIT_FAILED
        finally:
            await sink.close()
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    configure_logging(ns.log_level)

    try:
        config = ProbeConfig.from_env(env_file=ns.env_file)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_SETUP

    return asyncio.run(
        run_once(
            config,
            ns.host,
            execution_timeout=ns.execution_timeout,
            sqlite_path=ns.sqlite,
        )
    )
