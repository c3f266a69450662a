"""Process entry point.

    python main.py api                       # HTTP API (uvicorn)
    python main.py worker                    # consume every configured channel
    python main.py worker --channel email --concurrency 4
"""

import argparse
import sys
from typing import List, Optional

import uvicorn
from dotenv import load_dotenv

from infrastructure.logging import get_module_logger
from infrastructure.logging.setup import configure_logging
from infrastructure.messaging import BrokerConnectionError
from infrastructure.services import (
    get_broker_client,
    get_circuit_breakers,
    get_key_value_store,
    get_settings,
)
from modules.delivery.factory import build_worker_pool
from modules.delivery.models import Channel

logger = get_module_logger()

load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Notification delivery pipeline")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api = subparsers.add_parser("api", help="Run the HTTP API")
    api.add_argument("--host", default=None, help="Bind address (default: API_HOST)")
    api.add_argument("--port", type=int, default=None, help="Port (default: API_PORT)")

    worker = subparsers.add_parser("worker", help="Run delivery workers")
    worker.add_argument(
        "--channel",
        action="append",
        choices=[c.value for c in Channel],
        dest="channels",
        help="Channel to consume; repeat for several (default: WORKER_CHANNELS)",
    )
    worker.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Workers per channel (default: WORKER_CONCURRENCY)",
    )
    return parser


def run_api(host: Optional[str] = None, port: Optional[int] = None) -> int:
    settings = get_settings()
    uvicorn.run(
        "server.server:handler",
        host=host or settings.server.HOST,
        port=port or settings.server.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


def run_worker(
    channels: Optional[List[str]] = None, concurrency: Optional[int] = None
) -> int:
    """Connect to the broker and consume until SIGINT/SIGTERM.

    Returns:
        Process exit code; 1 when the broker is unreachable at startup.
    """
    settings = get_settings()
    configure_logging(
        log_level=settings.LOG_LEVEL, is_production=settings.is_production, role="worker"
    )

    if concurrency is not None and concurrency < 1:
        logger.error("invalid_concurrency", concurrency=concurrency)
        return 2

    broker = get_broker_client()
    try:
        broker.connect()
    except BrokerConnectionError as e:
        logger.error("worker_startup_failed", error=str(e))
        return 1

    pool = build_worker_pool(
        settings,
        broker,
        get_key_value_store(),
        get_circuit_breakers(),
        channels=channels,
        concurrency=concurrency,
    )
    lost = pool.run_forever()
    get_circuit_breakers().shutdown()
    logger.info("worker_exited", retries_lost=lost)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "api":
        return run_api(host=args.host, port=args.port)
    return run_worker(channels=args.channels, concurrency=args.concurrency)


if __name__ == "__main__":
    sys.exit(main())
