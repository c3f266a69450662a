from contextlib import asynccontextmanager
from typing import AsyncIterator, TYPE_CHECKING

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.logging.setup import configure_logging
from infrastructure.messaging import BrokerConnectionError
from infrastructure.services import (
    get_broker_client,
    get_circuit_breakers,
    get_key_value_store,
    get_settings,
)
from modules.delivery.factory import (
    build_metrics,
    build_publisher,
    build_status_tracker,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(
        log_level=settings.LOG_LEVEL,
        is_production=settings.is_production,
        role="api",
    )


def _list_configs(settings: "Settings", logger: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


def _connect_broker(app: FastAPI, logger: BoundLogger) -> None:
    # The API keeps serving when the broker is down: /health reports it and
    # submissions answer 503. BrokerClient.publish reconnects on the next
    # call the broker circuit admits.
    try:
        app.state.broker.connect()
    except BrokerConnectionError as exc:
        logger.error("broker_unavailable_at_startup", error=str(exc))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _list_configs(settings, logger)

    app.state.store = get_key_value_store()
    app.state.breakers = get_circuit_breakers()
    app.state.broker = get_broker_client()
    _connect_broker(app, logger)

    app.state.status_tracker = build_status_tracker(settings, app.state.store)
    app.state.publisher = build_publisher(
        settings, app.state.broker, app.state.store, app.state.breakers
    )
    app.state.metrics = build_metrics(
        app.state.broker, app.state.breakers, app.state.store
    )

    yield

    logger.info("application_shutdown")
    app.state.broker.close()
    app.state.breakers.shutdown()
