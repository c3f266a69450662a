from unittest.mock import MagicMock, patch

import pytest

import main
from infrastructure.messaging import BrokerConnectionError


def test_parser_api_defaults():
    args = main.build_parser().parse_args(["api"])
    assert args.command == "api"
    assert args.host is None
    assert args.port is None


def test_parser_worker_channels():
    args = main.build_parser().parse_args(
        ["worker", "--channel", "email", "--channel", "push", "--concurrency", "3"]
    )
    assert args.channels == ["email", "push"]
    assert args.concurrency == 3


def test_parser_rejects_unknown_channel():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args(["worker", "--channel", "sms"])


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args([])


@patch("main.uvicorn.run")
def test_run_api(mock_run):
    assert main.main(["api", "--port", "9000"]) == 0

    args, kwargs = mock_run.call_args
    assert args == ("server.server:handler",)
    assert kwargs["port"] == 9000


def test_run_worker_rejects_zero_concurrency():
    assert main.main(["worker", "--concurrency", "0"]) == 2


@patch("main.get_broker_client")
def test_run_worker_broker_unreachable(mock_get_broker):
    broker = MagicMock()
    broker.connect.side_effect = BrokerConnectionError("refused")
    mock_get_broker.return_value = broker

    assert main.main(["worker"]) == 1


@patch("main.get_circuit_breakers")
@patch("main.get_key_value_store")
@patch("main.build_worker_pool")
@patch("main.get_broker_client")
def test_run_worker_runs_pool(
    mock_get_broker, mock_build_pool, _mock_store, mock_breakers
):
    mock_build_pool.return_value.run_forever.return_value = 0

    assert main.main(["worker", "--channel", "push", "--concurrency", "2"]) == 0

    mock_get_broker.return_value.connect.assert_called_once()
    kwargs = mock_build_pool.call_args.kwargs
    assert kwargs["channels"] == ["push"]
    assert kwargs["concurrency"] == 2
    mock_breakers.return_value.shutdown.assert_called()
