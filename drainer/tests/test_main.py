#!/usr/bin/env python3
"""
Tests for service start-up and shutdown
"""

import signal
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

import main
from core.exceptions import TransportFatal

EXAMPLE_CONFIG = Path(__file__).resolve().parents[1] / "config" / "drainer.example.yaml"


@pytest.fixture
def service_env(monkeypatch):
    for name in (
        "SQS_URL", "RANCHER_SERVER_ACCESS_KEY", "RANCHER_SERVER_SECRET_KEY",
        "CONFIG_PATH", "LOG_FILE", "DEBUG"
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DRAINER_API_ENABLED", "false")
    monkeypatch.setattr(main, "setup_logging", Mock())
    monkeypatch.setattr(main, "start_http_server", Mock())
    monkeypatch.setattr(sys, "argv", ["rancher-asg-drainer"])

    handlers = {signum: signal.getsignal(signum) for signum in (signal.SIGINT, signal.SIGTERM)}
    yield monkeypatch
    for signum, handler in handlers.items():
        signal.signal(signum, handler)


@pytest.fixture
def sqs_source(service_env):
    """Configured environment with the AWS and Rancher clients replaced"""
    service_env.setenv("SQS_URL", "https://sqs.eu-west-1.amazonaws.com/1/hooks")
    service_env.setenv("RANCHER_SERVER_ACCESS_KEY", "access")
    service_env.setenv("RANCHER_SERVER_SECRET_KEY", "secret")

    rancher = Mock()
    rancher.return_value.ping.return_value = (True, "ok")
    sqs = Mock()
    sqs.return_value.receive.return_value = []
    service_env.setattr(main, "RancherClient", rancher)
    service_env.setattr(main, "SQSMessageSource", sqs)
    service_env.setattr(main, "AutoScalingNotifier", Mock())
    return sqs.return_value


class TestStartup:
    """Test configuration checks at start-up"""

    def test_missing_configuration_exits_1(self, service_env):
        with pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code == 1

    def test_example_config_without_env_exits_1(self, service_env):
        service_env.setattr(sys, "argv", ["rancher-asg-drainer", "--config", str(EXAMPLE_CONFIG)])

        with pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code == 1

    def test_clients_built_from_settings(self, sqs_source):
        service = main.DrainerService()

        main.SQSMessageSource.assert_called_once_with(
            queue_url="https://sqs.eu-west-1.amazonaws.com/1/hooks",
            region=service.settings.aws.region,
            wait_time_seconds=service.settings.aws.wait_time_seconds,
            max_messages=service.settings.aws.max_messages,
            visibility_timeout=service.settings.aws.visibility_timeout
        )
        assert main.RancherClient.call_args.kwargs["access_key"] == "access"
        assert service.dispatcher.source is sqs_source


class TestRun:
    """Test how the dispatch loop ends"""

    def test_transport_fatal_exits_1(self, sqs_source):
        sqs_source.receive.side_effect = TransportFatal("queue does not exist")

        with pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code == 1
        main.start_http_server.assert_called_once()

    def test_sigterm_stops_loop(self, sqs_source):
        service = main.DrainerService()

        def receive():
            signal.raise_signal(signal.SIGTERM)
            return []

        sqs_source.receive.side_effect = receive

        service.run()

        assert service.running is False
        assert sqs_source.receive.call_count == 1
        assert service.dispatcher.stats.running is False
        assert service.dispatcher.stats.fatal_error is None

    def test_clean_stop_returns_normally(self, sqs_source):
        def receive():
            signal.raise_signal(signal.SIGINT)
            return []

        sqs_source.receive.side_effect = receive

        main.main()

        assert sqs_source.receive.call_count == 1
