#!/usr/bin/env python3
"""
Rancher ASG Drainer - Main Entry Point
Removes terminating Auto Scaling instances from the Rancher server before they go away
"""

import os
import sys
import signal
import threading
from typing import Optional

from prometheus_client import start_http_server

# Add src to path for absolute imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.logging_config import setup_logging, get_logger
from core.completion import LifecycleCompletionReporter
from core.dispatcher import Dispatcher
from core.exceptions import TransportFatal
from core.removal import HostRemovalOrchestrator
from clients import AutoScalingNotifier, RancherClient, SQSMessageSource
from api.server import APIServer
from config import Settings


class DrainerService:
    """Main drainer service that wires the collaborators into the dispatch loop"""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the drainer service"""
        # Load settings using Pydantic
        if config_path and os.path.exists(config_path):
            self.settings = Settings.load_from_yaml_with_env_override(config_path)
        else:
            self.settings = Settings()

        setup_logging(
            level=self.settings.logging.level,
            log_file=self.settings.logging.file,
            enable_colors=self.settings.logging.colors,
            quiet_loggers=self.settings.logging.quiet_loggers
        )
        self.logger = get_logger(__name__)
        self.running = True

        missing = self.settings.validate_required()
        if missing:
            self.logger.error(f"Missing required configuration: {', '.join(missing)}")
            sys.exit(1)

        aws = self.settings.aws
        rancher = self.settings.rancher

        self.rancher = RancherClient(
            url=rancher.url,
            access_key=rancher.access_key,
            secret_key=rancher.secret_key,
            timeout=rancher.request_timeout
        )
        self.dispatcher = Dispatcher(
            source=SQSMessageSource(
                queue_url=aws.queue_url,
                region=aws.region,
                wait_time_seconds=aws.wait_time_seconds,
                max_messages=aws.max_messages,
                visibility_timeout=aws.visibility_timeout
            ),
            orchestrator=HostRemovalOrchestrator(self.rancher, host_label=rancher.host_label),
            reporter=LifecycleCompletionReporter(
                AutoScalingNotifier(region=aws.region),
                result=self.settings.drainer.lifecycle_action_result
            )
        )
        self.api_server = APIServer(self.dispatcher, self.settings.get_safe_config())

        # Setup signal handlers
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        self.logger.info("Rancher ASG Drainer initialized")
        if self.settings.debug:
            self.logger.info(f"Debug mode enabled. Settings: {self.settings.get_safe_config()}")

    def _signal_handler(self, signum, frame):
        """Stop after the message in flight has been acknowledged"""
        self.logger.info(f"Received signal {signum}, shutting down...")
        self.running = False

    def run(self):
        """Main run loop"""
        self.logger.info("Starting Rancher ASG Drainer...")

        start_http_server(self.settings.drainer.metrics_port)
        self.logger.info(f"Prometheus metrics server started on :{self.settings.drainer.metrics_port}")

        if self.settings.drainer.api_enabled:
            api_thread = threading.Thread(
                target=self.api_server.run,
                kwargs={'host': self.settings.drainer.api_host, 'port': self.settings.drainer.api_port}
            )
            api_thread.daemon = True
            api_thread.start()
            self.logger.info(f"API server started on :{self.settings.drainer.api_port}")

        reachable, detail = self.rancher.ping()
        if reachable:
            self.logger.info(f"Rancher server reachable at {self.rancher.base_url}")
        else:
            self.logger.warning(f"Rancher server not reachable yet at {self.rancher.base_url}: {detail}")

        self.dispatcher.run(lambda: self.running)
        self.logger.info("Drainer service stopped")


def main():
    """Entry point"""
    import argparse

    parser = argparse.ArgumentParser(description='Rancher ASG lifecycle hook drainer')
    parser.add_argument(
        '--config',
        default=os.getenv('CONFIG_PATH'),
        help='Path to YAML configuration file'
    )

    args = parser.parse_args()

    service = DrainerService(args.config)

    try:
        service.run()
    except TransportFatal as e:
        service.logger.error(f"Consumer error, will now exit: {e}")
        sys.exit(1)
    except Exception as e:
        service.logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
