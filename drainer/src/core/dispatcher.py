#!/usr/bin/env python3
"""
Dispatch loop: pulls lifecycle notifications off the queue one at a time

Every received message is acknowledged exactly once, whatever happens while
processing it. Redelivery would replay deactivate/delete against a cluster
manager that may already be partially modified.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from events import EventDisposition, classify_event, decode_message
from .completion import LifecycleCompletionReporter
from .exceptions import InvalidPayload, TransportFatal
from .interfaces import MessageSource, QueueMessage
from .metrics import ERRORS, MESSAGES_ACKNOWLEDGED, MESSAGES_BY_DISPOSITION, MESSAGES_RECEIVED
from .removal import Completed, HostRemovalOrchestrator, NoHostFound, RemovalOutcome, StepFailed

logger = logging.getLogger(__name__)


class DispatchState(str, Enum):
    """Per-message processing states"""
    RECEIVED = "received"
    DECODED = "decoded"
    CLASSIFIED = "classified"
    SKIPPED = "skipped"
    REMOVING = "removing"
    REPORTED = "reported"
    ACKNOWLEDGED = "acknowledged"


@dataclass
class DispatchResult:
    """What happened to a single message"""
    message_id: str
    state: DispatchState = DispatchState.RECEIVED
    last_state: Optional[DispatchState] = None
    disposition: Optional[EventDisposition] = None
    outcome: Optional[RemovalOutcome] = None
    completion_reported: bool = False
    error: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        outcome = None
        if self.outcome is not None:
            outcome = {"kind": type(self.outcome).__name__}
            if isinstance(self.outcome, StepFailed):
                outcome["step"] = self.outcome.step.value
                outcome["cause"] = str(self.outcome.cause)
            host_id = getattr(self.outcome, "host_id", None)
            if host_id:
                outcome["host_id"] = host_id
        return {
            "message_id": self.message_id,
            "state": self.state.value,
            "last_state": self.last_state.value if self.last_state else None,
            "disposition": self.disposition.value if self.disposition else None,
            "outcome": outcome,
            "completion_reported": self.completion_reported,
            "error": f"{type(self.error).__name__}: {self.error}" if self.error else None
        }


@dataclass
class DispatchStats:
    """Counters read by the status API"""
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    running: bool = False
    messages_processed: int = 0
    dispositions: Dict[str, int] = field(default_factory=dict)
    removals_completed: int = 0
    removals_failed: int = 0
    hosts_not_found: int = 0
    completions_failed: int = 0
    last_receive_at: Optional[datetime] = None
    last_result: Optional[DispatchResult] = None
    fatal_error: Optional[str] = None

    def record(self, result: DispatchResult):
        self.messages_processed += 1
        if result.disposition:
            key = result.disposition.value
            self.dispositions[key] = self.dispositions.get(key, 0) + 1
        if isinstance(result.outcome, Completed):
            self.removals_completed += 1
            if not result.completion_reported:
                self.completions_failed += 1
        elif isinstance(result.outcome, StepFailed):
            self.removals_failed += 1
        elif isinstance(result.outcome, NoHostFound):
            self.hosts_not_found += 1
        self.last_result = result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "running": self.running,
            "messages_processed": self.messages_processed,
            "dispositions": dict(self.dispositions),
            "removals_completed": self.removals_completed,
            "removals_failed": self.removals_failed,
            "hosts_not_found": self.hosts_not_found,
            "completions_failed": self.completions_failed,
            "last_receive_at": self.last_receive_at.isoformat() if self.last_receive_at else None,
            "last_result": self.last_result.to_dict() if self.last_result else None,
            "fatal_error": self.fatal_error
        }


class Dispatcher:
    """Routes queue messages through decode, classify, remove and report"""

    def __init__(
        self,
        source: MessageSource,
        orchestrator: HostRemovalOrchestrator,
        reporter: LifecycleCompletionReporter
    ):
        """
        Initialize dispatcher

        Args:
            source: Queue the notifications arrive on
            orchestrator: Host removal orchestrator
            reporter: Lifecycle completion reporter
        """
        self.source = source
        self.orchestrator = orchestrator
        self.reporter = reporter
        self.stats = DispatchStats()

    def run(self, should_continue: Callable[[], bool]):
        """
        Process messages until should_continue returns False

        Raises:
            TransportFatal: If the message source fails
        """
        self.stats.running = True
        logger.info("Queue consumer started, awaiting messages..")
        try:
            while should_continue():
                self.run_once()
        except TransportFatal as e:
            self.stats.fatal_error = str(e)
            raise
        finally:
            self.stats.running = False
        logger.info("Queue consumer stopped")

    def run_once(self) -> List[DispatchResult]:
        """Receive one batch and process it message by message"""
        messages = self.source.receive()
        self.stats.last_receive_at = datetime.now(timezone.utc)
        return [self.process(message) for message in messages]

    def process(self, message: QueueMessage) -> DispatchResult:
        """
        Process a single message and acknowledge it

        Per-message failures are logged and never raised. Only a failure to
        acknowledge (TransportFatal) escapes.
        """
        result = DispatchResult(message_id=message.message_id)
        MESSAGES_RECEIVED.inc()
        logger.info(f"=> Message received: {message.message_id}")

        try:
            self._handle(message, result)
        except Exception as e:
            logger.exception(f"Unexpected error processing message {message.message_id}: {e}")
            ERRORS.labels(type='unexpected').inc()
            result.error = e
        finally:
            self.source.acknowledge(message)
            MESSAGES_ACKNOWLEDGED.inc()
            result.last_state = result.state
            result.state = DispatchState.ACKNOWLEDGED
            self.stats.record(result)
            logger.debug(f"Message {message.message_id} acknowledged after {result.last_state.value}")

        return result

    def _handle(self, message: QueueMessage, result: DispatchResult):
        try:
            event = decode_message(message.body)
        except InvalidPayload as e:
            logger.error(f"Invalid payload in message {message.message_id}, can't process this message: {e}")
            ERRORS.labels(type='invalid_payload').inc()
            result.error = e
            return
        result.state = DispatchState.DECODED

        disposition = classify_event(event)
        result.disposition = disposition
        result.state = DispatchState.CLASSIFIED
        MESSAGES_BY_DISPOSITION.labels(disposition=disposition.value).inc()

        if disposition == EventDisposition.TEST_NOTIFICATION:
            logger.info("Message was a test notification, no further processing required")
            result.state = DispatchState.SKIPPED
            return

        if disposition == EventDisposition.UNRECOGNIZED:
            logger.warning(
                f"Unknown message type (Event={event.event!r}, "
                f"LifecycleTransition={event.lifecycle_transition!r})"
            )
            result.state = DispatchState.SKIPPED
            return

        if not event.instance_id:
            result.error = InvalidPayload("Termination notification has no EC2InstanceId")
            logger.error(f"Invalid payload in message {message.message_id}: {result.error}")
            ERRORS.labels(type='invalid_payload').inc()
            result.state = DispatchState.SKIPPED
            return

        logger.info(
            f"Received instance terminating notification for {event.instance_id} "
            f"(group {event.auto_scaling_group_name}, request {event.request_id})"
        )
        result.state = DispatchState.REMOVING
        outcome = self.orchestrator.remove(event.instance_id)
        result.outcome = outcome

        if isinstance(outcome, NoHostFound):
            logger.warning(f"NoHostFound: no host for {outcome.instance_id} in cluster manager, nothing to remove")
            return

        if isinstance(outcome, StepFailed):
            logger.error(
                f"StepFailed({outcome.step.value}): could not remove the host for "
                f"{event.instance_id}, leaving the lifecycle hook to time out: {outcome.cause}"
            )
            ERRORS.labels(type=f'step_failed_{outcome.step.value}').inc()
            return

        result.completion_reported = self.reporter.report(event)
        if not result.completion_reported:
            ERRORS.labels(type='completion').inc()
        result.state = DispatchState.REPORTED
