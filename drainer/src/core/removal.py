#!/usr/bin/env python3
"""
Host removal orchestration against the cluster manager

Removal is lookup -> deactivate -> delete, stopping at the first failure.
Nothing is retried here; a stalled lifecycle hook is completed by Auto Scaling
once its heartbeat timeout expires.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .exceptions import ClusterControlError, HostLookupError, DeactivateError, DeleteError
from .interfaces import ClusterControl
from .metrics import REMOVAL_OUTCOMES, REMOVAL_STEP_DURATION

logger = logging.getLogger(__name__)

DEFAULT_HOST_LABEL = "HOSTID"


class RemovalStep(str, Enum):
    """Steps of the host removal sequence"""
    LOOKUP = "lookup"
    DEACTIVATE = "deactivate"
    DELETE = "delete"


@dataclass(frozen=True)
class NoHostFound:
    """No registered host carries the instance id label"""
    instance_id: str


@dataclass(frozen=True)
class StepFailed:
    """The removal sequence stopped at a failed step"""
    step: RemovalStep
    cause: ClusterControlError
    host_id: Optional[str] = None


@dataclass(frozen=True)
class Completed:
    """The host was deactivated and deleted"""
    host_id: str


RemovalOutcome = Union[NoHostFound, StepFailed, Completed]


class HostRemovalOrchestrator:
    """Removes the cluster manager host registered for an EC2 instance"""

    def __init__(self, cluster: ClusterControl, host_label: str = DEFAULT_HOST_LABEL):
        """
        Initialize host removal orchestrator

        Args:
            cluster: Cluster manager client
            host_label: Host label holding the EC2 instance id
        """
        self.cluster = cluster
        self.host_label = host_label

    def remove(self, instance_id: str) -> RemovalOutcome:
        """
        Remove the host labelled with the given instance id

        Args:
            instance_id: EC2 instance id from the termination notification

        Returns:
            NoHostFound, StepFailed or Completed
        """
        try:
            with REMOVAL_STEP_DURATION.labels(step=RemovalStep.LOOKUP.value).time():
                host_ids = list(self.cluster.lookup_hosts_by_label(self.host_label, instance_id))
        except HostLookupError as e:
            return self._failed(RemovalStep.LOOKUP, e)

        if not host_ids:
            logger.warning(f"No host labelled {self.host_label}={instance_id} found in cluster manager")
            REMOVAL_OUTCOMES.labels(outcome="no_host_found", step="").inc()
            return NoHostFound(instance_id=instance_id)

        if len(host_ids) > 1:
            logger.warning(
                f"{len(host_ids)} hosts labelled {self.host_label}={instance_id}: {host_ids}. "
                f"Removing the first one only"
            )
        host_id = host_ids[0]

        logger.info(f"Deactivating host: {host_id}")
        try:
            with REMOVAL_STEP_DURATION.labels(step=RemovalStep.DEACTIVATE.value).time():
                self.cluster.deactivate_host(host_id)
        except DeactivateError as e:
            return self._failed(RemovalStep.DEACTIVATE, e, host_id)

        logger.info(f"Deleting host: {host_id}")
        try:
            with REMOVAL_STEP_DURATION.labels(step=RemovalStep.DELETE.value).time():
                self.cluster.delete_host(host_id)
        except DeleteError as e:
            return self._failed(RemovalStep.DELETE, e, host_id)

        logger.info(f"Host {host_id} removed from cluster manager")
        REMOVAL_OUTCOMES.labels(outcome="completed", step="").inc()
        return Completed(host_id=host_id)

    def _failed(self, step: RemovalStep, cause: ClusterControlError,
                host_id: Optional[str] = None) -> StepFailed:
        target = f"host {host_id}" if host_id else "hosts"
        logger.error(f"Could not {step.value} {target} in cluster manager: {cause}")
        REMOVAL_OUTCOMES.labels(outcome="step_failed", step=step.value).inc()
        return StepFailed(step=step, cause=cause, host_id=host_id)
