#!/usr/bin/env python3
"""
Collaborator interfaces consumed by the dispatch loop

Concrete implementations live in the clients package; tests substitute fakes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class QueueMessage:
    """A single message received from the message source"""
    message_id: str
    receipt_handle: str
    body: str
    attributes: Dict[str, Any] = field(default_factory=dict)


class MessageSource:
    """Yields opaque text payloads and removes them once handled"""

    def receive(self) -> List[QueueMessage]:
        """
        Wait for the next batch of messages

        Raises:
            TransportFatal: If the source itself is failing
        """
        raise NotImplementedError("Subclasses must implement receive() method")

    def acknowledge(self, message: QueueMessage) -> None:
        """
        Remove a message from the source so it is not redelivered

        Raises:
            TransportFatal: If the source itself is failing
        """
        raise NotImplementedError("Subclasses must implement acknowledge() method")


class ClusterControl:
    """Host registry operations of the cluster manager"""

    def lookup_hosts_by_label(self, label_name: str, label_value: str) -> List[str]:
        """Return ids of hosts whose label equals the value, raising HostLookupError on failure"""
        raise NotImplementedError("Subclasses must implement lookup_hosts_by_label() method")

    def deactivate_host(self, host_id: str) -> None:
        """Stop scheduling work on a host, raising DeactivateError on failure"""
        raise NotImplementedError("Subclasses must implement deactivate_host() method")

    def delete_host(self, host_id: str) -> None:
        """Remove a host record, raising DeleteError on failure"""
        raise NotImplementedError("Subclasses must implement delete_host() method")


class LifecycleNotifier:
    """Auto Scaling lifecycle hook completion"""

    def complete_lifecycle_action(
        self,
        group_name: str,
        action_token: str,
        hook_name: str,
        result: str = "CONTINUE"
    ) -> None:
        """Complete a pending lifecycle action, raising CompletionError on failure"""
        raise NotImplementedError("Subclasses must implement complete_lifecycle_action() method")
