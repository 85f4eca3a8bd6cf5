#!/usr/bin/env python3
"""
Shared fixtures and fake collaborators for drainer tests
"""

import json
from typing import Dict, List, Optional

import pytest

from core.exceptions import HostLookupError, DeactivateError, DeleteError, CompletionError
from core.interfaces import ClusterControl, LifecycleNotifier, MessageSource, QueueMessage

TEST_NOTIFICATION = {
    "AutoScalingGroupName": "lifecycle-test",
    "Service": "AWS Auto Scaling",
    "Time": "2015-10-21T13:38:00.143Z",
    "AccountId": "391126026396",
    "Event": "autoscaling:TEST_NOTIFICATION",
    "RequestId": "f20fbb34-77f8-11e5-9842-63a2c2b9270f",
    "AutoScalingGroupARN": "arn:aws:autoscaling:eu-west-1:391126026396:autoScalingGroup:"
                           "35f49f32-5a4a-4af1-9273-8ebefc471bd4:autoScalingGroupName/lifecycle-test"
}

TERMINATING_NOTIFICATION = {
    "AutoScalingGroupName": "lifecycle-test",
    "Service": "AWS Auto Scaling",
    "Time": "2015-10-21T13:40:02.108Z",
    "AccountId": "391126026396",
    "LifecycleTransition": "autoscaling:EC2_INSTANCE_TERMINATING",
    "RequestId": "58a52fc2-7e52-42c1-8d8b-7faebc58e2cb",
    "LifecycleActionToken": "b19b6537-1d99-4c2d-be9f-187e7103d44c",
    "EC2InstanceId": "i-abc",
    "LifecycleHookName": "RemoveRancherHost"
}


class FakeMessageSource(MessageSource):
    """In-memory queue recording acknowledgements"""

    def __init__(self, batches: Optional[List[List[QueueMessage]]] = None):
        self.batches = list(batches or [])
        self.acknowledged: List[str] = []
        self.receive_error: Optional[Exception] = None
        self.acknowledge_error: Optional[Exception] = None

    def receive(self) -> List[QueueMessage]:
        if self.receive_error:
            raise self.receive_error
        return self.batches.pop(0) if self.batches else []

    def acknowledge(self, message: QueueMessage) -> None:
        if self.acknowledge_error:
            raise self.acknowledge_error
        self.acknowledged.append(message.message_id)


class FakeCluster(ClusterControl):
    """Cluster manager fake recording every call"""

    def __init__(self, hosts: Optional[List[str]] = None):
        self.hosts = list(hosts or [])
        self.calls: List[tuple] = []
        self.fail: Dict[str, Exception] = {}

    def lookup_hosts_by_label(self, label_name: str, label_value: str) -> List[str]:
        self.calls.append(("lookup", label_name, label_value))
        if "lookup" in self.fail:
            raise self.fail["lookup"]
        return list(self.hosts)

    def deactivate_host(self, host_id: str) -> None:
        self.calls.append(("deactivate", host_id))
        if "deactivate" in self.fail:
            raise self.fail["deactivate"]

    def delete_host(self, host_id: str) -> None:
        self.calls.append(("delete", host_id))
        if "delete" in self.fail:
            raise self.fail["delete"]

    def called(self, operation: str) -> bool:
        return any(call[0] == operation for call in self.calls)


class FakeNotifier(LifecycleNotifier):
    """Lifecycle notifier fake recording completions"""

    def __init__(self, error: Optional[Exception] = None):
        self.calls: List[dict] = []
        self.error = error

    def complete_lifecycle_action(self, group_name, action_token, hook_name, result="CONTINUE"):
        self.calls.append({
            "group_name": group_name,
            "action_token": action_token,
            "hook_name": hook_name,
            "result": result
        })
        if self.error:
            raise self.error


def make_message(body, message_id: str = "msg-1") -> QueueMessage:
    """Build a queue message from a dict (JSON-encoded) or a raw string"""
    if isinstance(body, dict):
        body = json.dumps(body)
    return QueueMessage(message_id=message_id, receipt_handle=f"receipt-{message_id}", body=body)


@pytest.fixture
def cluster():
    return FakeCluster(hosts=["host-1"])


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def source():
    return FakeMessageSource()


@pytest.fixture
def failures():
    """Cluster errors keyed by step name"""
    return {
        "lookup": HostLookupError("rancher unavailable"),
        "deactivate": DeactivateError("host busy"),
        "delete": DeleteError("404 Not Found"),
        "complete": CompletionError("token expired")
    }
