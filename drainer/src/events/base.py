#!/usr/bin/env python3
"""
Lifecycle notification types for the drainer
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

TEST_NOTIFICATION_EVENT = "autoscaling:TEST_NOTIFICATION"
INSTANCE_TERMINATING_TRANSITION = "autoscaling:EC2_INSTANCE_TERMINATING"


class EventDisposition(str, Enum):
    """What the dispatch loop should do with a decoded notification"""

    TEST_NOTIFICATION = "test_notification"
    TERMINATION_NOTIFICATION = "termination_notification"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class LifecycleEvent:
    """An Auto Scaling lifecycle notification decoded from a queue message"""

    event: Optional[str] = None
    lifecycle_transition: Optional[str] = None
    instance_id: Optional[str] = None
    auto_scaling_group_name: Optional[str] = None
    lifecycle_action_token: Optional[str] = None
    lifecycle_hook_name: Optional[str] = None
    request_id: Optional[str] = None
    time: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LifecycleEvent':
        """Create event from a notification dictionary"""
        return cls(
            event=data.get("Event"),
            lifecycle_transition=data.get("LifecycleTransition"),
            instance_id=data.get("EC2InstanceId"),
            auto_scaling_group_name=data.get("AutoScalingGroupName"),
            lifecycle_action_token=data.get("LifecycleActionToken"),
            lifecycle_hook_name=data.get("LifecycleHookName"),
            request_id=data.get("RequestId"),
            time=data.get("Time"),
            raw=dict(data)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert event back to notification field names"""
        return {
            "Event": self.event,
            "LifecycleTransition": self.lifecycle_transition,
            "EC2InstanceId": self.instance_id,
            "AutoScalingGroupName": self.auto_scaling_group_name,
            "LifecycleActionToken": self.lifecycle_action_token,
            "LifecycleHookName": self.lifecycle_hook_name,
            "RequestId": self.request_id,
            "Time": self.time
        }
