#!/usr/bin/env python3
"""
Events module for decoding and classifying lifecycle notifications
"""

from .base import (
    EventDisposition,
    LifecycleEvent,
    TEST_NOTIFICATION_EVENT,
    INSTANCE_TERMINATING_TRANSITION
)
from .decoder import decode_message
from .classifier import classify_event

__all__ = [
    "EventDisposition",
    "LifecycleEvent",
    "TEST_NOTIFICATION_EVENT",
    "INSTANCE_TERMINATING_TRANSITION",
    "decode_message",
    "classify_event"
]
