#!/usr/bin/env python3
"""
Classifies decoded lifecycle events
"""

from .base import (
    EventDisposition,
    LifecycleEvent,
    TEST_NOTIFICATION_EVENT,
    INSTANCE_TERMINATING_TRANSITION
)


def classify_event(event: LifecycleEvent) -> EventDisposition:
    """Decide how an event is handled. A test notification always wins over a transition."""
    if event.event == TEST_NOTIFICATION_EVENT:
        return EventDisposition.TEST_NOTIFICATION

    if event.lifecycle_transition == INSTANCE_TERMINATING_TRANSITION:
        return EventDisposition.TERMINATION_NOTIFICATION

    return EventDisposition.UNRECOGNIZED
