#!/usr/bin/env python3
"""
Reports completed host removals back to Auto Scaling
"""

import logging

from events import LifecycleEvent
from .exceptions import CompletionError
from .interfaces import LifecycleNotifier
from .metrics import LIFECYCLE_COMPLETIONS

logger = logging.getLogger(__name__)

LIFECYCLE_ACTION_CONTINUE = "CONTINUE"


class LifecycleCompletionReporter:
    """Lets Auto Scaling proceed with terminating an instance"""

    def __init__(self, notifier: LifecycleNotifier, result: str = LIFECYCLE_ACTION_CONTINUE):
        self.notifier = notifier
        self.result = result

    def report(self, event: LifecycleEvent) -> bool:
        """
        Complete the lifecycle action for a termination notification

        A failure is logged and not retried: Auto Scaling completes the hook
        itself once the heartbeat timeout expires.

        Args:
            event: The termination notification whose host was removed

        Returns:
            True if Auto Scaling accepted the completion
        """
        logger.info(
            f"Resolving lifecycle hook {event.lifecycle_hook_name} "
            f"for group {event.auto_scaling_group_name}"
        )
        try:
            self.notifier.complete_lifecycle_action(
                group_name=event.auto_scaling_group_name,
                action_token=event.lifecycle_action_token,
                hook_name=event.lifecycle_hook_name,
                result=self.result
            )
        except CompletionError as e:
            logger.error(
                f"Could not complete the lifecycle hook, it will be completed by "
                f"Auto Scaling after its timeout: {e}"
            )
            LIFECYCLE_COMPLETIONS.labels(result="error").inc()
            return False

        logger.info("Lifecycle hook resolved")
        LIFECYCLE_COMPLETIONS.labels(result="success").inc()
        return True
