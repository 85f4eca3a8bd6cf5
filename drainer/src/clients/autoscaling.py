#!/usr/bin/env python3
"""
Auto Scaling lifecycle notifier
"""

import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import CompletionError
from core.interfaces import LifecycleNotifier

logger = logging.getLogger(__name__)


class AutoScalingNotifier(LifecycleNotifier):
    """Completes lifecycle actions through the Auto Scaling API"""

    def __init__(self, region: Optional[str] = None, client=None):
        self.client = client or boto3.session.Session(region_name=region).client("autoscaling")

    def complete_lifecycle_action(
        self,
        group_name: str,
        action_token: str,
        hook_name: str,
        result: str = "CONTINUE"
    ) -> None:
        try:
            self.client.complete_lifecycle_action(
                AutoScalingGroupName=group_name,
                LifecycleActionToken=action_token,
                LifecycleHookName=hook_name,
                LifecycleActionResult=result
            )
        except (BotoCoreError, ClientError) as e:
            raise CompletionError(f"complete_lifecycle_action failed for hook {hook_name} in {group_name}: {e}") from e
        logger.debug(f"Completed lifecycle action {action_token} with {result}")
