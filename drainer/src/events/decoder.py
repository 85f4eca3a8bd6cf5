#!/usr/bin/env python3
"""
Decodes SQS message bodies into lifecycle events
"""

import json
import logging
from typing import Any, Dict

from core.exceptions import InvalidPayload
from .base import LifecycleEvent

logger = logging.getLogger(__name__)

SNS_NOTIFICATION_TYPE = "Notification"


def _parse_object(text: Any, what: str) -> Dict[str, Any]:
    if not isinstance(text, (str, bytes, bytearray)):
        raise InvalidPayload(f"{what} is not text: {type(text).__name__}")

    try:
        data = json.loads(text)
    except ValueError as e:
        raise InvalidPayload(f"{what} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidPayload(f"{what} is not a JSON object: {type(data).__name__}")

    return data


def decode_message(body: Any) -> LifecycleEvent:
    """
    Decode a message body into a LifecycleEvent

    Bodies delivered through an SNS subscription without raw message delivery
    are wrapped in an SNS envelope; the inner message is decoded in that case.

    Args:
        body: Raw message body

    Returns:
        The decoded event

    Raises:
        InvalidPayload: If the body (or the enveloped message) is not a JSON object
    """
    data = _parse_object(body, "Message body")

    if data.get("Type") == SNS_NOTIFICATION_TYPE and isinstance(data.get("Message"), str):
        logger.debug(f"Unwrapping SNS envelope {data.get('MessageId', 'unknown')}")
        data = _parse_object(data["Message"], "SNS message")

    return LifecycleEvent.from_dict(data)
