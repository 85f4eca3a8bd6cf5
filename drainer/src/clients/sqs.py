#!/usr/bin/env python3
"""
SQS message source
"""

import logging
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import TransportFatal
from core.interfaces import MessageSource, QueueMessage

logger = logging.getLogger(__name__)


class SQSMessageSource(MessageSource):
    """Long-polls an SQS queue for lifecycle notifications"""

    def __init__(
        self,
        queue_url: str,
        region: Optional[str] = None,
        wait_time_seconds: int = 20,
        max_messages: int = 1,
        visibility_timeout: int = 300,
        client=None
    ):
        """
        Initialize SQS message source

        Args:
            queue_url: URL of the queue the lifecycle hook notifies
            region: AWS region, used when no client is given
            wait_time_seconds: Long polling wait per receive call
            max_messages: Messages per receive call (1 to 10)
            visibility_timeout: Seconds a received message stays hidden
            client: Preconfigured boto3 SQS client
        """
        self.queue_url = queue_url
        self.wait_time_seconds = wait_time_seconds
        self.max_messages = max(1, min(max_messages, 10))
        self.visibility_timeout = visibility_timeout
        self.client = client or boto3.session.Session(region_name=region).client("sqs")

    def receive(self) -> List[QueueMessage]:
        try:
            response = self.client.receive_message(
                QueueUrl=self.queue_url,
                MaxNumberOfMessages=self.max_messages,
                WaitTimeSeconds=self.wait_time_seconds,
                VisibilityTimeout=self.visibility_timeout
            )
        except (BotoCoreError, ClientError) as e:
            raise TransportFatal(f"Could not receive messages from {self.queue_url}: {e}") from e

        messages = [
            QueueMessage(
                message_id=m.get("MessageId", ""),
                receipt_handle=m["ReceiptHandle"],
                body=m.get("Body", ""),
                attributes=m.get("Attributes", {})
            )
            for m in response.get("Messages", [])
        ]
        if messages:
            logger.debug(f"Received {len(messages)} message(s) from {self.queue_url}")
        return messages

    def acknowledge(self, message: QueueMessage) -> None:
        try:
            self.client.delete_message(QueueUrl=self.queue_url, ReceiptHandle=message.receipt_handle)
        except (BotoCoreError, ClientError) as e:
            raise TransportFatal(f"Could not delete message {message.message_id}: {e}") from e
