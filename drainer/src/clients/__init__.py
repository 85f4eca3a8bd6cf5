"""
Clients for SQS, Auto Scaling and the Rancher server
"""

from .autoscaling import AutoScalingNotifier
from .rancher import RancherClient
from .sqs import SQSMessageSource

__all__ = [
    "AutoScalingNotifier",
    "RancherClient",
    "SQSMessageSource"
]
