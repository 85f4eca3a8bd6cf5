#!/usr/bin/env python3
"""
Error taxonomy for lifecycle message processing

Only TransportFatal is meant to reach the process level. Everything else is
handled per message and ends with the message being acknowledged.
"""


class DrainerError(Exception):
    """Base class for all drainer errors"""


class InvalidPayload(DrainerError):
    """A queue message body could not be decoded into a lifecycle event"""


class ClusterControlError(DrainerError):
    """A call to the cluster manager failed"""


class HostLookupError(ClusterControlError):
    """Looking up hosts by label failed"""


class DeactivateError(ClusterControlError):
    """Deactivating a host failed"""


class DeleteError(ClusterControlError):
    """Deleting a host failed"""


class CompletionError(DrainerError):
    """Completing the lifecycle action with Auto Scaling failed"""


class TransportFatal(DrainerError):
    """The message source itself is failing; the process should exit"""
