#!/usr/bin/env python3
"""
Prometheus metrics for the drainer
"""

from prometheus_client import Counter, Histogram

MESSAGES_RECEIVED = Counter(
    'drainer_messages_received_total',
    'Total messages received from the queue'
)
MESSAGES_ACKNOWLEDGED = Counter(
    'drainer_messages_acknowledged_total',
    'Total messages removed from the queue'
)
MESSAGES_BY_DISPOSITION = Counter(
    'drainer_messages_by_disposition_total',
    'Decoded messages by disposition',
    ['disposition']
)
REMOVAL_OUTCOMES = Counter(
    'drainer_host_removal_outcomes_total',
    'Host removal outcomes',
    ['outcome', 'step']
)
REMOVAL_STEP_DURATION = Histogram(
    'drainer_host_removal_step_duration_seconds',
    'Time taken by each host removal step',
    ['step']
)
LIFECYCLE_COMPLETIONS = Counter(
    'drainer_lifecycle_completions_total',
    'Lifecycle action completion attempts',
    ['result']
)
ERRORS = Counter(
    'drainer_errors_total',
    'Total errors',
    ['type']
)
