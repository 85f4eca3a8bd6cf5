#!/usr/bin/env python3
"""
Tests for host removal orchestration and lifecycle completion
"""

from core.completion import LifecycleCompletionReporter
from core.exceptions import CompletionError
from core.removal import Completed, HostRemovalOrchestrator, NoHostFound, RemovalStep, StepFailed
from events import LifecycleEvent

from conftest import FakeCluster, FakeNotifier, TERMINATING_NOTIFICATION


class TestHostRemovalOrchestrator:
    """Test the lookup -> deactivate -> delete sequence"""

    def test_successful_removal_runs_steps_in_order(self, cluster):
        outcome = HostRemovalOrchestrator(cluster).remove("i-abc")

        assert outcome == Completed(host_id="host-1")
        assert cluster.calls == [
            ("lookup", "HOSTID", "i-abc"),
            ("deactivate", "host-1"),
            ("delete", "host-1"),
        ]

    def test_custom_host_label(self, cluster):
        HostRemovalOrchestrator(cluster, host_label="ec2-instance-id").remove("i-abc")

        assert cluster.calls[0] == ("lookup", "ec2-instance-id", "i-abc")

    def test_no_matching_host(self):
        cluster = FakeCluster(hosts=[])

        outcome = HostRemovalOrchestrator(cluster).remove("i-abc")

        assert outcome == NoHostFound(instance_id="i-abc")
        assert not cluster.called("deactivate")
        assert not cluster.called("delete")

    def test_multiple_matches_take_the_first(self):
        cluster = FakeCluster(hosts=["host-1", "host-2"])

        outcome = HostRemovalOrchestrator(cluster).remove("i-abc")

        assert outcome == Completed(host_id="host-1")
        assert ("deactivate", "host-2") not in cluster.calls
        assert ("delete", "host-2") not in cluster.calls

    def test_lookup_failure(self, cluster, failures):
        cluster.fail["lookup"] = failures["lookup"]

        outcome = HostRemovalOrchestrator(cluster).remove("i-abc")

        assert isinstance(outcome, StepFailed)
        assert outcome.step == RemovalStep.LOOKUP
        assert outcome.cause is failures["lookup"]
        assert outcome.host_id is None
        assert cluster.calls == [("lookup", "HOSTID", "i-abc")]

    def test_deactivate_failure_never_deletes(self, cluster, failures):
        cluster.fail["deactivate"] = failures["deactivate"]

        outcome = HostRemovalOrchestrator(cluster).remove("i-abc")

        assert isinstance(outcome, StepFailed)
        assert outcome.step == RemovalStep.DEACTIVATE
        assert outcome.host_id == "host-1"
        assert not cluster.called("delete")

    def test_delete_failure(self, cluster, failures):
        cluster.fail["delete"] = failures["delete"]

        outcome = HostRemovalOrchestrator(cluster).remove("i-abc")

        assert isinstance(outcome, StepFailed)
        assert outcome.step == RemovalStep.DELETE
        assert outcome.cause is failures["delete"]
        assert cluster.calls[-1] == ("delete", "host-1")


class TestLifecycleCompletionReporter:
    """Test lifecycle action completion"""

    def test_passes_correlation_fields_unchanged(self, notifier):
        event = LifecycleEvent.from_dict(TERMINATING_NOTIFICATION)

        assert LifecycleCompletionReporter(notifier).report(event) is True
        assert notifier.calls == [{
            "group_name": "lifecycle-test",
            "action_token": "b19b6537-1d99-4c2d-be9f-187e7103d44c",
            "hook_name": "RemoveRancherHost",
            "result": "CONTINUE"
        }]

    def test_failure_is_reported_not_raised(self):
        notifier = FakeNotifier(error=CompletionError("token expired"))
        event = LifecycleEvent.from_dict(TERMINATING_NOTIFICATION)

        assert LifecycleCompletionReporter(notifier).report(event) is False
        assert len(notifier.calls) == 1
