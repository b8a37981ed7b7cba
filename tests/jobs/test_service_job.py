"""Tests for JobService — services with job-style entry points."""

from __future__ import annotations

from servicekit.domain.fields import Input
from servicekit.domain.rules import Presence
from servicekit.jobs.queue import RecordingQueue
from servicekit.jobs.service_job import JobService


class SendWelcomeEmail(JobService):
    queue_name = "mailers"

    user_id = Input(int, rules=[Presence()])

    def perform(self) -> int:
        return self.user_id


class Cleanup(JobService):
    pass


class TestJobService:
    def test_perform_now_returns_outcome(self) -> None:
        outcome = SendWelcomeEmail.perform_now(user_id=5)
        assert outcome.success
        assert outcome.data == 5

    def test_perform_now_validates(self) -> None:
        assert SendWelcomeEmail.perform_now().failure

    def test_perform_later_uses_queue_name(self, recording_queue: RecordingQueue) -> None:
        job = SendWelcomeEmail.perform_later(user_id=5)
        assert job.queue == "mailers"
        assert job.args == {"user_id": 5}
        assert recording_queue.enqueued_jobs == [job]

    def test_perform_later_default_queue(self, recording_queue: RecordingQueue) -> None:
        assert Cleanup.perform_later().queue == "default"

    def test_queue_name_is_not_a_field(self) -> None:
        assert "queue_name" not in SendWelcomeEmail.allowed_context_keys()
