"""JobService — a service that is also its own background job.

Subclasses implement ``perform()`` like any other service. ``perform_now``
runs it synchronously and returns the Outcome; ``perform_later`` enqueues
it on ``queue_name`` through the async adapter::

    class SendWelcomeEmail(JobService):
        queue_name = "mailers"

        user_id = Input(int, rules=[Presence()])

        def perform(self) -> None:
            ...

    SendWelcomeEmail.perform_later(user_id=123)
    outcome = SendWelcomeEmail.perform_now(user_id=123)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from servicekit.services.base import Service

if TYPE_CHECKING:
    from servicekit.jobs.models import Job
    from servicekit.services.result import Outcome


class JobService(Service):
    """Service base class with job-style entry points."""

    queue_name: ClassVar[str | None] = None

    @classmethod
    def perform_now(cls, **args: Any) -> Outcome:
        return cls.call(**args)

    @classmethod
    def perform_later(cls, **args: Any) -> Job:
        options = {"queue": cls.queue_name} if cls.queue_name else {}
        return cls.call_later(args, options)
