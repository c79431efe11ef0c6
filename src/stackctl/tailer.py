"""Tail a stack's event log until its current operation finishes."""

import logging
import time
from collections.abc import Callable, Iterable

from stackctl.aws.client import CloudFormationClient
from stackctl.models import StackEvent

logger = logging.getLogger(__name__)


def _log_event(event: StackEvent) -> None:
    logger.info(
        "%s %s %s %s", event.logical_id, event.resource_type, event.status, event.reason or ""
    )


class EventTailer:
    """Polls the event log of one stack and emits each new event once."""

    def __init__(
        self,
        client: CloudFormationClient,
        poll_interval: float = 1.0,
        on_event: Callable[[StackEvent], None] | None = None,
    ):
        self._client = client
        self._poll_interval = poll_interval
        self._on_event = on_event or _log_event

    def tail(
        self, stack_name: str, stack_id: str | None = None, known: Iterable[str] = ()
    ) -> StackEvent:
        """Emit events until the stack reaches a terminal status, and return that event.

        The newest event of every poll is held back until a later poll either
        supersedes it or shows it is terminal. Failing event queries propagate
        immediately. Pass ``stack_id`` to keep tailing a stack that is being
        deleted, since deleted stacks can only be looked up by id.

        ``known`` holds the ids of events logged before the operation started.
        They are neither emitted nor taken as the end of the operation.
        """
        ref = stack_id or stack_name
        known = frozenset(known)
        emitted: set[str] = set(known)

        while True:
            events = self._client.list_events(ref)

            if events:
                latest = events[-1]
                for event in events[:-1]:
                    if event.event_id not in emitted:
                        self._on_event(event)
                        emitted.add(event.event_id)

                if (
                    latest.is_terminal
                    and latest.stack_name == stack_name
                    and latest.event_id not in known
                ):
                    if latest.event_id not in emitted:
                        self._on_event(latest)
                    logger.debug("Stack %s reached %s", stack_name, latest.status)
                    return latest
            else:
                logger.debug("No events yet for %s", stack_name)

            if self._poll_interval > 0:
                time.sleep(self._poll_interval)
