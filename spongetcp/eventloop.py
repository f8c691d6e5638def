"""Waits for readiness on file descriptors and runs the matching callbacks."""

from __future__ import annotations

import select
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from spongetcp.file_descriptor import FileDescriptor

Callback = Callable[[], None]
Interest = Callable[[], bool]


class Direction(Enum):
    """Whether a rule waits for its descriptor to be readable or writable."""

    IN = select.POLLIN
    OUT = select.POLLOUT


class EventResult(Enum):
    """Outcome of one call to EventLoop.wait_next_event."""

    SUCCESS = auto()
    TIMEOUT = auto()
    EXIT = auto()


def _always_interested() -> bool:
    return True


def _do_nothing() -> None:
    return None


@dataclass(eq=False)
class _Rule:
    fd: FileDescriptor
    direction: Direction
    callback: Callback
    interest: Interest
    cancel: Callback

    def service_count(self) -> int:
        """How often the descriptor has been read or written, by direction."""
        if self.direction is Direction.IN:
            return self.fd.read_count()
        return self.fd.write_count()


class EventLoop:
    """Polls the descriptors of registered rules and calls their callbacks.

    A rule is polled while its ``interest`` returns true.  It is cancelled
    (its ``cancel`` is called and it is dropped) when its descriptor is
    closed, when a reading rule's descriptor has reached end-of-file, or
    when the only condition reported for it is a hangup.
    """

    def __init__(self) -> None:
        self._rules: list[_Rule] = []

    def add_rule(
        self,
        fd: FileDescriptor,
        direction: Direction,
        callback: Callback,
        interest: Optional[Interest] = None,
        cancel: Optional[Callback] = None,
    ) -> None:
        """Call ``callback`` whenever ``fd`` is ready in ``direction``."""
        self._rules.append(
            _Rule(
                fd.duplicate(),
                direction,
                callback,
                interest if interest is not None else _always_interested,
                cancel if cancel is not None else _do_nothing,
            )
        )

    def _drop(self, rule: _Rule) -> None:
        rule.cancel()
        self._rules.remove(rule)

    def wait_next_event(self, timeout_ms: int) -> EventResult:
        """Poll once (waiting at most ``timeout_ms``) and service ready rules.

        Returns EXIT when nothing is left to poll or polling was interrupted,
        TIMEOUT when nothing became ready, and SUCCESS otherwise.  Raises
        RuntimeError on an error condition on a polled descriptor, or when a
        callback neither read nor wrote its descriptor yet stays interested.
        """
        polled: list[tuple[_Rule, int]] = []
        for rule in list(self._rules):
            if (rule.direction is Direction.IN and rule.fd.eof()) or rule.fd.closed():
                self._drop(rule)
                continue
            # Uninterested rules are still polled with no events so errors show up.
            events = rule.direction.value if rule.interest() else 0
            polled.append((rule, events))

        if not any(events for _, events in polled):
            return EventResult.EXIT

        masks: dict[int, int] = {}
        for rule, events in polled:
            fd_num = rule.fd.fd_num()
            masks[fd_num] = masks.get(fd_num, 0) | events
        poller = select.poll()
        for fd_num, mask in masks.items():
            poller.register(fd_num, mask)

        try:
            ready = dict(poller.poll(timeout_ms))
        except InterruptedError:
            return EventResult.EXIT
        if not ready:
            return EventResult.TIMEOUT

        for rule, events in polled:
            revents = ready.get(rule.fd.fd_num(), 0)
            if revents & (select.POLLERR | select.POLLNVAL):
                raise RuntimeError("EventLoop: error on polled file descriptor")

            poll_ready = bool(revents & events)
            if revents & select.POLLHUP and events and not poll_ready:
                self._drop(rule)
                continue

            if poll_ready:
                count_before = rule.service_count()
                rule.callback()
                if count_before == rule.service_count() and rule.interest():
                    raise RuntimeError(
                        "EventLoop: busy wait detected: callback did not read/write fd "
                        "and is still interested"
                    )

        return EventResult.SUCCESS