"""Errors for the counters module.

Each error carries the exact message shown to the invoking user. The view
flow catches ``CounterViewError`` and posts that message; nothing else is
reported for these cases.
"""

from typing import Optional


class CounterViewError(Exception):
    """A view-counter invocation ended early with a user-visible message.

    Attributes:
        user_message: text posted to the invoking channel
    """

    def __init__(self, user_message: str):
        super().__init__(user_message)
        self.user_message = user_message


class UsageError(CounterViewError):
    """The arguments matched none of the command's signatures."""


class UnknownCounterError(CounterViewError):
    """No counter with that name is configured, or it has no id assigned."""

    def __init__(self, counter_name: str):
        super().__init__(f"Unknown counter: {counter_name}")
        self.counter_name = counter_name


class ViewNotPermittedError(CounterViewError):
    """The counter explicitly disallows viewing its values."""

    def __init__(self):
        super().__init__("Missing permissions to view this counter's values")


class UnsupportedScopeError(CounterViewError):
    """A channel or user was supplied for a counter not kept per that dimension."""

    def __init__(self, dimension: str):
        super().__init__(f"This counter is not per-{dimension}")
        self.dimension = dimension


class DisambiguationCancelledError(CounterViewError):
    """The follow-up prompt timed out or got an empty reply."""

    def __init__(self):
        super().__init__("Cancelling")


class UnresolvableReferenceError(CounterViewError):
    """The follow-up reply did not name a usable channel or user.

    Attributes:
        reference: the reply text
    """

    def __init__(self, user_message: str, reference: Optional[str] = None):
        super().__init__(user_message)
        self.reference = reference
