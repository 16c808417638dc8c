"""Failure taxonomy shared by the session, sync and form layers.

Every failure is reported to the user through the presenter's transient
message channel; none of them is allowed to take the process down.
"""

from __future__ import annotations


class JobBoardError(RuntimeError):
    pass


class InitializationFailure(JobBoardError):
    """Backend unreachable or misconfigured at startup. Fatal for the session."""


class AuthOperationFailure(JobBoardError):
    """Sign-in or sign-out rejected by the identity provider."""


class ValidationFailure(JobBoardError):
    """Local, pre-write rejection of user input. No write is attempted."""


class WriteFailure(JobBoardError):
    """A document read or write did not complete."""


class SubscriptionFailure(JobBoardError):
    """A live document subscription reported an error."""
