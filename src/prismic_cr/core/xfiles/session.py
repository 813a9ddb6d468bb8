"""Session states of a transport."""

from enum import StrEnum


class SessionState(StrEnum):
    """Login state of a transport.

    UNAUTHENTICATED -> AUTHENTICATED on a successful login (immediate or
    deferred), -> FAILED when the store rejects or cannot be reached.
    ``logout()`` always returns to UNAUTHENTICATED.
    """

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


#: Workspace name used when none is given to login().
DEFAULT_WORKSPACE = "default"


__all__ = ["SessionState", "DEFAULT_WORKSPACE"]
