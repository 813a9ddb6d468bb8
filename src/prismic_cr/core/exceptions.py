"""Repository exceptions for the Prismic content-repository transport.

Custom exceptions shared by the resolver, the query translator and the
transport facade. Callers branch on these types; Prismic client and httpx
exceptions never cross the transport boundary.
"""

from typing import Any


class RepositoryError(Exception):
    """Base exception for all repository-related errors."""

    pass


class InvalidPath(RepositoryError):
    """Raised when a path is not a well-formed absolute path.

    Attributes:
        path: The offending path.
        details: Optional reason.
    """

    def __init__(self, path: Any, details: str | None = None):
        """Initialize InvalidPath.

        Args:
            path: The malformed path.
            details: Optional description of what is wrong with it.
        """
        self.path = path
        self.details = details
        detail_info = f": {details}" if details else ""
        super().__init__(f"Invalid absolute path {path!r}{detail_info}.")


class NotLoggedIn(RepositoryError):
    """Raised when an operation needs a session and none can be established."""

    def __init__(self, message: str = "You need to be logged in for this operation."):
        """Initialize NotLoggedIn.

        Args:
            message: Human-readable description.
        """
        super().__init__(message)


class NoSuchWorkspace(RepositoryError):
    """Raised when the requested workspace does not exist on the backend.

    Attributes:
        workspace: The requested workspace name.
    """

    def __init__(self, workspace: str, details: str | None = None):
        """Initialize NoSuchWorkspace.

        Args:
            workspace: Name of the workspace that could not be found.
            details: Optional extra details.
        """
        self.workspace = workspace
        self.details = details
        detail_info = f": {details}" if details else ""
        super().__init__(f"Requested workspace: '{workspace}'{detail_info}")


class ConnectionFailure(RepositoryError):
    """Raised when the backend endpoint cannot be reached during login.

    Attributes:
        endpoint: The endpoint URI that failed.
        cause: Optional original exception.
    """

    def __init__(self, endpoint: str, cause: BaseException | None = None):
        """Initialize ConnectionFailure.

        Args:
            endpoint: Endpoint URI.
            cause: Optional original exception from the HTTP client.
        """
        self.endpoint = endpoint
        self.cause = cause
        cause_info = f" (caused by: {type(cause).__name__}: {cause})" if cause else ""
        super().__init__(f"Could not connect to endpoint: '{endpoint}'{cause_info}")

        if cause:
            self.__cause__ = cause


class NotFound(RepositoryError):
    """Raised when a path or identifier does not resolve to a document.

    Attributes:
        item: The path or identifier that was not found.
        workspace: Optional name of the workspace.
    """

    def __init__(self, item: Any, workspace: str | None = None):
        """Initialize NotFound.

        Args:
            item: The missing path or identifier.
            workspace: Optional name of the workspace.
        """
        self.item = item
        self.workspace = workspace
        workspace_info = f" in workspace '{workspace}'" if workspace else ""
        super().__init__(f"Item {item!r} not found{workspace_info}.")


class NotSupported(RepositoryError):
    """Raised when a requested feature or operation is not supported.

    Attributes:
        feature: The feature or operation that is not supported.
        details: Optional additional context.
    """

    def __init__(self, feature: str, details: str | None = None):
        """Initialize NotSupported.

        Args:
            feature: The unsupported feature or operation.
            details: Optional extra details.
        """
        self.feature = feature
        self.details = details

        detail_info = f": {details}" if details else ""
        super().__init__(f"Feature '{feature}' is not supported{detail_info}.")


class UnsupportedQuery(NotSupported):
    """Raised when a query uses a construct that has no native equivalent.

    ``feature`` names the construct (e.g. ``"join"``, ``"constraint:SameNode"``).
    """


class NotImplementedOperation(NotSupported):
    """Raised for operations the transport explicitly does not implement."""


class ValidationError(RepositoryError):
    """Raised when input validation fails.

    Attributes:
        details: Description of what validation failed.
        field: Optional name of the field that failed validation.
        value: Optional value that failed validation.
    """

    def __init__(
        self,
        details: str,
        field: str | None = None,
        value: Any = None,
    ):
        """Initialize ValidationError.

        Args:
            details: Human-readable description of the validation failure.
            field: Optional field name associated with the error.
            value: Optional invalid value.
        """
        self.details = details
        self.field = field
        self.value = value

        field_info = f" (field={field!r})" if field else ""
        value_info = f" [value={value!r}]" if value is not None else ""
        super().__init__(f"Validation error{field_info}: {details}{value_info}")


class InvalidQuery(ValidationError):
    """Raised when a query statement or query model is malformed."""


class BackendError(RepositoryError):
    """Raised when a backend request fails after the session is established.

    Attributes:
        details: Description of the backend error.
        cause: Optional original exception from the backend.
    """

    def __init__(
        self,
        details: str,
        cause: BaseException | None = None,
    ):
        """Initialize BackendError.

        Args:
            details: Description of the backend error.
            cause: Optional original exception from the backend.
        """
        self.details = details
        self.cause = cause

        cause_info = f" (caused by: {type(cause).__name__}: {cause})" if cause else ""
        super().__init__(f"Backend error: {details}{cause_info}")

        if cause:
            self.__cause__ = cause


__all__ = [
    "RepositoryError",
    "InvalidPath",
    "NotLoggedIn",
    "NoSuchWorkspace",
    "ConnectionFailure",
    "NotFound",
    "NotSupported",
    "UnsupportedQuery",
    "NotImplementedOperation",
    "ValidationError",
    "InvalidQuery",
    "BackendError",
]
