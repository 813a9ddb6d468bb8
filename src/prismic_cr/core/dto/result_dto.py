"""Base result types for prismic-cr operations.

Operations that can end in an expected, non-exceptional state (a missing
configuration key, an empty parameter set) return a Result with
status="error" instead of raising. System errors (unreachable backend,
malformed responses) still raise exceptions from ``prismic_cr.core.exceptions``.

Results are pydantic models, so they are inspectable and serializable as-is.
"""

from typing import Any, Final, Literal, Self

from pydantic import BaseModel, Field


class StatusDetail(BaseModel):
    """Structured status information for operation results.

    Attributes:
        code: Machine-readable status code (see ``StatusCode``).
        message: Human-readable status description.
        context: Additional diagnostic data (safe to log/serialize).
    """

    code: str = Field(description="Status code: 'missing_parameter', 'invalid', etc.")
    message: str = Field(description="Human-readable status description")
    context: dict[str, Any] = Field(default_factory=dict, description="Diagnostic context")


class BaseResult(BaseModel):
    """Base class for all operation results.

    Pattern:
    - status="success" → operation succeeded, specific fields populated
    - status="error" → expected failure, detail field describes it

    Example:
        >>> result = TransportFactory().execute_create({"prismic_cr.uri": uri})
        >>> if result.is_ok():
        ...     transport = result.transport
        >>> else:
        ...     print(f"Error [{result.detail.code}]: {result.detail.message}")
    """

    status: Literal["success", "error"] = Field(default="success", description="Operation status")
    detail: StatusDetail | None = Field(
        default=None, description="Status details (present for error or partial success)"
    )

    model_config = {"extra": "forbid"}

    def is_ok(self) -> bool:
        """Check if operation succeeded."""
        return self.status == "success"

    def is_error(self) -> bool:
        """Check if operation failed with expected error."""
        return self.status == "error"

    @classmethod
    def success(cls, *, detail: StatusDetail | None = None, **kwargs: Any) -> Self:
        """Factory method for successful result.

        Args:
            detail: Optional status details for informational status.
            **kwargs: Subclass-specific fields.
        """
        return cls(status="success", detail=detail, **kwargs)

    @classmethod
    def fail(cls, detail: StatusDetail, **kwargs: Any) -> Self:
        """Factory method for expected failure result.

        Args:
            detail: Required status details describing the failure.
            **kwargs: Subclass-specific fields (use defaults).
        """
        return cls(status="error", detail=detail, **kwargs)


# =============================================================================
# STATUS CODE REGISTRY
# =============================================================================


class StatusCode:
    """Centralized registry of status codes.

    Example:
        >>> if result.detail.code == StatusCode.MISSING_PARAMETER:
        ...     ask_for(result.detail.context["missing"])
    """

    # -------------------------------------------------------------------------
    # Common
    # -------------------------------------------------------------------------
    EMPTY: Final = "empty"
    """[Common] Input is empty."""

    INVALID: Final = "invalid"
    """[Common] Invalid parameter or configuration."""

    NOT_FOUND: Final = "not_found"
    """[Common] Requested resource not found (expected state, not error)."""

    # -------------------------------------------------------------------------
    # XFiles (transport factory)
    # -------------------------------------------------------------------------
    MISSING_PARAMETER: Final = "missing_parameter"
    """[XFiles] A required factory parameter is missing."""

    UNKNOWN_PARAMETER: Final = "unknown_parameter"
    """[XFiles] Factory parameters contain keys that are not recognized (ignored)."""


__all__ = ["BaseResult", "StatusDetail", "StatusCode"]
