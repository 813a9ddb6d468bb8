"""Transport factory result DTOs.

Uses the Result pattern: a missing or invalid configuration is an expected
state and comes back as a Result, connection problems raise exceptions.
"""

from typing import Any

from pydantic import Field

from prismic_cr.core.dto.result_dto import BaseResult


class TransportResult(BaseResult):
    """Result of creating a transport.

    [Result Pattern] Check result.is_ok() before using result.transport.

    Attributes:
        transport: The transport instance (PrismicTransport or LoggingTransport).
        uri: The endpoint URI template the transport was configured with.
        logging_enabled: Whether the transport is wrapped in a LoggingTransport.

    Status codes:
        - success: Transport created
        - success + detail(UNKNOWN_PARAMETER): Created, unrecognized keys ignored
        - error + detail(MISSING_PARAMETER): A required key is missing
        - error + detail(INVALID): No parameters and no configuration, or a bad value
    """

    transport: Any = Field(default=None, description="Transport if created")
    uri: str = Field(default="", description="Endpoint URI template")
    logging_enabled: bool = Field(default=False, description="True if calls are logged")


__all__ = ["TransportResult"]
