"""XFiles - Transport factory.

Builds a transport from a flat parameter table::

    factory = TransportFactory()
    result = factory.execute_create({
        "prismic_cr.uri": "https://%s.cdn.prismic.io/api",
        "prismic_cr.access_token": "MC5VbG...",
    })
    if result.is_ok():
        transport = result.transport

Without parameters the values come from the Spock ``transport`` and
``logging`` sections (JSON file, config dict, ``PRISMIC_CR__*`` environment
variables, and a ``.env`` file loaded at import).
"""

import logging
from typing import Any, Optional

from dotenv import load_dotenv

from prismic_cr.core.dto.result_dto import StatusCode, StatusDetail
from prismic_cr.core.dto.transport_dto import TransportResult
from prismic_cr.core.prismic.api import DEFAULT_TIMEOUT
from prismic_cr.core.spock.spock import Spock
from prismic_cr.core.xfiles.client import PrismicTransport
from prismic_cr.core.xfiles.logging_client import CallLogger, LoggingCallLogger, LoggingTransport
from prismic_cr.core.xfiles.session import DEFAULT_WORKSPACE

logger = logging.getLogger(__name__)
load_dotenv()

PARAM_URI = "prismic_cr.uri"
PARAM_ACCESS_TOKEN = "prismic_cr.access_token"
PARAM_DEFAULT_WORKSPACE = "prismic_cr.default_workspace"
PARAM_CHECK_LOGIN_ON_SERVER = "prismic_cr.check_login_on_server"
PARAM_TIMEOUT = "prismic_cr.timeout"
PARAM_LOGGER = "prismic_cr.logger"

#: Required parameters and their description.
REQUIRED_PARAMETERS: dict[str, str] = {
    PARAM_URI: "str (required): Endpoint URI, with a %s placeholder for the workspace name",
}

#: Optional parameters and their description.
OPTIONAL_PARAMETERS: dict[str, str] = {
    PARAM_ACCESS_TOKEN: "str: Access token used when the login credentials carry none",
    PARAM_DEFAULT_WORKSPACE: "str: Workspace the 'default' workspace maps to",
    PARAM_CHECK_LOGIN_ON_SERVER: (
        "bool: if false, skip connecting at login; the connection is made on first use. "
        "Enabled by default"
    ),
    PARAM_TIMEOUT: f"float: HTTP timeout in seconds (default {DEFAULT_TIMEOUT})",
    PARAM_LOGGER: "CallLogger: wrap the transport in a LoggingTransport reporting to this logger",
}


class TransportFactory:
    """Creates Prismic transports from parameters or configuration.

    Famous quote from The X-Files:
    "I want to believe."
    """

    def __init__(self, *, spock: Optional["Spock"] = None):
        """Create a factory.

        Args:
            spock: Configuration used when execute_create() gets no parameters.
                A Spock reading only environment variables is used when None.
        """
        self._spock = spock
        logger.debug("TransportFactory instance created.")

    @staticmethod
    def get_configuration_keys() -> dict[str, str]:
        """Return every recognized parameter with its description."""
        return {**REQUIRED_PARAMETERS, **OPTIONAL_PARAMETERS}

    def execute_create(self, parameters: dict[str, Any] | None = None) -> TransportResult:
        """Create a transport.

        [Result Pattern] Check result.is_ok() before using result.transport.

        Args:
            parameters: Parameter table (see get_configuration_keys()). When
                None, parameters are read from the configuration.

        Returns:
            TransportResult with:
            - success: Transport created
            - success + detail(UNKNOWN_PARAMETER): Created, unknown keys ignored
            - error + detail(MISSING_PARAMETER): A required parameter is missing
            - error + detail(INVALID): Nothing configured, or a parameter has a bad value
        """
        if parameters is None:
            parameters = self._parameters_from_config()
            if not parameters:
                return TransportResult.fail(
                    StatusDetail(
                        code=StatusCode.INVALID,
                        message="No parameters given and no transport configured",
                    )
                )

        missing = [key for key in REQUIRED_PARAMETERS if not parameters.get(key)]
        if missing:
            return TransportResult.fail(
                StatusDetail(
                    code=StatusCode.MISSING_PARAMETER,
                    message=f"Missing required parameters: {', '.join(missing)}",
                    context={"missing": missing},
                )
            )

        uri = parameters[PARAM_URI]
        if not isinstance(uri, str):
            return self._invalid(PARAM_URI, uri, "must be a string")

        timeout = parameters.get(PARAM_TIMEOUT, DEFAULT_TIMEOUT)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            return self._invalid(PARAM_TIMEOUT, timeout, "must be a positive number")

        check_login_on_server = parameters.get(PARAM_CHECK_LOGIN_ON_SERVER, True)
        if not isinstance(check_login_on_server, bool):
            return self._invalid(PARAM_CHECK_LOGIN_ON_SERVER, check_login_on_server, "must be a boolean")

        call_logger = parameters.get(PARAM_LOGGER)
        if call_logger is not None and not isinstance(call_logger, CallLogger):
            return self._invalid(PARAM_LOGGER, type(call_logger).__name__, "must implement start_call/stop_call")

        transport: PrismicTransport | LoggingTransport = PrismicTransport(
            uri,
            access_token=parameters.get(PARAM_ACCESS_TOKEN),
            default_workspace=parameters.get(PARAM_DEFAULT_WORKSPACE) or DEFAULT_WORKSPACE,
            check_login_on_server=check_login_on_server,
            timeout=float(timeout),
        )
        if call_logger is not None:
            transport = LoggingTransport(transport, call_logger)

        detail = None
        unknown = sorted(set(parameters) - set(self.get_configuration_keys()))
        if unknown:
            logger.warning("Ignoring unknown transport parameters: %s", unknown)
            detail = StatusDetail(
                code=StatusCode.UNKNOWN_PARAMETER,
                message=f"Ignored unknown parameters: {', '.join(unknown)}",
                context={"unknown": unknown},
            )

        logger.debug("Created transport for %s (logging=%s)", uri, call_logger is not None)
        return TransportResult.success(
            transport=transport,
            uri=uri,
            logging_enabled=call_logger is not None,
            detail=detail,
        )

    def _invalid(self, key: str, value: Any, reason: str) -> TransportResult:
        return TransportResult.fail(
            StatusDetail(
                code=StatusCode.INVALID,
                message=f"Parameter '{key}' {reason}",
                context={"parameter": key, "value": repr(value)},
            )
        )

    def _parameters_from_config(self) -> dict[str, Any]:
        """Map the Spock ``transport`` section onto factory parameters."""
        spock = self._spock or Spock()
        transport_config = spock.get_transport_config()
        parameters = {f"prismic_cr.{key}": value for key, value in transport_config.items()}
        if parameters and spock.get_logging_config("call_log", False):
            parameters[PARAM_LOGGER] = LoggingCallLogger()
        return parameters


__all__ = [
    "TransportFactory",
    "REQUIRED_PARAMETERS",
    "OPTIONAL_PARAMETERS",
    "PARAM_URI",
    "PARAM_ACCESS_TOKEN",
    "PARAM_DEFAULT_WORKSPACE",
    "PARAM_CHECK_LOGIN_ON_SERVER",
    "PARAM_TIMEOUT",
    "PARAM_LOGGER",
]
