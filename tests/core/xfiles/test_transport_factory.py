"""Tests for TransportFactory."""

from prismic_cr.core.dto.result_dto import StatusCode
from prismic_cr.core.prismic.api import DEFAULT_TIMEOUT
from prismic_cr.core.spock.spock import Spock
from prismic_cr.core.xfiles import DebugStack, LoggingCallLogger, LoggingTransport, PrismicTransport, TransportFactory
from prismic_cr.core.xfiles.factory import PARAM_LOGGER, PARAM_URI
from tests.utils import URI_TEMPLATE


def loaded_spock(config: dict) -> Spock:
    spock = Spock()
    spock.load(config)
    return spock


class TestExecuteCreate:
    """Test transport creation from a parameter table."""

    def test_minimal(self):
        result = TransportFactory().execute_create({PARAM_URI: URI_TEMPLATE})

        assert result.is_ok()
        assert result.detail is None
        assert result.uri == URI_TEMPLATE
        assert result.logging_enabled is False
        assert isinstance(result.transport, PrismicTransport)
        assert result.transport.timeout == DEFAULT_TIMEOUT
        assert result.transport.check_login_on_server is True

    def test_all_parameters(self):
        result = TransportFactory().execute_create(
            {
                PARAM_URI: URI_TEMPLATE,
                "prismic_cr.access_token": "token",
                "prismic_cr.default_workspace": "lesbonneschoses",
                "prismic_cr.check_login_on_server": False,
                "prismic_cr.timeout": 5,
            }
        )

        transport = result.transport
        assert transport.access_token == "token"
        assert transport.endpoint_for("default") == "https://lesbonneschoses.cdn.prismic.io/api"
        assert transport.check_login_on_server is False
        assert transport.timeout == 5.0

    def test_call_logger_wraps_transport(self):
        stack = DebugStack()
        result = TransportFactory().execute_create({PARAM_URI: URI_TEMPLATE, PARAM_LOGGER: stack})

        assert result.is_ok()
        assert result.logging_enabled is True
        assert isinstance(result.transport, LoggingTransport)
        assert result.transport.call_logger is stack
        assert isinstance(result.transport.transport, PrismicTransport)

    def test_missing_uri(self):
        result = TransportFactory().execute_create({"prismic_cr.access_token": "token"})

        assert result.is_error()
        assert result.transport is None
        assert result.detail.code == StatusCode.MISSING_PARAMETER
        assert result.detail.context == {"missing": [PARAM_URI]}

    def test_empty_uri_is_missing(self):
        result = TransportFactory().execute_create({PARAM_URI: ""})
        assert result.detail.code == StatusCode.MISSING_PARAMETER

    def test_uri_must_be_a_string(self):
        result = TransportFactory().execute_create({PARAM_URI: 42})

        assert result.is_error()
        assert result.detail.code == StatusCode.INVALID
        assert result.detail.context["parameter"] == PARAM_URI

    def test_invalid_timeout(self):
        for timeout in (0, -1, "10", True):
            result = TransportFactory().execute_create({PARAM_URI: URI_TEMPLATE, "prismic_cr.timeout": timeout})
            assert result.is_error()
            assert result.detail.code == StatusCode.INVALID
            assert result.detail.context["parameter"] == "prismic_cr.timeout"

    def test_check_login_on_server_must_be_a_boolean(self):
        for value in ("false", 0, None):
            result = TransportFactory().execute_create(
                {PARAM_URI: URI_TEMPLATE, "prismic_cr.check_login_on_server": value}
            )
            assert result.is_error()
            assert result.detail.code == StatusCode.INVALID
            assert result.detail.context["parameter"] == "prismic_cr.check_login_on_server"

    def test_invalid_logger(self):
        result = TransportFactory().execute_create({PARAM_URI: URI_TEMPLATE, PARAM_LOGGER: "stdout"})

        assert result.is_error()
        assert result.detail.code == StatusCode.INVALID
        assert result.detail.context == {"parameter": PARAM_LOGGER, "value": "'str'"}

    def test_unknown_parameters_are_reported(self, caplog):
        result = TransportFactory().execute_create(
            {PARAM_URI: URI_TEMPLATE, "prismic_cr.retries": 3, "other.key": "x"}
        )

        assert result.is_ok()
        assert isinstance(result.transport, PrismicTransport)
        assert result.detail.code == StatusCode.UNKNOWN_PARAMETER
        assert result.detail.context == {"unknown": ["other.key", "prismic_cr.retries"]}
        assert "Ignoring unknown transport parameters" in caplog.text

    def test_configuration_keys(self):
        keys = TransportFactory.get_configuration_keys()
        assert list(keys)[0] == PARAM_URI
        assert PARAM_LOGGER in keys
        assert len(keys) == 6


class TestCreateFromConfiguration:
    """execute_create() without parameters reads the Spock sections."""

    def test_transport_section(self):
        spock = loaded_spock(
            {"transport": {"uri": URI_TEMPLATE, "access_token": "from-config", "check_login_on_server": False}}
        )
        result = TransportFactory(spock=spock).execute_create()

        assert result.is_ok()
        assert isinstance(result.transport, PrismicTransport)
        assert result.transport.access_token == "from-config"
        assert result.transport.login(workspace_name="test") == "test"

    def test_call_log(self):
        spock = loaded_spock({"transport": {"uri": URI_TEMPLATE}, "logging": {"call_log": True}})
        result = TransportFactory(spock=spock).execute_create()

        assert result.logging_enabled is True
        assert isinstance(result.transport.call_logger, LoggingCallLogger)

    def test_nothing_configured(self):
        result = TransportFactory(spock=loaded_spock({})).execute_create()

        assert result.is_error()
        assert result.detail.code == StatusCode.INVALID
        assert result.detail.message == "No parameters given and no transport configured"

    def test_call_log_without_transport(self):
        result = TransportFactory(spock=loaded_spock({"logging": {"call_log": True}})).execute_create()
        assert result.detail.code == StatusCode.INVALID
