"""Tests for contractorcli/core/exceptions.py."""

import pytest

from contractorcli.core.exceptions import (
    ActionError,
    ArgumentError,
    AuthenticationError,
    ConfigError,
    ContractorCLIError,
    NotAuthorizedError,
    NotFoundError,
    ResponseParseError,
    ServerError,
    TransportError,
    UnboundResourceError,
    ValidationError,
)


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        "exc_class",
        [ArgumentError, ConfigError, NotFoundError, ValidationError, ActionError, TransportError],
    )
    def test_inherits_from_base(self, exc_class):
        assert issubclass(exc_class, ContractorCLIError)

    def test_transport_errors(self):
        for exc_class in (AuthenticationError, NotAuthorizedError, ServerError, ResponseParseError):
            assert issubclass(exc_class, TransportError)

    def test_unbound_is_argument_error(self):
        assert issubclass(UnboundResourceError, ArgumentError)


class TestValidationError:
    def test_field_errors_in_message(self):
        err = ValidationError("Invalid Request", {"script": "line 3: bad", "name": "required"})
        assert err.field_errors == {"script": "line 3: bad", "name": "required"}
        assert str(err) == "Invalid Request (name: required; script: line 3: bad)"

    def test_without_field_errors(self):
        err = ValidationError("Invalid Request")
        assert err.field_errors == {}
        assert str(err) == "Invalid Request"


class TestActionError:
    def test_message(self):
        err = ActionError("nextAddress", "No Available Addresses")
        assert err.action == "nextAddress"
        assert str(err) == "Action 'nextAddress' failed: No Available Addresses"


class TestUnboundResourceError:
    def test_message(self):
        err = UnboundResourceError("Site", "update")
        assert err.kind_name == "Site"
        assert "Cannot update Site" in str(err)
