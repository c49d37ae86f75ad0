"""
Unit tests for error values and exceptions.

Tests cover:
- Error.new() copy semantics
- Error wire format
- EtreError taxonomy and conversion to Error
"""

import dataclasses

import pytest

from etre_sdk.errors import (
    ERR_MISSING_PARAM,
    ERR_NOT_FOUND,
    BadDataError,
    CallerBlockedError,
    ClientTimeoutError,
    EntityNotFoundError,
    Error,
    EtreError,
    IdNotSetError,
    IdSetError,
    NoEntityError,
    NoLabelError,
    NoQueryError,
    ServerError,
    TypeMismatchError,
    UnhandledResponseError,
)


class TestErrorValue:
    """Tests for the Error value."""

    def test_new_empty_format_returns_receiver(self):
        """Empty format returns the same value."""
        assert ERR_NOT_FOUND.new("") is ERR_NOT_FOUND
        assert ERR_NOT_FOUND.new() == ERR_NOT_FOUND

    def test_new_formats_message(self):
        """Non-empty format fills in the message, other fields unchanged."""
        err = ERR_MISSING_PARAM.new("missing %s in %s", "hostname", "host")
        assert err.message == "missing hostname in host"
        assert err.type == ERR_MISSING_PARAM.type
        assert err.entity_id == ERR_MISSING_PARAM.entity_id
        assert err.http_status == 400

    def test_new_does_not_mutate(self):
        """The template keeps its original message."""
        before = dataclasses.replace(ERR_MISSING_PARAM)
        ERR_MISSING_PARAM.new("x")
        assert ERR_MISSING_PARAM == before

    def test_new_without_args_keeps_percent(self):
        """A format without args is used literally."""
        assert Error().new("100% done").message == "100% done"

    def test_new_with_mismatched_args(self):
        """Arguments that do not fit the format are appended, never raised."""
        err = Error(type="x").new("id %s and %s", "a")
        assert err.message == "id %s and %s (args: 'a')"
        assert err.type == "x"

    def test_new_with_extra_args(self):
        """Extra arguments are kept in the message."""
        err = Error().new("plain", 1, "b")
        assert err.message == "plain (args: 1, 'b')"

    def test_frozen(self):
        """Error values cannot be modified."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            ERR_NOT_FOUND.message = "x"

    def test_not_an_exception(self):
        """Error is a value, not an exception."""
        assert not isinstance(ERR_NOT_FOUND, BaseException)

    def test_str(self):
        """String form includes type and message."""
        err = Error(message="boom", type="db-error", http_status=500)
        assert str(err) == "Etre error db-error: boom"

    def test_to_dict(self):
        """Wire form uses fixed field names."""
        err = Error(message="m", type="t", entity_id="e1", http_status=404)
        assert err.to_dict() == {
            "message": "m",
            "type": "t",
            "entityId": "e1",
            "httpStatus": 404,
        }

    def test_from_dict_defaults(self):
        """Missing fields decode to zero values."""
        assert Error.from_dict({"message": "m"}) == Error(message="m")


class TestEtreErrors:
    """Tests for client-local exceptions."""

    @pytest.mark.parametrize(
        "exc,code",
        [
            (TypeMismatchError("a", "b"), "type-mismatch"),
            (IdSetError("1"), "id-set"),
            (IdNotSetError(), "id-not-set"),
            (NoEntityError(), "no-entity"),
            (NoLabelError(), "no-label"),
            (NoQueryError(), "no-query"),
            (BadDataError({}), "bad-data"),
            (CallerBlockedError("me"), "caller-blocked"),
            (EntityNotFoundError("1"), "entity-not-found"),
            (ClientTimeoutError(5.0), "client-timeout"),
        ],
    )
    def test_codes(self, exc, code):
        """Each condition has its own slug and is an EtreError."""
        assert isinstance(exc, EtreError)
        assert exc.code == code
        assert exc.message

    def test_to_error(self):
        """to_error() carries message, slug, status and entity id."""
        err = TypeMismatchError("node", "host").to_error("e1")
        assert err.type == "type-mismatch"
        assert err.entity_id == "e1"
        assert err.http_status == 400
        assert "node" in err.message and "host" in err.message

    def test_not_found_status(self):
        """Not found maps to 404."""
        assert EntityNotFoundError("1").to_error().http_status == 404


class TestServerError:
    """Tests for ServerError."""

    def test_wraps_error(self):
        """ServerError exposes the reported Error."""
        err = Error(message="dup", type="duplicate-entity", http_status=409)
        exc = ServerError(err)
        assert exc.error is err
        assert exc.code == "duplicate-entity"
        assert exc.http_status == 409

    def test_to_error_fills_missing_entity_id(self):
        """An unattributed Error gets the failing entity's id."""
        err = Error(message="db", type="db-error", http_status=500)
        assert ServerError(err).to_error("e2").entity_id == "e2"

    def test_to_error_keeps_reported_entity_id(self):
        """A server-attributed Error is returned unchanged."""
        err = Error(message="db", type="db-error", entity_id="e9", http_status=500)
        assert ServerError(err).to_error("e2") is err


class TestUnhandledResponseError:
    """Tests for UnhandledResponseError."""

    def test_keeps_body(self):
        """Body and status are kept for display."""
        exc = UnhandledResponseError("panic: runtime error", 500)
        assert exc.body == "panic: runtime error"
        assert exc.http_status == 500
        assert "panic" in str(exc)
