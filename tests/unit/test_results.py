"""
Unit tests for write results.

Tests cover:
- is_zero() semantics
- Wire format of Write and WriteResult
- Decoding error and write responses
"""

import json

import pytest

from etre_sdk.entity import Entity
from etre_sdk.errors import Error, UnhandledResponseError
from etre_sdk.results import Write, WriteResult, decode_error, decode_write_result


class TestWriteResult:
    """Tests for WriteResult."""

    def test_zero_value(self):
        """Empty result is zero."""
        assert WriteResult().is_zero()

    def test_writes_not_zero(self):
        """Any write makes it non-zero."""
        assert not WriteResult(writes=(Write("1"),)).is_zero()

    def test_error_not_zero(self):
        """An error with no writes is not zero."""
        wr = WriteResult(error=Error(message="x"))
        assert not wr.is_zero()
        assert not wr.ok

    def test_list_stored_as_tuple(self):
        """Writes are stored as a tuple."""
        wr = WriteResult(writes=[Write("1"), Write("2")])
        assert wr.writes == (Write("1"), Write("2"))
        assert wr.entity_ids() == ("1", "2")

    def test_to_dict_omits_error(self):
        """No error key when there is no error."""
        wr = WriteResult(writes=(Write("1", uri="http://etre/api/v1/entity/1"),))
        assert wr.to_dict() == {
            "writes": [{"entityId": "1", "uri": "http://etre/api/v1/entity/1"}]
        }

    def test_to_dict_with_error(self):
        """Error is included when set; writes is always present."""
        wr = WriteResult(error=Error(message="m", type="t", entity_id="e", http_status=400))
        assert wr.to_dict() == {
            "writes": [],
            "error": {"message": "m", "type": "t", "entityId": "e", "httpStatus": 400},
        }

    def test_from_dict_null_writes(self):
        """A null writes list decodes as empty."""
        assert WriteResult.from_dict({"writes": None}).is_zero()


class TestWrite:
    """Tests for Write."""

    def test_insert(self):
        """Insert writes carry a URI and no diff."""
        assert Write("1", uri="u").to_dict() == {"entityId": "1", "uri": "u"}

    def test_update_diff(self):
        """Update writes carry the previous values."""
        w = Write.from_dict({"entityId": "1", "diff": {"hostname": "old"}})
        assert isinstance(w.diff, Entity)
        assert w.diff == {"hostname": "old"}
        assert w.uri == ""
        assert w.to_dict() == {"entityId": "1", "diff": {"hostname": "old"}}

    def test_empty_diff_omitted(self):
        """An empty diff is left off the wire."""
        assert Write("1", diff=Entity()).to_dict() == {"entityId": "1"}

    def test_diff_copied(self):
        """Changing the source mapping later does not change the write."""
        prior = {"hostname": "old"}
        w = Write("1", diff=prior)
        prior["hostname"] = "new"
        assert w.diff == {"hostname": "old"}
        assert isinstance(w.diff, Entity)

    def test_not_hashable(self):
        """Writes hold a mapping and refuse hashing explicitly."""
        with pytest.raises(TypeError, match="unhashable"):
            hash(Write("1"))

    def test_delete(self):
        """Delete writes have only the id."""
        assert Write("1").to_dict() == {"entityId": "1"}


class TestDecodeError:
    """Tests for decode_error()."""

    def test_error_body(self):
        """A well-formed body decodes to an Error."""
        body = json.dumps(
            {"message": "no such entity", "type": "entity-not-found", "entityId": "1", "httpStatus": 404}
        ).encode()
        err = decode_error(body, 404)
        assert err == Error("no such entity", "entity-not-found", "1", 404)

    def test_fills_status(self):
        """Missing httpStatus comes from the response."""
        err = decode_error('{"message": "m", "type": "db-error"}', 503)
        assert err.http_status == 503

    @pytest.mark.parametrize(
        "body",
        [b"panic: runtime error", b"[1, 2]", b'{"message": "m"}', b'{"error": "x"}', b""],
    )
    def test_unshaped_body(self, body):
        """Anything else is an opaque failure carrying the body text."""
        with pytest.raises(UnhandledResponseError) as exc_info:
            decode_error(body, 500)
        assert exc_info.value.body == body.decode()
        assert exc_info.value.http_status == 500


class TestDecodeWriteResult:
    """Tests for decode_write_result()."""

    def test_partial_failure(self):
        """Writes before the failure and the error are both decoded."""
        body = json.dumps(
            {
                "writes": [{"entityId": "a"}],
                "error": {"message": "dup", "type": "duplicate-entity", "entityId": "b", "httpStatus": 409},
            }
        )
        wr = decode_write_result(body)
        assert wr.entity_ids() == ("a",)
        assert wr.error.entity_id == "b"

    @pytest.mark.parametrize("body", ["<html>502</html>", '{"writes": "x"}', '{"writes": [{}]}'])
    def test_unshaped_body(self, body):
        """Malformed bodies are opaque failures."""
        with pytest.raises(UnhandledResponseError):
            decode_write_result(body, 502)
