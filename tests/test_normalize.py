"""Tests for paperplane.server.errors — adapters and the error normalizer."""

import json
import logging

import pydantic
import pytest

from paperplane.errors import HTTPError, NotFound, ValidationDetail, ValidationFailure
from paperplane.server.errors import (
    NormalizedError,
    adapt_error,
    error_response,
    normalize_error,
)


class _Item(pydantic.BaseModel):
    name: str
    count: int


def _pydantic_error() -> pydantic.ValidationError:
    try:
        _Item.model_validate({"count": "many"})
    except pydantic.ValidationError as exc:
        return exc
    raise AssertionError("validation should have failed")


class _JoiLikeError(Exception):
    """Carries a ``details`` list of field failures."""

    def __init__(self, message: str, details: list[dict]) -> None:
        super().__init__(message)
        self.details = details


class _StatusCodeError(Exception):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class _Output:
    def __init__(self, status_code: int, payload: dict) -> None:
        self.status_code = status_code
        self.payload = payload


class _WrappedError(Exception):
    """Keeps its HTTP shape in ``output.payload``."""

    def __init__(self, message: str, status_code: int, payload: dict) -> None:
        super().__init__(message)
        self.output = _Output(status_code, payload)


class TestValidationShaped:
    def test_own_validation_failure(self) -> None:
        failure = ValidationFailure(
            [ValidationDetail(message="foo is required", path="foo", type="any.required")]
        )
        result = normalize_error(failure)
        assert result.status == 400
        assert result.body == {
            "message": "foo is required",
            "name": "ValidationError",
            "details": [
                {"message": "foo is required", "path": "foo", "type": "any.required", "context": {}}
            ],
        }

    def test_details_list(self) -> None:
        exc = _JoiLikeError(
            '"foo" is required',
            [
                {
                    "message": '"foo" is required',
                    "path": ["foo"],
                    "type": "any.required",
                    "context": {"key": "foo"},
                }
            ],
        )
        result = normalize_error(exc)
        assert result.status == 400
        assert result.body["message"] == '"foo" is required'
        assert result.body["name"] == "_JoiLikeError"
        assert result.body["details"][0]["path"] == "foo"
        assert result.body["details"][0]["context"] == {"key": "foo"}

    def test_nested_path_joined(self) -> None:
        exc = _JoiLikeError("bad", [{"message": "bad", "path": ["a", 0, "b"], "type": "x"}])
        assert normalize_error(exc).body["details"][0]["path"] == "a.0.b"

    def test_pydantic(self) -> None:
        result = normalize_error(_pydantic_error())
        assert result.status == 400
        assert result.body["name"] == "ValidationError"
        paths = {d["path"]: d for d in result.body["details"]}
        assert set(paths) == {"name", "count"}
        assert paths["name"]["type"] == "missing"
        assert paths["count"]["context"]["value"] == "many"
        assert result.body["message"]

    def test_details_without_messages_not_validation(self) -> None:
        exc = _JoiLikeError("boom", [{"nope": 1}])
        assert normalize_error(exc).status == 500


class TestPreTagged:
    def test_http_error(self) -> None:
        result = normalize_error(HTTPError(418, "I'm a teapot"))
        assert result == NormalizedError(
            status=418, body={"message": "I'm a teapot", "name": "Error"}
        )

    def test_http_error_without_message_uses_reason(self) -> None:
        assert normalize_error(HTTPError(503)).body["message"] == "Service Unavailable"

    def test_headers_carried(self) -> None:
        exc = HTTPError(405, "nope", headers=(("Allow", "GET"),))
        assert normalize_error(exc).headers == (("Allow", "GET"),)

    def test_not_found(self) -> None:
        result = normalize_error(NotFound())
        assert result.status == 404
        assert result.body == {"message": "Not Found", "name": "NotFoundError"}

    def test_status_code_attribute(self) -> None:
        result = normalize_error(_StatusCodeError("slow down", 429))
        assert result.status == 429
        assert result.body == {"message": "slow down", "name": "_StatusCodeError"}

    def test_camel_case_status_code_attribute(self) -> None:
        exc = RuntimeError("short and stout")
        exc.statusCode = 418  # type: ignore[attr-defined]
        result = normalize_error(exc)
        assert result.status == 418
        assert result.body == {"message": "short and stout", "name": "RuntimeError"}

    def test_status_attribute(self) -> None:
        exc = RuntimeError("gone")
        exc.status = 410  # type: ignore[attr-defined]
        assert normalize_error(exc).status == 410

    @pytest.mark.parametrize("status", [200, 302, 600, True])
    def test_out_of_range_status_ignored(self, status: object) -> None:
        exc = _StatusCodeError("nope", status)  # type: ignore[arg-type]
        assert normalize_error(exc).status == 500

    def test_output_payload_wrapper(self) -> None:
        exc = _WrappedError("", 403, {"message": "no access", "statusCode": 403})
        result = normalize_error(exc)
        assert result.status == 403
        assert result.body == {"message": "no access", "name": "_WrappedError"}

    def test_output_wrapper_prefers_own_message(self) -> None:
        exc = _WrappedError("custom", 401, {"message": "Unauthorized"})
        assert normalize_error(exc).body["message"] == "custom"

    def test_adapt_error_passthrough(self) -> None:
        exc = HTTPError(400)
        assert adapt_error(exc) is exc


class TestGeneric:
    def test_plain_exception(self) -> None:
        result = normalize_error(ValueError("broken"))
        assert result.status == 500
        assert result.body == {"message": "broken", "name": "ValueError"}

    def test_exception_without_message(self) -> None:
        result = normalize_error(RuntimeError())
        assert result.body == {"message": "Internal Server Error", "name": "Error"}

    @pytest.mark.parametrize("failure", [None, "a string", 42, {"status": 404}])
    def test_non_exceptions(self, failure: object) -> None:
        result = normalize_error(failure)
        assert result.status == 500
        assert result.body == {"message": "Internal Server Error", "name": "Error"}

    def test_str_that_raises(self) -> None:
        class Hostile(Exception):
            def __str__(self) -> str:
                raise RuntimeError("no")

        result = normalize_error(Hostile())
        assert result.body == {"message": "Internal Server Error", "name": "Error"}

    def test_adapter_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        class Weird(Exception):
            def errors(self):
                raise RuntimeError("adapter blew up")

        with caplog.at_level(logging.ERROR, logger="paperplane.server"):
            result = normalize_error(Weird("weird"))
        assert result.status == 500
        assert result.body == {"message": "weird", "name": "Weird"}
        assert "error adapter failed" in caplog.text


class TestErrorResponse:
    def test_json_body(self) -> None:
        response = error_response(NormalizedError(404, {"message": "Not Found", "name": "E"}))
        assert response.status == 404
        assert response.header("content-type") == "application/json; charset=utf-8"
        assert json.loads(response.body) == {"message": "Not Found", "name": "E"}

    def test_non_json_context_rendered_with_str(self) -> None:
        body = {"message": "m", "name": "n", "details": [{"context": {"value": object}}]}
        response = error_response(NormalizedError(400, body))
        assert "class 'object'" in json.loads(response.body)["details"][0]["context"]["value"]

    def test_declared_headers(self) -> None:
        response = error_response(NormalizedError(405, {}, headers=(("Allow", "GET"),)))
        assert response.header("allow") == "GET"
