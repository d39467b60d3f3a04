"""Tests for ServiceResult and ServiceError."""

import json

import pytest

from ppdctl.domain.errors import InvalidAssignmentError, NotFoundError
from ppdctl.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="create_paperdoll", data={"id": 1})
        assert result.ok is True
        assert result.data == {"id": 1}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_from_domain_error(self) -> None:
        exc = InvalidAssignmentError("nope", slot_id=1, fragment_id=3)
        result = ServiceResult.failure("use_fragment", exc)
        assert result.ok is False
        assert result.op == "use_fragment"
        assert result.error == ServiceError(
            code="INVALID_ASSIGNMENT",
            message="nope",
            detail={"slot_id": 1, "fragment_id": 3},
        )

    def test_json_serialization(self) -> None:
        result = ServiceResult.failure("get_paperdoll", NotFoundError("gone", paperdoll_id=7))
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is False
        assert parsed["error"]["code"] == "NOT_FOUND"
        assert parsed["error"]["detail"]["paperdoll_id"] == 7

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]
