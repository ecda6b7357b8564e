"""Tests for the domain error handler's JSON error envelope."""
import json
from datetime import datetime

import pytest
from fastapi.responses import JSONResponse

from traincycle.core.error_handlers import ERROR_STATUS_MAP, domain_error_handler, status_for
from traincycle.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    DomainError,
    ExerciseNotInPlanError,
    NotFoundError,
    SessionAlreadyFinalizedError,
    SessionFinishedError,
    SessionNotStartedError,
    ValidationError,
)


class MockRequest:
    """Stands in for a FastAPI Request; only ``state`` is read."""

    def __init__(self, request_id: str | None = "req-1"):
        self.state = type("State", (), {"request_id": request_id})()


def _body(response: JSONResponse) -> dict:
    return json.loads(response.body.decode())


class TestDomainErrors:
    def test_base_error(self):
        error = DomainError(code="TEST_001", message="Broken", details={"key": "value"})
        assert error.code == "TEST_001"
        assert error.details == {"key": "value"}
        assert str(error) == "Broken"

    def test_not_found_code_from_entity(self):
        error = NotFoundError("TrainingSession", "TrainingSession 9 not found", {"id": 9})
        assert error.code == "NF_TRAININGSESSION_001"
        assert error.details == {"id": 9}

    def test_not_found_default_message(self):
        error = NotFoundError("Exercise")
        assert error.message == "Exercise not found"
        assert error.details == {}

    def test_validation_error(self):
        error = ValidationError("seconds", "must not be negative")
        assert error.code == "VAL_SECONDS_001"
        assert error.message == "Validation failed for seconds: must not be negative"
        assert error.details == {"field": "seconds"}

    def test_business_rule_codes(self):
        assert BusinessRuleError("nope").code == "BR_001"
        error = BusinessRuleError("finished", code="BR_SESSION_FINISHED", details={"training_id": 3})
        assert error.code == "BR_SESSION_FINISHED"
        assert error.details == {"training_id": 3}

    def test_conflict_codes(self):
        assert ConflictError("twice").code == "CF_001"
        assert ConflictError("twice", code="CF_SESSION_FINISHED").code == "CF_SESSION_FINISHED"


class TestErrorStatusMap:
    @pytest.mark.parametrize("error_type,status_code", [
        (NotFoundError, 404),
        (ValidationError, 400),
        (BusinessRuleError, 422),
        (ConflictError, 409),
    ])
    def test_status(self, error_type, status_code):
        assert ERROR_STATUS_MAP[error_type] == status_code

    @pytest.mark.parametrize("error,status_code", [
        (SessionFinishedError(1), 422),
        (SessionNotStartedError(1), 422),
        (ExerciseNotInPlanError(1, 2), 422),
        (SessionAlreadyFinalizedError(1), 409),
    ])
    def test_subclasses_use_base_status(self, error, status_code):
        assert status_for(error) == status_code


class TestDomainErrorHandler:
    @pytest.mark.asyncio
    async def test_not_found_envelope(self):
        error = NotFoundError("TrainingSession", "TrainingSession 9 not found", {"id": 9})
        response = await domain_error_handler(MockRequest("req-404"), error)

        assert response.status_code == 404
        data = _body(response)
        assert data["data"] is None
        assert data["meta"]["request_id"] == "req-404"
        assert data["errors"] == [{
            "code": "NF_TRAININGSESSION_001",
            "message": "TrainingSession 9 not found",
            "details": {"id": 9},
        }]

    @pytest.mark.asyncio
    async def test_business_rule_envelope(self):
        error = BusinessRuleError(
            "Start the training session before completing sets",
            code="BR_SESSION_NOT_STARTED",
            details={"training_id": 4},
        )
        response = await domain_error_handler(MockRequest(), error)

        assert response.status_code == 422
        assert _body(response)["errors"][0]["code"] == "BR_SESSION_NOT_STARTED"

    @pytest.mark.asyncio
    async def test_conflict_envelope(self):
        response = await domain_error_handler(MockRequest(), ConflictError("already finished"))
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_timestamp_is_iso(self):
        response = await domain_error_handler(MockRequest(), NotFoundError("User"))
        timestamp = _body(response)["meta"]["timestamp"]
        datetime.fromisoformat(timestamp.replace("Z", "+00:00"))

    @pytest.mark.asyncio
    async def test_unmapped_error_is_500(self):
        class PlannerError(DomainError):
            pass

        response = await domain_error_handler(MockRequest(), PlannerError("PL_001", "planner broke"))
        assert response.status_code == 500
        assert _body(response)["errors"][0]["code"] == "PL_001"

    @pytest.mark.asyncio
    async def test_missing_request_id(self):
        request = type("Request", (), {"state": type("State", (), {})()})()
        response = await domain_error_handler(request, ValidationError("context", "bad"))
        assert _body(response)["meta"]["request_id"] is None


class TestTrainingErrors:
    def test_session_finished(self):
        error = SessionFinishedError(12)
        assert error.code == "BR_SESSION_FINISHED"
        assert error.details == {"training_id": 12}

    def test_not_started_custom_message(self):
        error = SessionNotStartedError(3, "Start first")
        assert error.code == "BR_SESSION_NOT_STARTED"
        assert error.message == "Start first"

    def test_exercise_not_in_plan(self):
        error = ExerciseNotInPlanError(4, 9)
        assert error.details == {"planned_workout_id": 4, "exercise_id": 9}
        assert "9" in error.message

    def test_already_finalized(self):
        assert SessionAlreadyFinalizedError(5).code == "CF_SESSION_FINISHED"
