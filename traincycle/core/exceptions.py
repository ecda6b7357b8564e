class DomainError(Exception):
    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DomainError):
    def __init__(self, entity: str, message: str | None = None, details: dict | None = None):
        code = f"NF_{entity.upper()}_001"
        msg = message or f"{entity} not found"
        super().__init__(code, msg, details)


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, details: dict | None = None):
        code = f"VAL_{field.upper()}_001"
        msg = f"Validation failed for {field}: {message}"
        super().__init__(code, msg, details or {"field": field})


class BusinessRuleError(DomainError):
    def __init__(self, message: str, code: str = "BR_001", details: dict | None = None):
        super().__init__(code, message, details)


class ConflictError(DomainError):
    def __init__(self, message: str, code: str = "CF_001", details: dict | None = None):
        super().__init__(code, message, details)


class SessionFinishedError(BusinessRuleError):
    """The training session already has an end time and can no longer be edited."""

    def __init__(self, training_id: int):
        super().__init__(
            "Training session is already finished",
            code="BR_SESSION_FINISHED",
            details={"training_id": training_id},
        )


class SessionNotStartedError(BusinessRuleError):
    def __init__(self, training_id: int, message: str = "Training session has not been started"):
        super().__init__(message, code="BR_SESSION_NOT_STARTED", details={"training_id": training_id})


class ExerciseNotInPlanError(BusinessRuleError):
    def __init__(self, planned_workout_id: int, exercise_id: int):
        super().__init__(
            f"Exercise {exercise_id} is not part of planned workout {planned_workout_id}",
            code="BR_EXERCISE_NOT_IN_PLAN",
            details={"planned_workout_id": planned_workout_id, "exercise_id": exercise_id},
        )


class SessionAlreadyFinalizedError(ConflictError):
    """A second finish request for the same session."""

    def __init__(self, training_id: int):
        super().__init__(
            f"Training session {training_id} is already finished",
            code="CF_SESSION_FINISHED",
            details={"training_id": training_id},
        )
