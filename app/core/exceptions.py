"""
Custom exceptions for the scoring engine.

Validation and lookup errors are raised before a recomputation run opens its
transaction. TransactionFailure is raised after the run has been rolled back.
"""


class ScoringException(Exception):
    """Base exception for scoring engine operations."""

    pass


class EvaluationValidationError(ScoringException):
    """Submitted evaluation payload is malformed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundException(ScoringException):
    """Entity not found in database."""

    def __init__(self, entity_type: str, entity_id):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class EmployeeNotFoundError(NotFoundException):
    def __init__(self, employee_id: int):
        super().__init__("Employee", employee_id)


class PeriodNotFoundError(NotFoundException):
    def __init__(self, period_id: int):
        super().__init__("Evaluation period", period_id)


class UnauthorizedError(ScoringException):
    """Principal may not act on the target employee."""

    def __init__(self, message: str = "Insufficient permissions"):
        self.message = message
        super().__init__(message)


class TransactionFailure(ScoringException):
    """Storage-layer failure during a recomputation run; all of the run's writes were rolled back."""

    def __init__(self, message: str = "Recomputation failed and was rolled back; retry the operation"):
        self.message = message
        super().__init__(message)
