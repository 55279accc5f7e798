"""Validation verdict returned by every validator.

Rule violations are values, not exceptions: callers inspect ``is_valid`` and
surface ``error`` / ``warnings`` to the operator.
"""
from pydantic import BaseModel, ConfigDict, model_validator

from batchrules.domain.rules import QuantityRule, StageDefinition


class ValidationResult(BaseModel):
    """Outcome of a validation check.

    ``error`` is set iff ``is_valid`` is False. ``errors`` holds every blocking
    message (a single entry unless several checks were aggregated).
    ``warnings`` are advisory and never affect validity.
    """

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    error: str | None = None
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    # Validator-specific diagnostics
    rule: StageDefinition | QuantityRule | None = None
    available_capacity: float | None = None
    utilization_percent: float | None = None

    @model_validator(mode="after")
    def check_error_matches_validity(self) -> "ValidationResult":
        if self.is_valid and self.error is not None:
            raise ValueError("A valid result cannot carry an error")
        if not self.is_valid and not self.error:
            raise ValueError("An invalid result must carry an error")
        return self

    @classmethod
    def ok(cls, warnings: list[str] | tuple[str, ...] = (), **details) -> "ValidationResult":
        return cls(is_valid=True, warnings=tuple(warnings), **details)

    @classmethod
    def fail(cls, error: str, warnings: list[str] | tuple[str, ...] = (), **details) -> "ValidationResult":
        return cls(is_valid=False, error=error, errors=(error,), warnings=tuple(warnings), **details)

    @classmethod
    def from_messages(cls, errors: list[str], warnings: list[str]) -> "ValidationResult":
        """Build a result from collected errors and warnings (valid when no errors)."""
        if not errors:
            return cls.ok(warnings)
        return cls(
            is_valid=False,
            error="; ".join(errors),
            errors=tuple(errors),
            warnings=tuple(warnings),
        )


def merge_results(*results: ValidationResult) -> ValidationResult:
    """Aggregate independent checks for one operation into a single verdict.

    Valid only if every input is valid. All errors and warnings are kept in
    input order. Diagnostics are dropped since they belong to a single check.
    """
    errors: list[str] = []
    warnings: list[str] = []
    for result in results:
        errors.extend(result.errors or ((result.error,) if result.error else ()))
        warnings.extend(result.warnings)
    return ValidationResult.from_messages(errors, warnings)
