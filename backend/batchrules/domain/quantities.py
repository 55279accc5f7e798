"""Quantity rules for split, waste, transfer and merge operations."""
import math
from enum import StrEnum

from batchrules.domain.results import ValidationResult
from batchrules.domain.rules import QuantityRule
from batchrules.domain.rulesets import Rulesets, get_ruleset


class QuantityOperation(StrEnum):
    SPLIT = "split"
    WASTE = "waste"
    TRANSFER = "transfer"
    MERGE = "merge"


def get_quantity_rules(domain: str, rulesets: Rulesets | None = None) -> dict[str, QuantityRule]:
    ruleset = get_ruleset(domain, rulesets)
    if ruleset is None:
        return {}
    return dict(ruleset.quantity_rules)


def _format_amount(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def validate_quantity(
    domain: str,
    operation: str,
    quantity: float,
    unit: str,
    rulesets: Rulesets | None = None,
) -> ValidationResult:
    """Check a weight against the domain's rule for an operation.

    Units are compared for equality; no conversion is performed.

    Returns:
        ValidationResult with the matched QuantityRule attached as ``rule``
    """
    ruleset = get_ruleset(domain, rulesets)
    if ruleset is None:
        return ValidationResult.fail(f"Unknown domain: {domain}")

    rule = ruleset.quantity_rules.get(str(operation))
    if rule is None:
        return ValidationResult.fail(f"Unknown operation: {operation}")

    if unit != rule.unit:
        return ValidationResult.fail(f"Unit mismatch: expected {rule.unit}, got {unit}", rule=rule)

    if not math.isfinite(quantity):
        return ValidationResult.fail(f"Quantity must be a finite number, got {quantity}", rule=rule)

    if quantity < rule.min_weight:
        return ValidationResult.fail(
            f"Quantity {_format_amount(quantity)}{unit} is below minimum "
            f"{_format_amount(rule.min_weight)}{rule.unit}. {rule.context}".rstrip(),
            rule=rule,
        )

    if rule.max_weight is not None and quantity > rule.max_weight:
        return ValidationResult.fail(
            f"Quantity {_format_amount(quantity)}{unit} exceeds maximum "
            f"{_format_amount(rule.max_weight)}{rule.unit}. {rule.context}".rstrip(),
            rule=rule,
        )

    return ValidationResult.ok(rule=rule)
