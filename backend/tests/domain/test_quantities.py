"""Tests for quantity rules."""
import pytest

from batchrules.domain.quantities import QuantityOperation, get_quantity_rules, validate_quantity

pytestmark = pytest.mark.unit


def test_cannabis_merge_below_minimum():
    result = validate_quantity("cannabis", "merge", 0.05, "grams")
    assert result.is_valid is False
    assert result.error == (
        "Quantity 0.05grams is below minimum 0.1grams. METRC package weight limits"
    )
    assert result.rule.min_weight == 0.1


def test_produce_merge_above_maximum():
    result = validate_quantity("produce", "merge", 1_000_000, "grams")
    assert result.is_valid is False
    assert "exceeds maximum 907185grams" in result.error


def test_unit_mismatch_is_an_error():
    result = validate_quantity("cannabis", "split", 5, "lbs")
    assert result.is_valid is False
    assert result.error == "Unit mismatch: expected grams, got lbs"


def test_unit_is_not_converted():
    result = validate_quantity("produce", "transfer", 1, "kg")
    assert result.is_valid is False
    assert "Unit mismatch" in result.error


def test_unknown_operation():
    result = validate_quantity("cannabis", "repackage", 10, "grams")
    assert result.is_valid is False
    assert result.error == "Unknown operation: repackage"
    assert result.rule is None


def test_unknown_domain():
    result = validate_quantity("hemp", "split", 10, "grams")
    assert result.is_valid is False
    assert result.error == "Unknown domain: hemp"


@pytest.mark.parametrize(
    "domain, operation, quantity",
    [
        ("cannabis", "split", 0.1),
        ("cannabis", "waste", 3.5),
        ("cannabis", "merge", 50_000),
        ("produce", "waste", 5),
        ("produce", "merge", 907_185),
    ],
)
def test_quantities_at_or_inside_bounds_pass(domain, operation, quantity):
    result = validate_quantity(domain, operation, quantity, "grams")
    assert result.is_valid is True
    assert result.rule is not None


def test_produce_minimum_is_five_grams():
    result = validate_quantity("produce", QuantityOperation.SPLIT, 4.9, "grams")
    assert result.is_valid is False
    assert "below minimum 5grams" in result.error


def test_rules_only_cap_merge():
    rules = get_quantity_rules("cannabis")
    assert rules["merge"].max_weight == 50_000
    assert all(rules[op].max_weight is None for op in ("split", "waste", "transfer"))


def test_rules_copy_does_not_leak():
    rules = get_quantity_rules("produce")
    rules.pop("merge")
    assert "merge" in get_quantity_rules("produce")


@pytest.mark.parametrize("quantity", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_quantity_is_an_error(quantity):
    result = validate_quantity("cannabis", "split", quantity, "grams")
    assert result.is_valid is False
    assert result.error.startswith("Quantity must be a finite number")
