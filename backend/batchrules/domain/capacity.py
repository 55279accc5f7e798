"""Location capacity checks for plant count and area."""
from batchrules.domain.results import ValidationResult
from batchrules.schemas.snapshots import LocationSnapshot

NEAR_CAPACITY_PERCENT = 90
HIGH_UTILIZATION_PERCENT = 75


def _utilization(total: float, capacity: float) -> float:
    if capacity <= 0:
        return 0.0 if total <= 0 else 100.0
    return total * 100 / capacity


def validate_location_capacity(location: LocationSnapshot, additional_plant_count: int) -> ValidationResult:
    """Check that adding plants keeps the location within its plant capacity.

    Returns:
        ValidationResult with ``available_capacity`` and ``utilization_percent``.
        Over capacity reports the room left before the addition and 100%.
    """
    current = location.current_plant_count or 0
    new_total = current + additional_plant_count

    if new_total > location.capacity:
        return ValidationResult.fail(
            f'Location "{location.name}" would exceed capacity. '
            f"Current: {current}, Adding: {additional_plant_count}, Capacity: {location.capacity}",
            available_capacity=location.capacity - current,
            utilization_percent=100.0,
        )

    utilization = _utilization(new_total, location.capacity)
    warnings: list[str] = []
    if utilization > NEAR_CAPACITY_PERCENT:
        warnings.append(
            f'Location "{location.name}" will be at {utilization:.0f}% capacity - consider alternative locations'
        )
    elif utilization > HIGH_UTILIZATION_PERCENT:
        warnings.append(f'Location "{location.name}" will be at {utilization:.0f}% capacity')

    return ValidationResult.ok(
        warnings,
        available_capacity=location.capacity - new_total,
        utilization_percent=utilization,
    )


def validate_area_capacity(location: LocationSnapshot, additional_area: float) -> ValidationResult:
    """Same as validate_location_capacity, for square footage.

    Locations without area tracking pass with a warning.
    """
    if not location.area:
        return ValidationResult.ok(["Location does not have area tracking configured"])

    current = location.used_area or 0
    new_total = current + additional_area

    if new_total > location.area:
        return ValidationResult.fail(
            f'Location "{location.name}" area would exceed capacity. '
            f"Current: {current:g} sq ft, Adding: {additional_area:g} sq ft, Capacity: {location.area:g} sq ft",
            available_capacity=location.area - current,
            utilization_percent=100.0,
        )

    utilization = _utilization(new_total, location.area)
    warnings: list[str] = []
    if utilization > NEAR_CAPACITY_PERCENT:
        warnings.append(
            f'Location "{location.name}" area will be at {utilization:.0f}% - limited space remaining'
        )

    return ValidationResult.ok(
        warnings,
        available_capacity=location.area - new_total,
        utilization_percent=utilization,
    )
