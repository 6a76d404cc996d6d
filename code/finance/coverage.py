from typing import Any, Callable, Dict, Mapping, Optional

from .coverage_core import (
    compute_health_coverage,
    compute_life_coverage,
    compute_vehicle_coverage,
)
from .schemas import (
    CalculationResult,
    HealthInputs,
    HealthResult,
    LifeInputs,
    LifeResult,
    VehicleInputs,
    VehicleResult,
)

CATEGORIES = ("life", "health", "vehicle")


def calculate_life_coverage(form: Mapping[str, Any]) -> Optional[LifeResult]:
    inputs = LifeInputs.from_form(form)
    if inputs is None:
        return None
    return compute_life_coverage(inputs)


def calculate_health_coverage(form: Mapping[str, Any]) -> Optional[HealthResult]:
    inputs = HealthInputs.from_form(form)
    if inputs is None:
        return None
    return compute_health_coverage(inputs)


def calculate_vehicle_coverage(form: Mapping[str, Any]) -> Optional[VehicleResult]:
    inputs = VehicleInputs.from_form(form)
    if inputs is None:
        return None
    return compute_vehicle_coverage(inputs)


_CALCULATORS: Dict[str, Callable[[Mapping[str, Any]], Optional[CalculationResult]]] = {
    "life": calculate_life_coverage,
    "health": calculate_health_coverage,
    "vehicle": calculate_vehicle_coverage,
}


def calculate(category: str, form: Mapping[str, Any]) -> Optional[CalculationResult]:
    """
    Run the calculator for ``category`` against a raw form mapping.

    Returns the category's result, or None when the form lacks the minimum
    required inputs. Raises ValueError for an unknown category.
    """
    calculator = _CALCULATORS.get(category)
    if calculator is None:
        raise ValueError(f"Unknown coverage category: {category!r}")
    return calculator(form)
