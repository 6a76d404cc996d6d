from .schemas import (
    HealthInputs,
    HealthResult,
    LifeInputs,
    LifeResult,
    VehicleInputs,
    VehicleResult,
)

RETIREMENT_AGE = 60
CONSUMPTION_SHARE = 0.7
IMMEDIATE_EXPENSE_YEARS = 2

HEALTH_BASE_COVERAGE = 300000.0
HEALTH_COVERAGE_CAP = 2000000.0
HEALTH_BASE_RATE = 0.04

VEHICLE_BASE_RATE = 0.03
DEPRECIATION_PER_YEAR = 0.05
MAX_DEPRECIATION = 0.5
MAX_DEDUCTIBLE_DISCOUNT = 0.15


def life_premium_rate(age: float) -> float:
    if age < 30:
        return 0.0008
    if age < 40:
        return 0.0012
    return 0.0018


def human_life_value(inputs: LifeInputs) -> float:
    working_years = RETIREMENT_AGE - inputs.age
    return inputs.annual_income * working_years * CONSUMPTION_SHARE


def needs_analysis(inputs: LifeInputs) -> float:
    working_years = RETIREMENT_AGE - inputs.age
    immediate = inputs.outstanding_loans + inputs.annual_expenses * IMMEDIATE_EXPENSE_YEARS
    future = inputs.annual_expenses * 12 * working_years + inputs.future_goals
    return immediate + future


def income_replacement(inputs: LifeInputs) -> float:
    return inputs.annual_income * (15 if inputs.dependents > 0 else 10)


def compute_life_coverage(inputs: LifeInputs) -> LifeResult:
    methods = {
        "human_life_value": human_life_value(inputs),
        "needs_analysis": needs_analysis(inputs),
        "income_replacement": income_replacement(inputs),
    }
    recommended = max(methods.values())
    rate = life_premium_rate(inputs.age)
    return LifeResult(
        recommended_coverage=recommended,
        estimated_premium=recommended * rate,
        methods=methods,
        premium_rate=rate,
    )


def health_age_multiplier(age: float) -> float:
    if age > 45:
        return 2.0
    if age > 35:
        return 1.5
    return 1.0


def health_family_multiplier(family_size: float) -> float:
    if family_size > 4:
        return 2.0
    if family_size > 2:
        return 1.5
    return 1.0


def compute_health_coverage(inputs: HealthInputs) -> HealthResult:
    factors = {
        "age_multiplier": health_age_multiplier(inputs.age),
        "family_multiplier": health_family_multiplier(inputs.family_size),
        "city_multiplier": 1.5 if inputs.is_metro else 1.0,
        "pre_existing_multiplier": 1.3 if inputs.has_pre_existing_condition else 1.0,
    }
    coverage = HEALTH_BASE_COVERAGE
    for multiplier in factors.values():
        coverage *= multiplier
    recommended = min(coverage, HEALTH_COVERAGE_CAP)

    # Rate loadings are independent of the coverage multipliers above.
    rate = HEALTH_BASE_RATE
    if inputs.age > 45:
        rate *= 1.5
    if inputs.has_pre_existing_condition:
        rate *= 1.4
    if inputs.is_metro:
        rate *= 1.2

    return HealthResult(
        recommended_coverage=recommended,
        estimated_premium=recommended * rate,
        factors=factors,
        premium_rate=rate,
        uncapped_coverage=coverage,
    )


def depreciation_rate(vehicle_age: float) -> float:
    return min(vehicle_age * DEPRECIATION_PER_YEAR, MAX_DEPRECIATION)


def deductible_discount(voluntary_deductible: float) -> float:
    if voluntary_deductible <= 0:
        return 0.0
    return min((voluntary_deductible / 10000) * 0.1, MAX_DEDUCTIBLE_DISCOUNT)


def compute_vehicle_coverage(inputs: VehicleInputs) -> VehicleResult:
    depreciation = depreciation_rate(inputs.vehicle_age_years)
    idv = inputs.vehicle_value * (1 - depreciation)

    age_multiplier = 1.2 if inputs.vehicle_age_years > 5 else 1.0
    claims_multiplier = 1 + inputs.previous_claims * 0.1
    city_multiplier = 1.15 if inputs.is_metro else 1.0
    discount = deductible_discount(inputs.voluntary_deductible)

    rate = VEHICLE_BASE_RATE * age_multiplier * claims_multiplier * city_multiplier
    rate *= 1 - discount

    return VehicleResult(
        idv=idv,
        estimated_premium=idv * rate,
        factors={
            "depreciation_rate": depreciation,
            "age_multiplier": age_multiplier,
            "claims_multiplier": claims_multiplier,
            "city_multiplier": city_multiplier,
            "deductible_discount": discount,
        },
        premium_rate=rate,
    )
