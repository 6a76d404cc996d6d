from dataclasses import dataclass, asdict, field
from typing import Optional, Dict, Any, Mapping, Union

from .utils import optional_amount, required_amount

CITY_METRO = "metro"
CITY_NON_METRO = "non-metro"
ROOM_PREFERENCES = ("general", "semi-private", "private")


def _city(value: Any) -> str:
    return CITY_METRO if str(value or "").strip().lower() == CITY_METRO else CITY_NON_METRO


def _yes(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() == "yes"


@dataclass(frozen=True)
class LifeInputs:
    age: float
    annual_income: float
    dependents: float = 0.0
    outstanding_loans: float = 0.0
    annual_expenses: float = 0.0
    future_goals: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> Optional["LifeInputs"]:
        """Build inputs from the life form, or ``None`` if age or income is missing."""
        age = required_amount(form.get("age"))
        income = required_amount(form.get("income"))
        optional = [
            optional_amount(form.get(key))
            for key in ("dependents", "loans", "expenses", "goals")
        ]
        if age is None or income is None or any(v is None for v in optional):
            return None
        dependents, loans, expenses, goals = optional
        return cls(
            age=age,
            annual_income=income,
            dependents=dependents,
            outstanding_loans=loans,
            annual_expenses=expenses,
            future_goals=goals,
        )


@dataclass(frozen=True)
class HealthInputs:
    age: float
    family_size: float
    city_type: str = CITY_NON_METRO
    has_pre_existing_condition: bool = False
    room_preference: Optional[str] = None

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> Optional["HealthInputs"]:
        age = required_amount(form.get("age"))
        family_size = required_amount(form.get("family_size"))
        if age is None or family_size is None:
            return None
        room = form.get("room_type") or None
        return cls(
            age=age,
            family_size=family_size,
            city_type=_city(form.get("city")),
            has_pre_existing_condition=_yes(form.get("pre_existing")),
            room_preference=room if room in ROOM_PREFERENCES else None,
        )

    @property
    def is_metro(self) -> bool:
        return self.city_type == CITY_METRO


@dataclass(frozen=True)
class VehicleInputs:
    vehicle_value: float
    vehicle_age_years: float = 0.0
    city_type: str = CITY_NON_METRO
    previous_claims: float = 0.0
    voluntary_deductible: float = 0.0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> Optional["VehicleInputs"]:
        value = required_amount(form.get("vehicle_value"))
        optional = [
            optional_amount(form.get(key))
            for key in ("vehicle_age", "previous_claims", "voluntary_deductible")
        ]
        if value is None or any(v is None for v in optional):
            return None
        vehicle_age, claims, deductible = optional
        return cls(
            vehicle_value=value,
            vehicle_age_years=vehicle_age,
            city_type=_city(form.get("city")),
            previous_claims=claims,
            voluntary_deductible=deductible,
        )

    @property
    def is_metro(self) -> bool:
        return self.city_type == CITY_METRO


@dataclass(frozen=True)
class LifeResult:
    recommended_coverage: float
    estimated_premium: float
    methods: Dict[str, float]
    premium_rate: float
    type: str = field(default="life", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HealthResult:
    recommended_coverage: float
    estimated_premium: float
    factors: Dict[str, float]
    premium_rate: float
    uncapped_coverage: float
    type: str = field(default="health", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class VehicleResult:
    idv: float
    estimated_premium: float
    factors: Dict[str, float]
    premium_rate: float
    type: str = field(default="vehicle", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Results are replaced wholesale on every calculation; nothing is cached.
CalculationResult = Union[LifeResult, HealthResult, VehicleResult]
