"""Carbon footprint and reward points calculator.

Everything here is pure: no I/O, no shared state. Raw form values coming from
clients are normalized by :func:`parse_details` into one of the typed detail
variants, and the two calculators dispatch over :class:`Category`.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel

from ..models.activity_schema import (
    MAX_QUANTITY,
    CustomDetails,
    FoodDetails,
    HomeEnergyDetails,
    ShoppingDetails,
    TransportationDetails,
)

logger = logging.getLogger(__name__)


class Category(str, Enum):
    TRANSPORTATION = "Transportation"
    FOOD = "Food"
    HOME_ENERGY = "Home Energy"
    SHOPPING = "Shopping"
    CUSTOM = "custom"

    @classmethod
    def from_name(cls, name: Any) -> "Category":
        """Map a category name to its member; unknown names are custom."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            return cls.CUSTOM


# kg CO2e per km
TRANSPORT_FACTORS = {
    "car": 0.192,
    "bus": 0.105,
    "train": 0.041,
    "plane": 0.255,
    "bike": 0.0,
    "walk": 0.0,
}

# kg CO2e per serving
MEAL_EMISSIONS = {
    "vegan": 0.5,
    "vegetarian": 1.2,
    "pescatarian": 2.0,
    "meat_low": 3.5,
    "meat_high": 7.0,
}

# kg CO2e per kWh (or m³ for gas)
ENERGY_FACTORS = {
    "electricity": 0.233,
    "natural_gas": 0.184,
    "heating_oil": 0.268,
    "renewable": 0.025,
}

# kg CO2e per currency unit spent
SHOPPING_FACTORS = {
    "clothing": 0.5,
    "electronics": 0.7,
    "household": 0.3,
    "secondhand": 0.1,
}

MEAL_POINTS = {
    "vegan": 25,
    "vegetarian": 20,
    "pescatarian": 15,
    "meat_low": 10,
    "meat_high": 5,
}

LOCAL_SOURCED_FACTOR = 0.9
ORGANIC_FACTOR = 0.95
GREEN_ENERGY_FACTOR = 0.2
SUSTAINABLE_PRODUCT_FACTOR = 0.7

_VARIANTS = {
    Category.TRANSPORTATION: TransportationDetails,
    Category.FOOD: FoodDetails,
    Category.HOME_ENERGY: HomeEnergyDetails,
    Category.SHOPPING: ShoppingDetails,
    Category.CUSTOM: CustomDetails,
}

_TRUE_STRINGS = {"true", "1", "yes", "on", "y"}
_FALSE_STRINGS = {"false", "0", "no", "off", "n", ""}


@dataclass(frozen=True)
class ParsedDetails:
    details: BaseModel
    defaulted_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class ActivityCalculation:
    category: Category
    activity_type: str
    details: BaseModel
    carbon_amount: float
    points_earned: int
    defaulted_fields: tuple[str, ...] = field(default_factory=tuple)


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class _DetailReader:
    """Reads raw form values, remembering every field it had to default."""

    def __init__(self, raw: Mapping[str, Any]) -> None:
        self.raw = raw
        self.defaulted: list[str] = []

    def _default(self, name: str, default: Any) -> Any:
        if name in self.raw:
            logger.debug("Defaulting %s=%r to %r", name, self.raw[name], default)
        self.defaulted.append(name)
        return default

    def number(self, name: str, default: float = 0.0) -> float:
        value = _to_float(self.raw.get(name))
        if value is None or value < 0 or value > MAX_QUANTITY:
            return self._default(name, default)
        return value

    def count(self, name: str) -> int:
        value = _to_float(self.raw.get(name))
        if value is None or not 1 <= value <= MAX_QUANTITY:
            return self._default(name, 1)
        return int(value)

    def choice(self, name: str, choices: Mapping[str, Any], default: str) -> str:
        value = self.raw.get(name)
        key = value.strip().lower() if isinstance(value, str) else None
        if key in choices:
            return key
        return self._default(name, default)

    def flag(self, name: str) -> bool:
        value = self.raw.get(name)
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _TRUE_STRINGS:
                return True
            if key in _FALSE_STRINGS:
                return False
            return self._default(name, False)
        number = _to_float(value)
        if number is None:
            return self._default(name, False)
        return number != 0


def parse_details(category: Any, raw: Mapping[str, Any] | BaseModel | None) -> ParsedDetails:
    """Convert untyped detail input into the typed variant for ``category``.

    Never raises on bad values: missing or unparsable fields fall back to the
    category defaults and are listed in ``defaulted_fields``.
    """
    kind = Category.from_name(category)
    if isinstance(raw, _VARIANTS[kind]):
        return ParsedDetails(details=raw)
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    reader = _DetailReader(raw or {})

    if kind is Category.TRANSPORTATION:
        details: BaseModel = TransportationDetails(
            mode=reader.choice("mode", TRANSPORT_FACTORS, "car"),
            distance=reader.number("distance"),
            passengers=reader.count("passengers"),
        )
    elif kind is Category.FOOD:
        details = FoodDetails(
            meal_type=reader.choice("meal_type", MEAL_EMISSIONS, "meat_low"),
            servings=reader.count("servings"),
            local_sourced=reader.flag("local_sourced"),
            organic=reader.flag("organic"),
        )
    elif kind is Category.HOME_ENERGY:
        details = HomeEnergyDetails(
            energy_type=reader.choice("energy_type", ENERGY_FACTORS, "electricity"),
            amount=reader.number("amount"),
            green_energy=reader.flag("green_energy"),
        )
    elif kind is Category.SHOPPING:
        details = ShoppingDetails(
            product_type=reader.choice("product_type", SHOPPING_FACTORS, "household"),
            amount_spent=reader.number("amount_spent"),
            sustainable=reader.flag("sustainable"),
        )
    elif kind is Category.CUSTOM:
        description = (raw or {}).get("description")
        details = CustomDetails(
            amount=reader.number("amount"),
            description=str(description) if description is not None else None,
        )
    else:
        raise AssertionError(f"Unhandled category: {kind!r}")

    return ParsedDetails(details=details, defaulted_fields=tuple(reader.defaulted))


def round_carbon(value: float) -> float:
    """Round half away from zero to 2 decimals, clamped at zero."""
    if value <= 0:
        return 0.0
    return math.floor(value * 100 + 0.5) / 100


def _round_points(value: float) -> int:
    return max(1, math.floor(value + 0.5))


def _footprint(kind: Category, details: Any) -> float:
    if kind is Category.TRANSPORTATION:
        emissions = details.distance * TRANSPORT_FACTORS[details.mode]
        # carpooling credit
        if details.mode == "car" and details.passengers > 1:
            emissions = emissions / details.passengers
        return emissions
    if kind is Category.FOOD:
        emissions = MEAL_EMISSIONS[details.meal_type] * details.servings
        if details.local_sourced:
            emissions *= LOCAL_SOURCED_FACTOR
        if details.organic:
            emissions *= ORGANIC_FACTOR
        return emissions
    if kind is Category.HOME_ENERGY:
        emissions = details.amount * ENERGY_FACTORS[details.energy_type]
        if details.green_energy:
            emissions *= GREEN_ENERGY_FACTOR
        return emissions
    if kind is Category.SHOPPING:
        emissions = details.amount_spent * SHOPPING_FACTORS[details.product_type]
        if details.sustainable:
            emissions *= SUSTAINABLE_PRODUCT_FACTOR
        return emissions
    if kind is Category.CUSTOM:
        return details.amount
    raise AssertionError(f"Unhandled category: {kind!r}")


def _points(kind: Category, details: Any) -> float:
    if kind is Category.TRANSPORTATION:
        if details.mode in ("bike", "walk"):
            return details.distance * 2
        if details.mode in ("bus", "train"):
            return 15
        if details.mode == "car" and details.passengers > 1:
            return 10 + (details.passengers - 1) * 5
        if details.mode == "plane":
            return 5
        return 10
    if kind is Category.FOOD:
        points = MEAL_POINTS[details.meal_type]
        if details.local_sourced:
            points += 5
        if details.organic:
            points += 5
        return points
    if kind is Category.HOME_ENERGY:
        if details.energy_type == "renewable":
            return 25
        if details.green_energy:
            return 20
        return 10
    if kind is Category.SHOPPING:
        if details.product_type == "secondhand":
            return 20
        if details.sustainable:
            return 15
        return 5
    if kind is Category.CUSTOM:
        return 5
    raise AssertionError(f"Unhandled category: {kind!r}")


def compute_footprint(category: Any, activity_type: str, details: Any) -> float:
    """Footprint in kg CO2e for one activity, rounded to 2 decimals."""
    kind = Category.from_name(category)
    parsed = parse_details(kind, details)
    return round_carbon(_footprint(kind, parsed.details))


def compute_points(
    category: Any,
    activity_type: str,
    details: Any,
    carbon_amount: float | None = None,
) -> int:
    """Reward points for one activity, always at least 1.

    ``carbon_amount`` is accepted for callers that already computed it but no
    formula depends on it.
    """
    kind = Category.from_name(category)
    parsed = parse_details(kind, details)
    return _round_points(_points(kind, parsed.details))


def calculate_activity(category: Any, activity_type: str, details: Any) -> ActivityCalculation:
    kind = Category.from_name(category)
    parsed = parse_details(kind, details)
    carbon_amount = compute_footprint(kind, activity_type, parsed.details)
    points = compute_points(kind, activity_type, parsed.details, carbon_amount)
    if parsed.defaulted_fields:
        logger.debug("Activity %s/%s defaulted fields: %s", kind.value, activity_type, parsed.defaulted_fields)
    return ActivityCalculation(
        category=kind,
        activity_type=activity_type,
        details=parsed.details,
        carbon_amount=carbon_amount,
        points_earned=points,
        defaulted_fields=parsed.defaulted_fields,
    )
