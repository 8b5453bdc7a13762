from datetime import date
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

TransportMode = Literal["car", "bus", "train", "plane", "bike", "walk"]
MealType = Literal["vegan", "vegetarian", "pescatarian", "meat_low", "meat_high"]
EnergyType = Literal["electricity", "natural_gas", "heating_oil", "renewable"]
ProductType = Literal["clothing", "electronics", "household", "secondhand"]

# Upper bound for any quantity (km, kWh, currency, servings, passengers).
MAX_QUANTITY = 10**12


class TransportationDetails(BaseModel):
    category: Literal["Transportation"] = "Transportation"
    mode: TransportMode = "car"
    distance: float = Field(default=0.0, ge=0, le=MAX_QUANTITY, description="Distance travelled in km")
    passengers: int = Field(default=1, ge=1, le=MAX_QUANTITY)


class FoodDetails(BaseModel):
    category: Literal["Food"] = "Food"
    meal_type: MealType = "meat_low"
    servings: int = Field(default=1, ge=1, le=MAX_QUANTITY)
    local_sourced: bool = False
    organic: bool = False


class HomeEnergyDetails(BaseModel):
    category: Literal["Home Energy"] = "Home Energy"
    energy_type: EnergyType = "electricity"
    amount: float = Field(default=0.0, ge=0, le=MAX_QUANTITY, description="kWh or m³")
    green_energy: bool = False


class ShoppingDetails(BaseModel):
    category: Literal["Shopping"] = "Shopping"
    product_type: ProductType = "household"
    amount_spent: float = Field(default=0.0, ge=0, le=MAX_QUANTITY, description="Currency units spent")
    sustainable: bool = False


class CustomDetails(BaseModel):
    category: Literal["custom"] = "custom"
    amount: float = Field(default=0.0, ge=0, le=MAX_QUANTITY)
    description: Optional[str] = None


ActivityDetails = Annotated[
    Union[
        TransportationDetails,
        FoodDetails,
        HomeEnergyDetails,
        ShoppingDetails,
        CustomDetails,
    ],
    Field(discriminator="category"),
]


class CalcActivityRequest(BaseModel):
    category: str = Field(..., description="Category name, e.g. 'Transportation'")
    activityType: str = Field(default="", description="Free-text activity label")
    details: Dict[str, Any] = Field(default_factory=dict)


class CalcActivityResponse(BaseModel):
    category: str
    activityType: str
    details: ActivityDetails
    carbonAmount: float = Field(..., description="Footprint in kg CO₂e, 2 decimals")
    pointsEarned: int = Field(..., ge=1)
    defaultedFields: List[str] = Field(default_factory=list)


class FormFieldOption(BaseModel):
    value: str
    label: str


class FormField(BaseModel):
    name: str
    label: str
    type: Literal["select", "number", "checkbox", "text"]
    options: Optional[List[FormFieldOption]] = None
    default: Optional[Any] = None


class LogActivityRequest(BaseModel):
    category_id: int
    activity_type: str = ""
    activity_date: date = Field(..., description="ISO date, e.g. 2025-01-28")
    details: Dict[str, Any] = Field(default_factory=dict)


class LoggedActivity(BaseModel):
    id: Optional[int] = None
    user_id: str
    category_id: int
    category_name: str
    activity_type: str
    activity_date: date
    carbon_amount: float
    points_earned: int
    details: Dict[str, Any]
    defaulted_fields: List[str] = Field(default_factory=list)


class DailySummary(BaseModel):
    date: str
    total_co2: float
    activities_count: int
    daily_co2_target: float
    xp_earned: int
    target_achieved: bool


class ActivityCategory(BaseModel):
    id: int
    name: str
    icon: Optional[str] = None
    description: Optional[str] = None
