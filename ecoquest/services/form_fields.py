from ..models.activity_schema import FormField, FormFieldOption
from .carbon import Category


def _select(name: str, label: str, options: list[tuple[str, str]]) -> FormField:
    return FormField(
        name=name,
        label=label,
        type="select",
        options=[FormFieldOption(value=value, label=text) for value, text in options],
    )


_FORM_FIELDS: dict[Category, list[FormField]] = {
    Category.TRANSPORTATION: [
        _select(
            "mode",
            "Mode of Transport",
            [
                ("car", "Car"),
                ("bus", "Bus"),
                ("train", "Train"),
                ("plane", "Plane"),
                ("bike", "Bicycle"),
                ("walk", "Walking"),
            ],
        ),
        FormField(name="distance", label="Distance (km)", type="number"),
        FormField(name="passengers", label="Number of Passengers", type="number", default=1),
    ],
    Category.FOOD: [
        _select(
            "meal_type",
            "Meal Type",
            [
                ("vegan", "Vegan"),
                ("vegetarian", "Vegetarian"),
                ("pescatarian", "Pescatarian"),
                ("meat_low", "Meat (Low Amount)"),
                ("meat_high", "Meat (High Amount)"),
            ],
        ),
        FormField(name="local_sourced", label="Locally Sourced?", type="checkbox"),
        FormField(name="organic", label="Organic?", type="checkbox"),
        FormField(name="servings", label="Number of Servings", type="number", default=1),
    ],
    Category.HOME_ENERGY: [
        _select(
            "energy_type",
            "Energy Type",
            [
                ("electricity", "Electricity"),
                ("natural_gas", "Natural Gas"),
                ("heating_oil", "Heating Oil"),
                ("renewable", "Renewable Energy"),
            ],
        ),
        FormField(name="amount", label="Amount (kWh or m³)", type="number"),
        FormField(name="green_energy", label="Green Energy Source?", type="checkbox"),
    ],
    Category.SHOPPING: [
        _select(
            "product_type",
            "Product Type",
            [
                ("clothing", "Clothing"),
                ("electronics", "Electronics"),
                ("household", "Household Items"),
                ("secondhand", "Second-hand Items"),
            ],
        ),
        FormField(name="amount_spent", label="Amount Spent ($)", type="number"),
        FormField(name="sustainable", label="Sustainable Product?", type="checkbox"),
    ],
    Category.CUSTOM: [
        FormField(name="description", label="Description", type="text"),
        FormField(name="amount", label="Amount", type="number"),
    ],
}


def form_fields(category: str) -> list[FormField]:
    """Detail fields a client should render for the given category."""
    return [f.model_copy(deep=True) for f in _FORM_FIELDS[Category.from_name(category)]]
