"""Canonical vocabularies for recipe fields.

Units, preparations and categories are stored as closed sets of tokens.
Free-text values coming from a model or a web page are mapped onto these
tokens through the synonym tables below; anything that does not map is
dropped rather than stored.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Literal, get_args

RecipeCategory = Literal[
    "main",
    "dessert",
    "snack",
    "appetizer",
    "side",
    "beverage",
    "breakfast",
    "lunch",
    "dinner",
]

RECIPE_CATEGORIES: tuple[str, ...] = get_args(RecipeCategory)

# Units grouped by kind
UNITS = MappingProxyType({
    "volume": ("cups", "tsp", "tbsp", "fl oz", "pt", "qt", "gal", "ml", "l"),
    "weight": ("lbs", "oz", "g", "kg", "mg"),
    "count": ("pinch", "dash", "handful", "drop"),
    "items": (
        "piece", "clove", "slice", "sheet", "sprig", "stalk", "stem",
        "head", "bunch", "bulb", "wedge", "cube", "strip", "fillet",
        "leaf", "can", "jar", "packet", "package", "container", "bottle",
        "bag", "box", "loaf", "stick", "square", "round", "breast",
        "thigh", "leg", "rack",
    ),
})

UNITS_FLAT: tuple[str, ...] = tuple(
    unit for group in UNITS.values() for unit in group)

PREPARATIONS: tuple[str, ...] = (
    "chopped",
    "finely chopped",
    "roughly chopped",
    "rough chop",
    "diced",
    "finely diced",
    "sliced",
    "thinly sliced",
    "thickly sliced",
    "julienned",
    "brunoise",
    "minced",
    "grated",
    "finely grated",
    "shredded",
    "cubed",
    "quartered",
    "halved",
    "whole",
    "crushed",
    "mashed",
    "pureed",
    "at room temperature",
    "chilled",
    "warmed",
    "softened",
    "melted",
    "beaten",
    "whipped",
    "folded",
    "kneaded",
    "rolled",
    "pressed",
    "strained",
    "drained",
    "rinsed",
    "peeled",
    "trimmed",
    "seeded",
    "cored",
    "stemmed",
    "zested",
    "de-boned",
    "filleted",
    "butterflied",
    "blanched",
    "toasted",
    "roasted",
    "caramelized",
    "sautéed",
    "fried",
    "poached",
    "grilled",
    "boiled",
    "steamed",
    "smoked",
    "frozen",
    "defrosted",
)

# Common spellings, plurals and abbreviations -> canonical unit
UNIT_SYNONYMS = MappingProxyType({
    # Volume
    "cup": "cups",
    "c": "cups",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsps": "tsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbsps": "tbsp",
    "tbs": "tbsp",
    "fluid ounce": "fl oz",
    "fluid ounces": "fl oz",
    "fl. oz": "fl oz",
    "floz": "fl oz",
    "pint": "pt",
    "pints": "pt",
    "quart": "qt",
    "quarts": "qt",
    "gallon": "gal",
    "gallons": "gal",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    # Weight
    "pound": "lbs",
    "pounds": "lbs",
    "lb": "lbs",
    "ounce": "oz",
    "ounces": "oz",
    "gram": "g",
    "grams": "g",
    "gramme": "g",
    "grammes": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kilogramme": "kg",
    "kilogrammes": "kg",
    "kgs": "kg",
    "milligram": "mg",
    "milligrams": "mg",
    # Count
    "pinches": "pinch",
    "dashes": "dash",
    "handfuls": "handful",
    "drops": "drop",
    # Items
    "pieces": "piece",
    "pcs": "piece",
    "pc": "piece",
    "cloves": "clove",
    "slices": "slice",
    "sheets": "sheet",
    "sprigs": "sprig",
    "stalks": "stalk",
    "stems": "stem",
    "heads": "head",
    "bunches": "bunch",
    "bulbs": "bulb",
    "wedges": "wedge",
    "cubes": "cube",
    "strips": "strip",
    "fillets": "fillet",
    "leaves": "leaf",
    "cans": "can",
    "tins": "can",
    "tin": "can",
    "jars": "jar",
    "packets": "packet",
    "pkts": "packet",
    "packages": "package",
    "pkgs": "package",
    "containers": "container",
    "bottles": "bottle",
    "bags": "bag",
    "boxes": "box",
    "loaves": "loaf",
    "sticks": "stick",
    "squares": "square",
    "rounds": "round",
    "breasts": "breast",
    "thighs": "thigh",
    "legs": "leg",
    "racks": "rack",
})

# Base verb forms and alternate spellings -> canonical preparation
PREPARATION_SYNONYMS = MappingProxyType({
    "chop": "chopped",
    "finely chop": "finely chopped",
    "roughly chop": "roughly chopped",
    "dice": "diced",
    "finely dice": "finely diced",
    "slice": "sliced",
    "thinly slice": "thinly sliced",
    "thickly slice": "thickly sliced",
    "julienne": "julienned",
    "mince": "minced",
    "grate": "grated",
    "finely grate": "finely grated",
    "shred": "shredded",
    "cube": "cubed",
    "quarter": "quartered",
    "halve": "halved",
    "crush": "crushed",
    "mash": "mashed",
    "puree": "pureed",
    "purée": "pureed",
    "puréed": "pureed",
    "room temperature": "at room temperature",
    "chill": "chilled",
    "warm": "warmed",
    "soften": "softened",
    "melt": "melted",
    "beat": "beaten",
    "whip": "whipped",
    "fold": "folded",
    "knead": "kneaded",
    "roll": "rolled",
    "press": "pressed",
    "strain": "strained",
    "drain": "drained",
    "rinse": "rinsed",
    "peel": "peeled",
    "trim": "trimmed",
    "seed": "seeded",
    "deseed": "seeded",
    "de-seed": "seeded",
    "core": "cored",
    "stem": "stemmed",
    "zest": "zested",
    "debone": "de-boned",
    "de-bone": "de-boned",
    "deboned": "de-boned",
    "fillet": "filleted",
    "butterfly": "butterflied",
    "blanch": "blanched",
    "toast": "toasted",
    "roast": "roasted",
    "caramelize": "caramelized",
    "caramelise": "caramelized",
    "caramelised": "caramelized",
    "sauté": "sautéed",
    "saute": "sautéed",
    "sauteed": "sautéed",
    "fry": "fried",
    "poach": "poached",
    "grill": "grilled",
    "boil": "boiled",
    "steam": "steamed",
    "smoke": "smoked",
    "freeze": "frozen",
    "defrost": "defrosted",
    "thaw": "defrosted",
    "thawed": "defrosted",
})

# Category keywords in priority order; the first keyword found wins
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("breakfast", ("breakfast",)),
    ("lunch", ("lunch",)),
    ("dinner", ("dinner",)),
    ("dessert", ("dessert",)),
    ("appetizer", ("appetizer",)),
    ("snack", ("snack",)),
    ("side", ("side",)),
    ("beverage", ("beverage", "drink")),
)

DEFAULT_CATEGORY = "main"
