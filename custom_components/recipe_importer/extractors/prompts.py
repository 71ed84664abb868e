"""
Prompts for recipe extraction with Gemini.
"""
from __future__ import annotations

from ..vocabulary import PREPARATIONS, RECIPE_CATEGORIES, UNITS

UNITS_PROMPT = f"""Available units (CHOOSE FROM THESE ONLY):
  Volume: {", ".join(UNITS["volume"])}
  Weight: {", ".join(UNITS["weight"])}
  Count: {", ".join(UNITS["count"])}
  Items: {", ".join(UNITS["items"])}"""

PREPARATIONS_PROMPT = f"""Available preparations (CHOOSE FROM THESE ONLY - if no exact match, use null):
  {", ".join(PREPARATIONS)}"""

_INGREDIENT_RULES = """For ingredients (CRITICAL):
- EVERY ingredient MUST have a "name" - never leave it empty
- Extract the numeric amount (convert fractions: 1/2 = 0.5, 1/4 = 0.25, 1/3 = 0.33)
- If the amount is missing or unclear, use sensible defaults:
  * Garlic: "clove" unit, 2-4 typical
  * Fresh herbs: "sprig", "bunch" or "handful"
  * Spices and seasonings: "pinch", "dash" or 1 tsp
  * Vegetables: "piece" or a standard weight
  * Canned or packaged items: "can", "jar", "packet"
- ALWAYS match units to the available units above, otherwise use null
- The name has no amount, unit or preparation in it
- Remove parenthetical notes like "(28 ounce)" from the name
- Remove trailing text like "divided", "or to taste", "optional"
- If the preparation does not exactly match an available preparation, use null"""

_METHOD_RULES = """For method steps (VERY IMPORTANT):
- Keep ALL original instruction steps - DO NOT combine or condense them
- For EACH step, create a short descriptive title (3-5 words)
- PRESERVE the COMPLETE original instruction text in "description"
- DO NOT shorten, summarize or paraphrase the instructions
- Titles are action-oriented: "Prepare the sauce", "Brown the meat\""""

_RECIPE_RULES = f"""{UNITS_PROMPT}

{PREPARATIONS_PROMPT}

CRITICAL INSTRUCTIONS:

For title (REQUIRED):
- Extract the recipe name, or create a descriptive one
- NEVER leave it empty

For description:
- Extract the recipe description or introduction
- If there is none, write an engaging 2-3 sentence description

For timing (REQUIRED):
- Convert prep and cook times to minutes ("1 hour 30 minutes" = 90)
- If not stated, estimate from the recipe's complexity
- Use 0 for cook_time in a no-cook recipe

For category:
- Choose ONE of: {", ".join(RECIPE_CATEGORIES)}

{_INGREDIENT_RULES}

{_METHOD_RULES}"""

_NUTRITION_RULES = """For nutrition (ALL FOUR FIELDS REQUIRED):
- calories, and protein, fat and carbohydrates in grams, per serving
- Use nutrition facts from the recipe when given
- Otherwise estimate from the ingredients, their quantities and the
  cooking method using standard USDA values
- Return whole numbers"""

TEXT_PROMPT = f"""You are an expert recipe parser and validator. Extract structured recipe data from the user's text.

{_RECIPE_RULES}

{_NUTRITION_RULES}

If the text is NOT a recipe or lacks sufficient information:
- Set "success" to false
- Explain why in "error_message" (e.g. "This looks like a shopping list, not a recipe")
- Fill the other fields with empty values: "" for strings, 0 for times,
  4 for serves, "main" for category, [] for lists and 0 for nutrition

If the text IS a recipe, set "success" to true and "error_message" to "".

A text is a recipe if it has at least 2-3 ingredients, some cooking or
preparation instructions, and enough context to know what dish is made.
Shopping lists, restaurant menus and food reviews are NOT recipes."""

IMAGE_PROMPT = f"""You are an expert recipe parser and validator. The user sends one or more photos of a recipe (a cookbook page, a recipe card or handwritten notes). Read the text in all photos together as a single recipe and extract structured recipe data.

{_RECIPE_RULES}

{_NUTRITION_RULES}

If the photos do NOT show a recipe, or the text cannot be read:
- Set "success" to false
- Explain why in "error_message" (e.g. "The photo is too blurry to read")
- Fill the other fields with empty values: "" for strings, 0 for times,
  4 for serves, "main" for category, [] for lists and 0 for nutrition

If the photos DO show a recipe, set "success" to true and "error_message" to ""."""

PAGE_PROMPT = f"""You are an expert recipe parser. Extract the recipe from the text of a web page. Ignore navigation, adverts, comments and other page content.

{_RECIPE_RULES}

For nutrition:
- Only fill it in when the page lists nutrition facts, otherwise use null

For image_url:
- A recipe image URL found in the page text, otherwise null

For author:
- The recipe author or creator, otherwise null"""

STRUCTURED_DATA_PROMPT = f"""You are an expert recipe parser. Structure the ingredient and instruction lines of a recipe published as schema.org data.

{UNITS_PROMPT}

{PREPARATIONS_PROMPT}

{_INGREDIENT_RULES}

For category:
- Choose ONE of: {", ".join(RECIPE_CATEGORIES)}
- Use the schema category as a hint

{_METHOD_RULES}
- Return exactly one method step per instruction line"""


def build_structured_data_request(
    name: str,
    description: str | None,
    schema_categories: list[str],
    ingredients: list[str],
    instructions: list[str],
) -> str:
    """Build the user message for structuring JSON-LD recipe lines."""
    lines = [f"Recipe: {name}"]
    if description:
        lines.append(f"Description: {description}")
    lines.append(f"Schema Category: {', '.join(schema_categories) or 'unknown'}")
    lines.append("")
    lines.append("Ingredients:")
    lines.extend(f"{index}. {line}" for index, line in enumerate(ingredients, start=1))
    lines.append("")
    lines.append(
        f"Instructions ({len(instructions)} steps - KEEP ALL {len(instructions)} STEPS):")
    lines.extend(f"{index}. {line}" for index, line in enumerate(instructions, start=1))
    lines.append("")
    lines.append(
        f"IMPORTANT: Return exactly {len(instructions)} method steps. "
        "Copy each instruction text completely into the description field.")
    return "\n".join(lines)
