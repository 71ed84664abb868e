from __future__ import annotations

import json
import unittest

from bs4 import BeautifulSoup

from custom_components.recipe_importer.models.schema import StructuredDataCandidate
from custom_components.recipe_importer.parsers.jsonld_parser import (
    SchemaOrgRecipe,
    build_recipe_from_schema,
    find_recipe_jsonld,
    parse_ingredient_line,
)

RECIPE_JSONLD = {
    "@context": "https://schema.org",
    "@type": "Recipe",
    "name": "Banana Bread",
    "description": "Moist &amp; easy.",
    "image": [{"@type": "ImageObject", "url": "https://example.com/bread.jpg"}],
    "author": [{"@type": "Person", "name": "Jane Baker"}],
    "datePublished": "2024-03-01",
    "prepTime": "PT15M",
    "cookTime": "PT1H",
    "recipeYield": ["8", "8 slices"],
    "recipeCategory": "Dessert",
    "recipeIngredient": ["3 ripe bananas", "250g flour", "1/2 cup butter, melted"],
    "recipeInstructions": [
        {"@type": "HowToSection", "name": "Batter", "itemListElement": [
            {"@type": "HowToStep", "text": "Mash the bananas."},
            {"@type": "HowToStep", "text": "Stir in the flour."},
        ]},
        {"@type": "HowToStep", "name": "Bake for an hour."},
    ],
    "nutrition": {
        "@type": "NutritionInformation",
        "calories": "320 kcal",
        "proteinContent": "5 g",
        "fatContent": "12.5 g",
        "carbohydrateContent": "48 g",
    },
    "aggregateRating": {"@type": "AggregateRating", "ratingValue": "4.7", "reviewCount": "132"},
}


def _page(*scripts: str) -> BeautifulSoup:
    body = "".join(
        f'<script type="application/ld+json">{script}</script>' for script in scripts)
    return BeautifulSoup(f"<html><head>{body}</head><body></body></html>", "html.parser")


class ParseIngredientLineTests(unittest.TestCase):
    def test_compact_quantity_and_unit(self) -> None:
        ingredient = parse_ingredient_line("250g flour")
        self.assertEqual((ingredient.name, ingredient.amount, ingredient.unit),
                         ("flour", 250, "g"))

    def test_mixed_fraction(self) -> None:
        ingredient = parse_ingredient_line("1 1/2 cups sugar")
        self.assertEqual((ingredient.name, ingredient.amount, ingredient.unit),
                         ("sugar", 1.5, "cups"))

    def test_unicode_fraction(self) -> None:
        ingredient = parse_ingredient_line("½ tsp salt")
        self.assertEqual((ingredient.name, ingredient.amount, ingredient.unit),
                         ("salt", 0.5, "tsp"))

    def test_quantity_without_unit(self) -> None:
        ingredient = parse_ingredient_line("2 eggs")
        self.assertEqual((ingredient.name, ingredient.amount), ("eggs", 2))
        self.assertIsNone(ingredient.unit)

    def test_trailing_preparation(self) -> None:
        ingredient = parse_ingredient_line("1 cup butter, softened")
        self.assertEqual(ingredient.name, "butter")
        self.assertEqual(ingredient.unit, "cups")
        self.assertEqual(ingredient.preparation, "softened")

    def test_unknown_trailing_text_stays_in_name(self) -> None:
        ingredient = parse_ingredient_line("2 cloves garlic, from the garden")
        self.assertEqual(ingredient.name, "garlic, from the garden")
        self.assertEqual(ingredient.unit, "clove")
        self.assertIsNone(ingredient.preparation)

    def test_german_unit_first(self) -> None:
        ingredient = parse_ingredient_line("TL Salz 0.5")
        self.assertEqual((ingredient.name, ingredient.amount, ingredient.unit),
                         ("Salz", 0.5, "tsp"))

    def test_name_then_quantity(self) -> None:
        ingredient = parse_ingredient_line("Große Zwiebel(n) 1")
        self.assertEqual((ingredient.name, ingredient.amount), ("Große Zwiebel(n)", 1))

    def test_plain_name(self) -> None:
        ingredient = parse_ingredient_line("salt")
        self.assertEqual(ingredient.model_dump(exclude_none=True), {"name": "salt"})


class FindRecipeJsonLdTests(unittest.TestCase):
    def test_top_level_object(self) -> None:
        recipe = find_recipe_jsonld(_page(json.dumps(RECIPE_JSONLD)))
        self.assertEqual(recipe["name"], "Banana Bread")

    def test_array_and_type_list(self) -> None:
        item = {**RECIPE_JSONLD, "@type": ["Recipe", "NewsArticle"]}
        recipe = find_recipe_jsonld(_page(json.dumps([{"@type": "WebSite"}, item])))
        self.assertEqual(recipe["name"], "Banana Bread")

    def test_graph_container(self) -> None:
        graph = {"@context": "https://schema.org",
                 "@graph": [{"@type": "WebPage"}, RECIPE_JSONLD]}
        recipe = find_recipe_jsonld(_page(json.dumps(graph)))
        self.assertEqual(recipe["name"], "Banana Bread")

    def test_malformed_scripts_are_skipped(self) -> None:
        recipe = find_recipe_jsonld(_page("{not json", "", json.dumps(RECIPE_JSONLD)))
        self.assertEqual(recipe["name"], "Banana Bread")

    def test_no_recipe(self) -> None:
        self.assertIsNone(find_recipe_jsonld(_page(json.dumps({"@type": "Article"}))))
        self.assertIsNone(find_recipe_jsonld(_page()))


class SchemaOrgRecipeTests(unittest.TestCase):
    def test_from_jsonld(self) -> None:
        schema = SchemaOrgRecipe.from_jsonld(RECIPE_JSONLD)

        self.assertEqual(schema.name, "Banana Bread")
        self.assertEqual(schema.description, "Moist & easy.")
        self.assertEqual(schema.image, "https://example.com/bread.jpg")
        self.assertEqual(schema.author, "Jane Baker")
        self.assertEqual(schema.recipe_yield, "8")
        self.assertEqual(schema.category, ["Dessert"])
        self.assertEqual(schema.instructions, [
            "Mash the bananas.", "Stir in the flour.", "Bake for an hour."])
        self.assertEqual(schema.rating.value, "4.7")
        self.assertEqual(schema.rating.count, 132)
        self.assertNotIn("@type", schema.nutrition)

    def test_unexpected_types_are_ignored(self) -> None:
        schema = SchemaOrgRecipe.from_jsonld({
            "@type": "Recipe",
            "name": "Odd",
            "prepTime": 15,
            "recipeYield": {"@type": "QuantitativeValue", "value": 6},
            "recipeInstructions": "Mix.\nBake.\n",
            "author": "Chef",
            "nutrition": "lots",
        })
        self.assertIsNone(schema.prep_time)
        self.assertEqual(schema.recipe_yield, "6")
        self.assertEqual(schema.instructions, ["Mix.", "Bake."])
        self.assertEqual(schema.author, "Chef")
        self.assertIsNone(schema.nutrition)
        self.assertIsNone(schema.rating)


class BuildRecipeFromSchemaTests(unittest.TestCase):
    def test_fallback_without_model_structuring(self) -> None:
        schema = SchemaOrgRecipe.from_jsonld(RECIPE_JSONLD)
        recipe = build_recipe_from_schema(schema, original_url="https://example.com/bread")

        self.assertEqual(recipe.title, "Banana Bread")
        self.assertEqual(recipe.prep_time, 15)
        self.assertEqual(recipe.cook_time, 60)
        self.assertEqual(recipe.serves, 8)
        self.assertEqual(recipe.category, "dessert")
        self.assertEqual([step.title for step in recipe.method],
                         ["Step 1", "Step 2", "Step 3"])
        self.assertEqual(recipe.method[0].description, "Mash the bananas.")
        self.assertEqual(recipe.ingredients[2].preparation, "melted")
        self.assertEqual(recipe.nutrition.fat, 13)
        self.assertEqual(recipe.original_url, "https://example.com/bread")
        self.assertEqual(recipe.original_author, "Jane Baker")
        self.assertEqual(recipe.original_published_date, "2024-03-01")

    def test_with_model_structuring(self) -> None:
        schema = SchemaOrgRecipe.from_jsonld(RECIPE_JSONLD)
        structured = StructuredDataCandidate.model_validate({
            "ingredients": [
                {"name": "bananas", "amount": 3, "unit": None, "preparation": "mash"},
                {"name": "flour", "amount": 250, "unit": "grams", "preparation": None},
            ],
            "category": "breakfast",
            "method": [{"title": "Make the batter", "description": "Mash and stir."}],
        })
        recipe = build_recipe_from_schema(schema, structured)

        self.assertEqual(recipe.category, "breakfast")
        self.assertEqual(recipe.ingredients[0].preparation, "mashed")
        self.assertEqual(recipe.ingredients[1].unit, "g")
        self.assertEqual(recipe.method[0].title, "Make the batter")

    def test_incomplete_nutrition_is_absent(self) -> None:
        item = {**RECIPE_JSONLD, "nutrition": {"calories": "300"}}
        recipe = build_recipe_from_schema(SchemaOrgRecipe.from_jsonld(item))
        self.assertIsNone(recipe.nutrition)
