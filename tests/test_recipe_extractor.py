from __future__ import annotations

import base64
import json
import unittest
from unittest.mock import MagicMock

from custom_components.recipe_importer.exceptions import (
    FetchError,
    GenerationError,
    SchemaNotSatisfiedError,
)
from custom_components.recipe_importer.extractors.prompts import (
    PAGE_PROMPT,
    STRUCTURED_DATA_PROMPT,
    TEXT_PROMPT,
)
from custom_components.recipe_importer.extractors.recipe_extractor import (
    INVALID_RESPONSE,
    INVALID_RESPONSE_WITH_PARTIAL,
    MISSING_DETAILS_WITH_PARTIAL,
    NOT_A_RECIPE,
    UNEXPECTED_ERROR,
    RecipeExtractor,
)
from custom_components.recipe_importer.extractors.scraper import FetchedPage
from custom_components.recipe_importer.extractors.url_guard import UrlValidation
from custom_components.recipe_importer.models.result import (
    ExtractionFailure,
    ExtractionIncomplete,
    ExtractionSuccess,
)
from custom_components.recipe_importer.models.schema import (
    PageRecipeCandidate,
    StructuredDataCandidate,
    TextRecipeCandidate,
)

RECIPE_TEXT = (
    "Pancakes. Whisk 200 grams of flour with two eggs and 300 ml milk, "
    "then fry ladlefuls in a hot buttered pan until golden on both sides."
)
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
PAGE_URL = "https://example.com/pancakes"

INGREDIENTS = [
    {"name": "flour", "amount": 200, "unit": "grams", "preparation": None},
    {"name": "eggs", "amount": 2, "unit": None, "preparation": "beat"},
]
METHOD = [{"title": "Make the batter", "description": "Whisk everything."}]
NUTRITION = {"calories": 310.4, "protein": 9, "fat": 8.5, "carbohydrates": 48}


def _text_candidate(**overrides) -> TextRecipeCandidate:
    return TextRecipeCandidate.model_validate({
        "success": True,
        "error_message": "",
        "title": "Pancakes",
        "description": "Fluffy pancakes.",
        "prep_time": 10,
        "cook_time": 15,
        "serves": 4,
        "category": "breakfast",
        "ingredients": INGREDIENTS,
        "method": METHOD,
        "nutrition": NUTRITION,
        **overrides,
    })


def _page_candidate(**overrides) -> PageRecipeCandidate:
    return PageRecipeCandidate.model_validate({
        "title": "Pancakes",
        "description": None,
        "prep_time": 10,
        "cook_time": 15,
        "serves": 2,
        "category": "breakfast",
        "ingredients": INGREDIENTS,
        "method": METHOD,
        "nutrition": None,
        "image_url": "https://example.com/from-text.jpg",
        "author": "Jo Cook",
        **overrides,
    })


def _html(jsonld=None, body="") -> str:
    head = '<meta property="og:image" content="https://example.com/og.jpg">'
    if jsonld is not None:
        head += f'<script type="application/ld+json">{json.dumps(jsonld)}</script>'
    return f"<html><head>{head}</head><body>{body}</body></html>"


JSONLD = {
    "@type": "Recipe",
    "name": "Pancakes",
    "prepTime": "PT10M",
    "cookTime": "PT15M",
    "recipeYield": "4 servings",
    "recipeCategory": "Breakfast",
    "recipeIngredient": ["200g flour", "2 eggs"],
    "recipeInstructions": ["Whisk everything.", "Fry until golden."],
}


class ExtractorTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.client = MagicMock()
        self.fetcher = MagicMock()
        self.extractor = RecipeExtractor(
            self.client,
            fetcher=self.fetcher,
            url_guard=lambda url: UrlValidation(valid=True, url=url),
        )

    def _serve(self, html: str) -> None:
        self.fetcher.fetch.return_value = FetchedPage(
            url=PAGE_URL, html=html, content_type="text/html")


class ExtractFromTextTests(ExtractorTestCase):
    def test_success(self) -> None:
        self.client.generate.return_value = _text_candidate()

        result = self.extractor.extract_from_text(f"  {RECIPE_TEXT}  ")

        self.assertIsInstance(result, ExtractionSuccess)
        recipe = result.recipe
        self.assertEqual(recipe.title, "Pancakes")
        self.assertEqual(recipe.ingredients[0].unit, "g")
        self.assertEqual(recipe.ingredients[1].preparation, "beaten")
        self.assertEqual(recipe.nutrition.calories, 311)
        self.assertEqual(recipe.nutrition.fat, 9)
        model, prompt, contents = self.client.generate.call_args.args
        self.assertIs(model, TextRecipeCandidate)
        self.assertEqual(prompt, TEXT_PROMPT)
        self.assertTrue(contents[0].endswith(RECIPE_TEXT))

    def test_model_says_not_a_recipe(self) -> None:
        self.client.generate.return_value = _text_candidate(
            success=False, error_message="This is a shopping list.")
        result = self.extractor.extract_from_text(RECIPE_TEXT)
        self.assertEqual(result, ExtractionFailure(error="This is a shopping list."))

        self.client.generate.return_value = _text_candidate(success=False, error_message="")
        self.assertEqual(self.extractor.extract_from_text(RECIPE_TEXT).error, NOT_A_RECIPE)

    def test_missing_method_is_incomplete(self) -> None:
        self.client.generate.return_value = _text_candidate(method=[])

        result = self.extractor.extract_from_text(RECIPE_TEXT)

        self.assertIsInstance(result, ExtractionIncomplete)
        self.assertEqual(result.error, MISSING_DETAILS_WITH_PARTIAL)
        self.assertEqual(result.partial_recipe.title, "Pancakes")
        self.assertIsNone(result.partial_recipe.method)

    def test_schema_failure_salvages_partial(self) -> None:
        self.client.generate.side_effect = SchemaNotSatisfiedError(
            "bad", raw={"title": "Soup", "serves": 2, "category": "supper"})

        result = self.extractor.extract_from_text(RECIPE_TEXT)

        self.assertIsInstance(result, ExtractionIncomplete)
        self.assertEqual(result.error, INVALID_RESPONSE_WITH_PARTIAL)
        self.assertEqual(result.partial_recipe.serves, 2)
        self.assertIsNone(result.partial_recipe.category)

    def test_schema_failure_without_usable_fields(self) -> None:
        self.client.generate.side_effect = SchemaNotSatisfiedError("bad", raw="not json")

        result = self.extractor.extract_from_text(RECIPE_TEXT)

        self.assertEqual(result, ExtractionIncomplete(error=INVALID_RESPONSE))

    def test_generation_failure(self) -> None:
        self.client.generate.side_effect = GenerationError("Gemini API error: quota exceeded")
        result = self.extractor.extract_from_text(RECIPE_TEXT)
        self.assertEqual(result, ExtractionFailure(error="Gemini API error: quota exceeded"))

    def test_unexpected_error_is_contained(self) -> None:
        self.client.generate.side_effect = RuntimeError("boom")
        result = self.extractor.extract_from_text(RECIPE_TEXT)
        self.assertEqual(result, ExtractionFailure(error=UNEXPECTED_ERROR))

    def test_input_limits(self) -> None:
        cases = {
            "   ": "Please enter some recipe text",
            "Pancakes with flour.": "We need a bit more information",
            "x" * 6001: "under 6,000 characters",
        }
        for text, message in cases.items():
            with self.subTest(length=len(text)):
                result = self.extractor.extract_from_text(text)
                self.assertIsInstance(result, ExtractionFailure)
                self.assertIn(message, result.error)
        self.client.generate.assert_not_called()


class ExtractFromImagesTests(ExtractorTestCase):
    def test_success_with_several_pages(self) -> None:
        self.client.generate.return_value = _text_candidate()
        encoded = base64.b64encode(PNG).decode()

        result = self.extractor.extract_from_images([f"data:image/png;base64,{encoded}", PNG])

        self.assertIsInstance(result, ExtractionSuccess)
        _model, _prompt, contents = self.client.generate.call_args.args
        self.assertEqual(len(contents), 3)
        self.assertIn("these recipe page images", contents[0])

    def test_image_count_limits(self) -> None:
        self.assertIsInstance(self.extractor.extract_from_images([]), ExtractionFailure)
        result = self.extractor.extract_from_images([PNG] * 6)
        self.assertIn("no more than 5 images", result.error)
        self.client.generate.assert_not_called()

    def test_unreadable_image(self) -> None:
        result = self.extractor.extract_from_images([PNG, b"not an image"])
        self.assertIsInstance(result, ExtractionFailure)
        self.assertIn("Image 2 could not be read", result.error)
        self.client.generate.assert_not_called()


class ExtractFromUrlTests(ExtractorTestCase):
    def test_unsafe_url_is_not_fetched(self) -> None:
        extractor = RecipeExtractor(
            self.client, fetcher=self.fetcher,
            url_guard=lambda url: UrlValidation(valid=False, reason="non-public address"))

        result = extractor.extract_from_url("http://192.168.1.1/")

        self.assertIsInstance(result, ExtractionFailure)
        self.assertIn("non-public address", result.error)
        self.fetcher.fetch.assert_not_called()

    def test_structured_data_with_model_structuring(self) -> None:
        self._serve(_html(JSONLD))
        self.client.generate.return_value = StructuredDataCandidate.model_validate({
            "ingredients": INGREDIENTS, "category": "dessert", "method": METHOD})

        result = self.extractor.extract_from_url(PAGE_URL)

        self.assertIsInstance(result, ExtractionSuccess)
        recipe = result.recipe
        self.assertEqual(recipe.category, "dessert")
        self.assertEqual(recipe.method[0].title, "Make the batter")
        self.assertEqual((recipe.prep_time, recipe.cook_time, recipe.serves), (10, 15, 4))
        self.assertEqual(recipe.original_url, PAGE_URL)
        model, prompt, _contents = self.client.generate.call_args.args
        self.assertIs(model, StructuredDataCandidate)
        self.assertEqual(prompt, STRUCTURED_DATA_PROMPT)

    def test_structured_data_falls_back_to_rule_based_parsing(self) -> None:
        self._serve(_html(JSONLD))
        self.client.generate.side_effect = GenerationError("timeout")

        result = self.extractor.extract_from_url(PAGE_URL)

        self.assertIsInstance(result, ExtractionSuccess)
        recipe = result.recipe
        self.assertEqual(recipe.category, "breakfast")
        self.assertEqual([step.title for step in recipe.method], ["Step 1", "Step 2"])
        self.assertEqual(recipe.ingredients[0].unit, "g")

    def test_page_text_path(self) -> None:
        self._serve(_html(body="<h1>Pancakes</h1>" + "<p>Whisk flour, eggs and milk.</p>" * 5))
        self.client.generate.return_value = _page_candidate()

        result = self.extractor.extract_from_url(PAGE_URL)

        self.assertIsInstance(result, ExtractionSuccess)
        recipe = result.recipe
        self.assertEqual(recipe.image_url, "https://example.com/og.jpg")
        self.assertEqual(recipe.original_author, "Jo Cook")
        self.assertIsNone(recipe.nutrition)
        self.assertIsNone(recipe.description)
        model, prompt, contents = self.client.generate.call_args.args
        self.assertIs(model, PageRecipeCandidate)
        self.assertEqual(prompt, PAGE_PROMPT)
        self.assertIn("Whisk flour, eggs and milk.", contents[0])

    def test_page_text_without_ingredients_is_incomplete(self) -> None:
        self._serve(_html(body="<p>Whisk flour, eggs and milk.</p>" * 5))
        self.client.generate.return_value = _page_candidate(ingredients=[])

        result = self.extractor.extract_from_url(PAGE_URL)

        self.assertIsInstance(result, ExtractionIncomplete)
        self.assertEqual(result.partial_recipe.title, "Pancakes")

    def test_page_with_too_little_text(self) -> None:
        self._serve(_html(body="<p>Nothing here.</p>"))
        result = self.extractor.extract_from_url(PAGE_URL)
        self.assertIn("Could not read enough text", result.error)
        self.client.generate.assert_not_called()

    def test_fetch_error(self) -> None:
        self.fetcher.fetch.side_effect = FetchError("Failed to fetch https://example.com: HTTP 503")
        result = self.extractor.extract_from_url(PAGE_URL)
        self.assertEqual(result, ExtractionFailure(
            error="Failed to fetch https://example.com: HTTP 503"))
