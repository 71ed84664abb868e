from __future__ import annotations

import unittest

from custom_components.recipe_importer.parsers.partial import extract_partial_recipe


class ExtractPartialRecipeTests(unittest.TestCase):
    def test_two_fields_make_a_partial(self) -> None:
        partial = extract_partial_recipe(
            {"title": "Soup", "ingredients": [{"name": "x"}]})
        self.assertIsNotNone(partial)
        self.assertEqual(partial.title, "Soup")
        self.assertEqual([i.name for i in partial.ingredients], ["x"])

    def test_one_field_is_not_enough(self) -> None:
        self.assertIsNone(extract_partial_recipe({"title": "Soup"}))

    def test_incomplete_nutrition_is_dropped_entirely(self) -> None:
        partial = extract_partial_recipe({
            "title": "Soup",
            "description": "Warming.",
            "nutrition": {"calories": 200, "protein": 5, "fat": 3},
        })
        self.assertIsNotNone(partial)
        self.assertIsNone(partial.nutrition)
        self.assertNotIn("nutrition", partial.model_dump(exclude_none=True))

    def test_complete_nutrition_is_kept_and_rounded_up(self) -> None:
        partial = extract_partial_recipe({
            "title": "Soup",
            "nutrition": {"calories": 200.2, "protein": 5, "fat": 3, "carbohydrates": 20},
        })
        self.assertEqual(partial.nutrition.calories, 201)
        self.assertEqual(partial.nutrition.carbohydrates, 20)

    def test_invalid_fields_are_skipped(self) -> None:
        partial = extract_partial_recipe({
            "title": "",
            "description": "A stew",
            "prep_time": "ten",
            "cook_time": 30,
            "serves": True,
            "category": "brunch",
            "ingredients": [
                {"name": "beef", "amount": 500, "unit": "grams", "preparation": "cube"},
                {"name": "", "amount": 1},
                "carrots",
                {"name": "salt", "amount": "some", "unit": "bogus"},
            ],
            "method": [{"title": "Brown the beef", "description": 3}, {"description": "no title"}],
        })
        self.assertIsNone(partial.title)
        self.assertIsNone(partial.prep_time)
        self.assertEqual(partial.cook_time, 30)
        self.assertIsNone(partial.serves)
        self.assertIsNone(partial.category)
        self.assertEqual(len(partial.ingredients), 2)
        beef, salt = partial.ingredients
        self.assertEqual((beef.unit, beef.preparation), ("g", "cubed"))
        self.assertIsNone(salt.amount)
        self.assertIsNone(salt.unit)
        self.assertEqual(len(partial.method), 1)
        self.assertIsNone(partial.method[0].description)

    def test_fractional_times_are_rounded_up(self) -> None:
        partial = extract_partial_recipe(
            {"title": "Tea", "prep_time": 2.5, "cook_time": 5.0, "serves": 3.2})
        self.assertEqual(partial.prep_time, 3)
        self.assertEqual(partial.cook_time, 5)
        self.assertEqual(partial.serves, 4)

    def test_negative_and_blank_values_are_dropped(self) -> None:
        partial = extract_partial_recipe({
            "title": "   ",
            "description": "Hot tea.",
            "prep_time": -2,
            "cook_time": float("inf"),
            "serves": 1,
        })
        self.assertIsNone(partial.title)
        self.assertIsNone(partial.prep_time)
        self.assertIsNone(partial.cook_time)
        self.assertEqual(partial.serves, 1)

    def test_non_mapping_input(self) -> None:
        self.assertIsNone(extract_partial_recipe(None))
        self.assertIsNone(extract_partial_recipe("not json"))
        self.assertIsNone(extract_partial_recipe([{"title": "Soup"}]))

    def test_empty_lists_do_not_count(self) -> None:
        self.assertIsNone(extract_partial_recipe(
            {"title": "Soup", "ingredients": [], "method": []}))
