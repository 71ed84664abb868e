from __future__ import annotations

import unittest

from custom_components.recipe_importer.vocabulary import (
    CATEGORY_KEYWORDS,
    DEFAULT_CATEGORY,
    PREPARATION_SYNONYMS,
    PREPARATIONS,
    RECIPE_CATEGORIES,
    UNIT_SYNONYMS,
    UNITS,
    UNITS_FLAT,
)


class VocabularyTests(unittest.TestCase):
    def test_every_unit_synonym_maps_into_the_unit_vocabulary(self) -> None:
        for synonym, unit in UNIT_SYNONYMS.items():
            with self.subTest(synonym=synonym):
                self.assertIn(unit, UNITS_FLAT)

    def test_every_preparation_synonym_maps_into_the_preparation_vocabulary(self) -> None:
        for synonym, preparation in PREPARATION_SYNONYMS.items():
            with self.subTest(synonym=synonym):
                self.assertIn(preparation, PREPARATIONS)

    def test_flat_units_cover_every_group_without_duplicates(self) -> None:
        grouped = [unit for group in UNITS.values() for unit in group]
        self.assertEqual(list(UNITS_FLAT), grouped)
        self.assertEqual(len(UNITS_FLAT), len(set(UNITS_FLAT)))
        self.assertEqual(set(UNITS), {"volume", "weight", "count", "items"})

    def test_preparations_are_unique(self) -> None:
        self.assertEqual(len(PREPARATIONS), len(set(PREPARATIONS)))

    def test_category_keywords_target_known_categories(self) -> None:
        for category, keywords in CATEGORY_KEYWORDS:
            self.assertIn(category, RECIPE_CATEGORIES)
            self.assertTrue(keywords)
        self.assertIn(DEFAULT_CATEGORY, RECIPE_CATEGORIES)

    def test_tables_are_read_only(self) -> None:
        with self.assertRaises(TypeError):
            UNIT_SYNONYMS["spoon"] = "tbsp"  # type: ignore[index]
