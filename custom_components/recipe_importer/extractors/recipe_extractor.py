"""
Recipe extraction engine.

This module turns pasted text, a web page or recipe photos into an
ExtractionResult. It is the only place where pipeline exceptions are
converted into results: each public method returns Success, Incomplete
(with whatever partial recipe could be salvaged) or Failure and never
raises.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..const import (
    MAX_PHOTO_IMAGES,
    MAX_TEXT_LENGTH,
    MIN_PAGE_TEXT_LENGTH,
    MIN_TEXT_LENGTH,
)
from ..exceptions import (
    GenerationError,
    InputValidationError,
    RecipeImportError,
    SchemaNotSatisfiedError,
    UnsafeUrlError,
)
from ..models.recipe import NormalizedRecipe, NutritionInfo
from ..models.result import (
    ExtractionFailure,
    ExtractionIncomplete,
    ExtractionResult,
    ExtractionSuccess,
)
from ..models.schema import (
    PageRecipeCandidate,
    StructuredDataCandidate,
    TextRecipeCandidate,
)
from ..parsers.canonicalize import clean_ingredients, clean_method_steps
from ..parsers.jsonld_parser import (
    SchemaOrgRecipe,
    build_recipe_from_schema,
    find_recipe_jsonld,
)
from ..parsers.partial import extract_partial_recipe
from .gemini_client import GeminiRecipeClient, image_part
from .images import prepare_images
from .prompts import (
    IMAGE_PROMPT,
    PAGE_PROMPT,
    STRUCTURED_DATA_PROMPT,
    TEXT_PROMPT,
    build_structured_data_request,
)
from .scraper import PageFetcher, extract_image_from_meta, extract_page_text
from .url_guard import UrlValidation, validate_url

_LOGGER = logging.getLogger(__name__)

INVALID_RESPONSE_WITH_PARTIAL = (
    "The AI returned incomplete data. "
    "Please complete the missing fields in edit mode.")
INVALID_RESPONSE = (
    "The AI returned incomplete recipe data. "
    "Please try again with more detailed recipe information.")
MISSING_DETAILS_WITH_PARTIAL = (
    "The AI couldn't extract all recipe details. "
    "Please complete the missing fields in edit mode.")
MISSING_DETAILS = (
    "The AI couldn't extract enough recipe information. "
    "Please provide more details.")
NOT_A_RECIPE = (
    "This doesn't look like a recipe. "
    "Please include ingredients and cooking steps.")
UNEXPECTED_ERROR = "Something went wrong. Please try again."


class RecipeExtractor:
    """Extracts normalized recipes from text, web pages and photos.

    Args:
        client: Gemini client used for every model call
        fetcher: Fetches recipe pages; defaults to a PageFetcher sharing
            ``url_guard``
        url_guard: Validates URLs before anything is fetched
        image_workers: Threads used to decode photos
    """

    def __init__(
        self,
        client: GeminiRecipeClient,
        fetcher: PageFetcher | None = None,
        url_guard: Callable[[str], UrlValidation] = validate_url,
        image_workers: int = 4,
    ) -> None:
        self.client = client
        self.url_guard = url_guard
        self.fetcher = fetcher or PageFetcher(url_guard=url_guard)
        self.image_workers = image_workers

    def extract_from_text(self, text: str) -> ExtractionResult:
        """Extract a recipe from pasted text.

        Args:
            text: Free-form recipe text

        Returns:
            The extraction result
        """
        return self._run("text", self._extract_text, text)

    def extract_from_url(self, url: str) -> ExtractionResult:
        """Extract a recipe from a web page.

        Pages publishing schema.org Recipe data are read from that data;
        other pages are read from their visible text.

        Args:
            url: Public http(s) URL of the recipe page

        Returns:
            The extraction result
        """
        return self._run("url", self._extract_url, url)

    def extract_from_images(self, images: Sequence[str | bytes]) -> ExtractionResult:
        """Extract a recipe from one or more photos of the same recipe.

        Args:
            images: Data URLs, base64 strings or raw image bytes

        Returns:
            The extraction result
        """
        return self._run("images", self._extract_images, images)

    def _run(self, source: str, extract: Callable[[Any], ExtractionResult], value: Any) -> ExtractionResult:
        try:
            result = extract(value)
        except SchemaNotSatisfiedError as e:
            _LOGGER.warning("Model response for %s failed validation: %s", source, e)
            partial = extract_partial_recipe(e.raw)
            result = ExtractionIncomplete(
                error=INVALID_RESPONSE_WITH_PARTIAL if partial else INVALID_RESPONSE,
                partial_recipe=partial,
            )
        except RecipeImportError as e:
            _LOGGER.error("Recipe extraction from %s failed: %s", source, e)
            result = ExtractionFailure(error=str(e))
        except Exception as e:
            _LOGGER.error("Unexpected error during recipe extraction from %s: %s",
                          source, e, exc_info=True)
            result = ExtractionFailure(error=UNEXPECTED_ERROR)

        _LOGGER.info("Recipe extraction from %s finished: %s", source, result.status)
        return result

    def _extract_text(self, text: str) -> ExtractionResult:
        if not isinstance(text, str) or not text.strip():
            raise InputValidationError("Please enter some recipe text")

        text = text.strip()
        if len(text) < MIN_TEXT_LENGTH:
            raise InputValidationError(
                "We need a bit more information. "
                "Please add at least a few sentences about your recipe.")
        if len(text) > MAX_TEXT_LENGTH:
            raise InputValidationError(
                f"That's a lot of text! Please keep it under {MAX_TEXT_LENGTH:,} characters.")

        _LOGGER.info("Extracting recipe from %d characters of text", len(text))
        candidate = self.client.generate(
            TextRecipeCandidate, TEXT_PROMPT, [f"Parse this recipe:\n\n{text}"])
        return self._from_self_reporting_candidate(candidate)

    def _extract_images(self, images: Sequence[str | bytes]) -> ExtractionResult:
        if isinstance(images, (str, bytes)) or not images:
            raise InputValidationError("Please provide at least one image")
        if len(images) > MAX_PHOTO_IMAGES:
            raise InputValidationError(
                f"Please provide no more than {MAX_PHOTO_IMAGES} images at once")

        prepared = prepare_images(images, max_workers=self.image_workers)

        instruction = (
            "Extract the recipe from this recipe page image."
            if len(prepared) == 1 else
            "Extract the recipe from these recipe page images. "
            "Combine information from all pages to create a complete recipe.")
        contents = [instruction] + [
            image_part(image.data, image.mime_type) for image in prepared]

        _LOGGER.info("Extracting recipe from %d image(s)", len(prepared))
        candidate = self.client.generate(TextRecipeCandidate, IMAGE_PROMPT, contents)
        return self._from_self_reporting_candidate(candidate)

    def _from_self_reporting_candidate(self, candidate: TextRecipeCandidate) -> ExtractionResult:
        if not candidate.success:
            _LOGGER.info("Model reported the input is not a recipe: %s",
                         candidate.error_message)
            return ExtractionFailure(error=candidate.error_message.strip() or NOT_A_RECIPE)

        if not candidate.title.strip() or not candidate.ingredients or not candidate.method:
            return self._missing_details(candidate)

        recipe = NormalizedRecipe(
            title=candidate.title.strip(),
            description=candidate.description.strip() or None,
            prep_time=candidate.prep_time,
            cook_time=candidate.cook_time,
            serves=candidate.serves,
            category=candidate.category,
            ingredients=clean_ingredients(candidate.ingredients),
            method=clean_method_steps(candidate.method),
            nutrition=NutritionInfo(**candidate.nutrition.model_dump()),
        )
        _LOGGER.info("Extracted recipe '%s' with %d ingredients and %d steps",
                     recipe.title, len(recipe.ingredients), len(recipe.method))
        return ExtractionSuccess(recipe=recipe)

    def _missing_details(self, candidate: TextRecipeCandidate | PageRecipeCandidate) -> ExtractionIncomplete:
        _LOGGER.warning("Model response is missing recipe details "
                        "(%d ingredients, %d method steps)",
                        len(candidate.ingredients), len(candidate.method))
        partial = extract_partial_recipe(candidate.model_dump())
        return ExtractionIncomplete(
            error=MISSING_DETAILS_WITH_PARTIAL if partial else MISSING_DETAILS,
            partial_recipe=partial,
        )

    def _extract_url(self, url: str) -> ExtractionResult:
        if not isinstance(url, str) or not url.strip():
            raise InputValidationError("Please enter a recipe URL")

        url = url.strip()
        validation = self.url_guard(url)
        if not validation.valid:
            raise UnsafeUrlError(url, validation.reason or "rejected")

        page = self.fetcher.fetch(validation.url or url)
        soup = page.soup()

        recipe_data = find_recipe_jsonld(soup)
        if recipe_data is not None:
            schema = SchemaOrgRecipe.from_jsonld(recipe_data)
            if schema.name:
                return ExtractionSuccess(recipe=self._recipe_from_schema(schema, url))
            _LOGGER.debug("JSON-LD recipe on %s has no name, reading page text", url)

        image_url = extract_image_from_meta(soup)
        page_text = extract_page_text(soup)
        if len(page_text) < MIN_PAGE_TEXT_LENGTH:
            raise InputValidationError(
                "Could not read enough text from the page to find a recipe")

        _LOGGER.info("Extracting recipe from %d characters of page text", len(page_text))
        candidate = self.client.generate(
            PageRecipeCandidate, PAGE_PROMPT,
            [f"Extract the recipe from this webpage text:\n\n{page_text}"])

        if not candidate.title.strip() or not candidate.ingredients or not candidate.method:
            return self._missing_details(candidate)

        nutrition = candidate.nutrition
        recipe = NormalizedRecipe(
            title=candidate.title.strip(),
            description=candidate.description or None,
            prep_time=candidate.prep_time,
            cook_time=candidate.cook_time,
            serves=candidate.serves,
            category=candidate.category,
            ingredients=clean_ingredients(candidate.ingredients),
            method=clean_method_steps(candidate.method),
            nutrition=NutritionInfo(**nutrition.model_dump()) if nutrition else None,
            # Meta tags are more reliable than an image URL read from page text
            image_url=image_url or candidate.image_url or None,
            original_url=url,
            original_author=candidate.author or None,
        )
        return ExtractionSuccess(recipe=recipe)

    def _recipe_from_schema(self, schema: SchemaOrgRecipe, url: str) -> NormalizedRecipe:
        _LOGGER.info("Found schema.org recipe '%s' with %d ingredients and %d steps",
                     schema.name, len(schema.ingredients), len(schema.instructions))

        structured = None
        if schema.ingredients or schema.instructions:
            request = build_structured_data_request(
                schema.name, schema.description, schema.category,
                schema.ingredients, schema.instructions)
            try:
                structured = self.client.generate(
                    StructuredDataCandidate, STRUCTURED_DATA_PROMPT, [request])
            except (GenerationError, SchemaNotSatisfiedError) as e:
                _LOGGER.warning(
                    "Could not structure schema.org recipe with the model, "
                    "using rule-based parsing: %s", e)

        return build_recipe_from_schema(schema, structured, original_url=url)
