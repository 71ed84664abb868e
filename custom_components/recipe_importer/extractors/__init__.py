"""Extractors package."""
from .gemini_client import GeminiRecipeClient
from .recipe_extractor import RecipeExtractor
from .scraper import FetchedPage, PageFetcher
from .url_guard import UrlValidation, validate_url

__all__ = [
    "FetchedPage",
    "GeminiRecipeClient",
    "PageFetcher",
    "RecipeExtractor",
    "UrlValidation",
    "validate_url",
]
