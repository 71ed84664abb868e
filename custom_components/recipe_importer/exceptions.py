"""
Exceptions raised inside the extraction pipeline.

Only the orchestrator turns these into extraction results; everything
below it raises.
"""
from __future__ import annotations

from typing import Any


class RecipeImportError(Exception):
    """Base exception for the recipe import pipeline."""


class InputValidationError(RecipeImportError):
    """Raised when the caller's input is rejected before any work is done."""


class UnsafeUrlError(RecipeImportError):
    """Raised when a URL (or a redirect target) fails the SSRF check."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"URL '{url}' is not allowed: {reason}")


class FetchError(RecipeImportError):
    """Raised when a page cannot be fetched or has the wrong content."""


class ImagePreparationError(RecipeImportError):
    """Raised when a submitted image cannot be decoded."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Image {index + 1} could not be read: {reason}")


class GenerationError(RecipeImportError):
    """Raised when the generative model call fails (API, transport, timeout)."""


class SchemaNotSatisfiedError(RecipeImportError):
    """Raised when the model answered but the answer fails the strict schema.

    ``raw`` holds whatever the model produced: a decoded JSON value when the
    text was valid JSON, otherwise the raw text, or None when there was no
    text at all.
    """

    def __init__(self, message: str, raw: Any = None):
        self.raw = raw
        super().__init__(message)
