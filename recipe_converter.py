#!/usr/bin/env python3
"""
Recipe Converter - Import recipes from text, websites and photos

Runs the Recipe Importer pipeline outside Home Assistant and saves the
extraction result as JSON.
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from custom_components.recipe_importer.const import DEFAULT_MODEL
from custom_components.recipe_importer.extractors import GeminiRecipeClient, RecipeExtractor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


def run_extraction(extractor: RecipeExtractor, source: str, value):
    """Run the extractor for one source kind."""
    if source == "text":
        return extractor.extract_from_text(value)
    if source == "url":
        return extractor.extract_from_url(value)
    return extractor.extract_from_images(value)


def save_result(result, output_dir: Path) -> Path:
    """Save an extraction result as JSON.

    Returns:
        Path of the written file
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    recipe = getattr(result, "recipe", None) or getattr(result, "partial_recipe", None)
    title = getattr(recipe, "title", None) or "recipe"

    # Generate output filename based on recipe title
    safe_title = "".join(c for c in title if c.isalnum() or c in (' ', '-', '_')).rstrip()
    safe_title = safe_title.replace(' ', '_').lower() or "recipe"

    json_file = output_dir / f"{safe_title}.json"
    logger.info("Saving extraction result to: %s", json_file)
    with open(json_file, 'w', encoding='utf-8') as f:
        json.dump(result.model_dump(mode="json", exclude_none=True), f,
                  indent=2, ensure_ascii=False)
    return json_file


def main():
    """Main entry point for the recipe converter."""
    parser = argparse.ArgumentParser(
        description="Import recipes into structured JSON format"
    )
    parser.add_argument(
        "source",
        choices=("text", "url", "images"),
        help="Kind of input"
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        help="A URL, a text file, or one or more image files"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Directory to save output files (default: ./output)"
    )
    parser.add_argument(
        "--api-key",
        help="Gemini API key (can also be set via GEMINI_API_KEY env var)"
    )
    parser.add_argument(
        "--model",
        default=DEFAULT_MODEL,
        help=f"Model to use for extraction (default: {DEFAULT_MODEL})"
    )

    args = parser.parse_args()

    # Get API key
    api_key = args.api_key or os.getenv("GEMINI_API_KEY")
    if not api_key:
        logger.error("API key not provided. Set GEMINI_API_KEY env var or use --api-key")
        sys.exit(1)

    if args.source == "url":
        value = args.inputs[0]
    elif args.source == "text":
        value = Path(args.inputs[0]).read_text(encoding="utf-8")
    else:
        value = [Path(path).read_bytes() for path in args.inputs]

    extractor = RecipeExtractor(GeminiRecipeClient(api_key, model_id=args.model))
    result = run_extraction(extractor, args.source, value)
    json_file = save_result(result, args.output_dir)

    # Print summary
    print(f"\nStatus: {result.status}")
    if result.status == "success":
        print(f"Title: {result.recipe.title}")
        print(f"Ingredients: {len(result.recipe.ingredients)}")
        print(f"Method steps: {len(result.recipe.method)}")
    else:
        print(f"Error: {result.error}")
    print(f"Output: {json_file}")

    sys.exit(0 if result.status == "success" else 1)


if __name__ == "__main__":
    main()
