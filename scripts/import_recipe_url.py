#!/usr/bin/env python
"""
Import a recipe from a URL and print the result as JSON.

Run manually:
    python scripts/import_recipe_url.py https://example.com/some-recipe
"""
import asyncio
import json
import logging
import sys

from recipe_importer.app.core.config import get_settings
from recipe_importer.app.services.url_recipe_importer import import_recipe_from_url

logging.basicConfig(level=get_settings().log_level.upper())
logger = logging.getLogger("import_recipe_url")


def main(argv) -> int:
    if len(argv) != 2:
        print(f"usage: {argv[0]} <url>", file=sys.stderr)
        return 2
    result = asyncio.run(import_recipe_from_url(argv[1]))
    print(json.dumps(result.to_payload(), indent=2))
    if not result.success:
        logger.error("Import failed: %s (%s)", result.error_code.value, result.error_message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
