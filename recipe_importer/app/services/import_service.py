"""Preview-or-save wrapper around URL recipe import."""

import logging
from typing import Optional

from pydantic import BaseModel

from recipe_importer.app.services import url_recipe_importer
from recipe_importer.app.services.storage.base import RecipeStore
from recipe_importer.app.services.url_parsing.models import ImportErrorCode, ImportResult

logger = logging.getLogger(__name__)


class ImportOutcome(BaseModel):
    result: ImportResult
    created_recipe_id: Optional[str] = None


async def import_and_maybe_save(
    url: str,
    author_id: str,
    store: Optional[RecipeStore] = None,
    save: bool = False,
) -> ImportOutcome:
    """Import ``url`` and, when ``save`` is set, hand the recipe to ``store``.

    Preview requests never touch the store. Failed imports are never saved.
    """
    result = await url_recipe_importer.import_recipe_from_url(url)
    if not save or not result.success:
        return ImportOutcome(result=result)
    if store is None:
        raise ValueError("A RecipeStore is required when save=True")

    try:
        recipe_id = store.save_recipe(result.recipe, author_id)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Saving imported recipe from %s failed", url)
        failed = result.model_copy(
            update={
                "success": False,
                "error_code": ImportErrorCode.PERSISTENCE_FAILED,
                "error_message": str(exc) or "Unable to save recipe",
            }
        )
        return ImportOutcome(result=failed)

    logger.info("Saved imported recipe %s for author %s", recipe_id, author_id)
    return ImportOutcome(result=result, created_recipe_id=recipe_id)
