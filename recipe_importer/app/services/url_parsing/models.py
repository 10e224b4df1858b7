"""Pydantic models for URL recipe import."""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

PLACEHOLDER_TITLE = "Imported Recipe"


class ExtractionMethod(str, Enum):
    JSON_LD = "json-ld"
    MICRODATA = "microdata"
    HEURISTIC = "heuristic"

    @property
    def is_structured(self) -> bool:
        return self is not ExtractionMethod.HEURISTIC


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ImportErrorCode(str, Enum):
    INVALID_URL = "invalid_url"
    FETCH_TIMEOUT = "fetch_timeout"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"
    UNSUPPORTED_CONTENT_TYPE = "unsupported_content_type"
    NO_RECIPE_DATA_FOUND = "no_recipe_data_found"
    PERSISTENCE_FAILED = "persistence_failed"


class RawDocument(BaseModel):
    """A fetched page, discarded once extraction has run."""

    url: str
    final_url: str
    status_code: int
    content_type: Optional[str] = None
    html: str

    @property
    def base_url(self) -> str:
        return self.final_url or self.url


class StructuredCandidate(BaseModel):
    """One JSON-LD object found on a page."""

    data: Dict[str, Any]
    type_tag: Optional[Union[str, List[Any]]] = None
    block_index: int
    graph_index: Optional[int] = None

    @classmethod
    def from_object(
        cls, obj: Dict[str, Any], block_index: int, graph_index: Optional[int] = None
    ) -> "StructuredCandidate":
        type_tag = obj.get("@type")
        if not isinstance(type_tag, (str, list)):
            type_tag = None
        return cls(data=obj, type_tag=type_tag, block_index=block_index, graph_index=graph_index)


class Ingredient(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    amount: Optional[float] = None
    unit: Optional[str] = None
    raw_text: str


class Instruction(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    step: int
    content: str


class CanonicalRecipe(BaseModel):
    """The application's normalized recipe, independent of the source format."""

    model_config = ConfigDict(frozen=True)

    title: str = PLACEHOLDER_TITLE
    description: Optional[str] = None
    source_url: Optional[str] = None
    image_url: Optional[str] = None
    tags: Tuple[str, ...] = ()
    servings: Optional[int] = None
    prep_time_minutes: Optional[int] = None
    cook_time_minutes: Optional[int] = None
    total_time_minutes: Optional[int] = None
    ingredients: Tuple[Ingredient, ...] = ()
    instructions: Tuple[Instruction, ...] = ()

    @property
    def has_content(self) -> bool:
        return bool(self.ingredients or self.instructions)


class ImportResult(BaseModel):
    """Outcome of a single import request."""

    success: bool
    recipe: Optional[CanonicalRecipe] = None
    confidence: Optional[Confidence] = None
    method: Optional[ExtractionMethod] = None
    warnings: List[str] = Field(default_factory=list)
    error_code: Optional[ImportErrorCode] = None
    error_message: Optional[str] = None
    status_code: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
