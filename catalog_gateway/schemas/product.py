"""Pydantic schemas for catalog products and query parameters."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

MIN_TERM_LENGTH = 3


class Product(BaseModel):
    """A catalog product as served to clients.

    Upstream records may carry more fields than these; they are dropped.
    Some catalogs label the product name ``title``, which is accepted on
    input and always rendered back as ``name``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: StrictInt = Field(..., description="Upstream product identifier.")
    name: StrictStr = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("name", "title"),
        description="Display name of the product.",
    )
    price: StrictInt | StrictFloat = Field(..., description="Unit price.")
    category: StrictStr = Field(..., min_length=1, description="Category slug.")
    description: StrictStr = Field(..., min_length=1, description="Free-text description.")


class SearchQuery(BaseModel):
    """Query string of ``GET /products/search``."""

    query: StrictStr = Field(..., min_length=MIN_TERM_LENGTH)


class CategoryQuery(BaseModel):
    """Path parameter of ``GET /products/category/{category}``."""

    category: StrictStr = Field(..., min_length=MIN_TERM_LENGTH)


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    code: str = Field(..., description="Machine-readable error code.")
    message: str = Field(..., description="Human-readable message.")
    request_id: str | None = Field(default=None, description="Correlation id of the request.")
    details: list[dict] | None = Field(
        default=None,
        description="Violated constraints, present on validation errors.",
    )
