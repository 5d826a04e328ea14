"""
Pydantic schema definitions for the catalog module.

The upstream services speak Spanish on the wire (``nombre``,
``titulo``, ``ano_publicacion``...). The models expose English
attribute names and keep the wire keys as aliases, so decoding
upstream JSON and encoding the ``/catalog`` response both use the
original keys.

Decoding is strict about types: a string where an integer is expected,
a boolean or a float all make decoding fail. Missing keys and ``null``
values fall back to the field's zero value, and unknown keys are
ignored.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class UpstreamRecord(BaseModel):
    """Common decoding rules for records coming from the upstreams."""

    model_config = ConfigDict(populate_by_name=True, strict=True)

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return v


class Author(UpstreamRecord):
    """An author record as returned by the Authors service."""

    id: int = 0
    first_name: str = Field(default="", alias="nombre")
    last_name: str = Field(default="", alias="apellido")
    biography: str = Field(default="", alias="biografia")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Book(UpstreamRecord):
    """A book record as returned by the Books service.

    ``author_id`` is the foreign key resolved against the author
    lookup during aggregation.
    """

    id: int = 0
    title: str = Field(default="", alias="titulo")
    isbn: str = ""
    publication_year: int = Field(default=0, alias="ano_publicacion")
    author_id: int = Field(default=0, alias="autor_id")


class CatalogItem(Book):
    """A book enriched with the resolved author display name."""

    author_name: str
