from pydantic import BaseModel, ConfigDict, computed_field
from typing import ClassVar
from datetime import date
import uuid

from catalog.core.config import settings
from catalog.schemas.book import BookSummary
from catalog.schemas.form import FieldError
from catalog.utils.validation import (
    Rule,
    Sanitizer,
    escape,
    is_alphanumeric,
    is_iso8601,
    is_present,
    trim,
)


# Raw author form, exactly as submitted
class AuthorForm(BaseModel):
    first_name: str | None = None
    family_name: str | None = None
    date_of_birth: str | None = None
    date_of_death: str | None = None


AUTHOR_FORM_RULES: tuple[Rule, ...] = (
    Rule("first_name", is_present, "First name must be specified"),
    Rule("first_name", is_alphanumeric, "First name has non-alphanumeric characters."),
    Rule("family_name", is_present, "Family name must be specified"),
    Rule("family_name", is_alphanumeric, "Family name has non-alphanumeric characters."),
    Rule("date_of_birth", is_iso8601, "Invalid date of birth", optional=True),
    Rule("date_of_death", is_iso8601, "Invalid date of death", optional=True),
)

AUTHOR_FORM_SANITIZERS: dict[str, tuple[Sanitizer, ...]] = {
    "first_name": (trim, escape),
    "family_name": (trim, escape),
    "date_of_birth": (trim, escape),
    "date_of_death": (trim, escape),
}


# Author create schema (sanitised values)
class AuthorCreate(BaseModel):
    first_name: str
    family_name: str
    date_of_birth: date | None = None
    date_of_death: date | None = None


# Author read schema
class AuthorRead(AuthorCreate):
    id: uuid.UUID
    name: str
    lifespan: str

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def url(self) -> str:
        return author_url(self.id)


def author_url(author_id: uuid.UUID) -> str:
    """Canonical detail-page path for an author."""
    return f"{settings.CATALOG_PREFIX}/author/{author_id}"


class AuthorListPage(BaseModel):
    title: str = "Author List"
    author_list: list[AuthorRead]


class AuthorFormPage(BaseModel):
    title: str = "Create author"
    author: AuthorForm | None = None
    errors: list[FieldError] = []


class AuthorDetailPage(BaseModel):
    title: str = "Author Detail"
    author: AuthorRead
    author_books: list[BookSummary]


class AuthorDeletePage(AuthorDetailPage):
    title: str = "Delete Author"
