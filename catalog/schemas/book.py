from pydantic import BaseModel, field_validator, ConfigDict
from typing import ClassVar
import uuid

# Book create schema
class BookCreate(BaseModel):
    title: str
    summary: str
    isbn: str | None = None
    author_id: uuid.UUID

    @field_validator("title", "summary", mode="before")
    @classmethod
    def trim_and_check(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("value cannot be empty")
        return v

# Book as listed on an author's pages
class BookSummary(BaseModel):
    title: str
    summary: str

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)
