from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass
from typing import NoReturn
from sqlalchemy import Row
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from catalog.core.exceptions import AuthorNotFound, NotImplementedOperation
from catalog.models.author import Author
from catalog.repos.author_repo import AuthorRepository
from catalog.repos.book_repo import BookRepository
from catalog.schemas.author import (
    AUTHOR_FORM_RULES,
    AUTHOR_FORM_SANITIZERS,
    AuthorCreate,
    AuthorForm,
)
from catalog.schemas.form import FieldError
from catalog.utils.fanout import fan_out
from catalog.utils.validation import parse_iso8601, sanitize, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorDetail:
    author: Author
    books: list[Row[tuple[str, str]]]


@dataclass(frozen=True)
class ValidationFailed:
    """Submitted values plus every rule they broke; nothing was written."""
    values: AuthorForm
    errors: list[FieldError]


@dataclass(frozen=True)
class DeletionBlocked:
    """The author still has books, so it was kept."""
    detail: AuthorDetail


@dataclass(frozen=True)
class AuthorDeleted:
    author_id: uuid.UUID


class AuthorService:
    @staticmethod
    # List authors
    def list_authors(db: Session) -> list[Author]:
        return AuthorRepository.list(db)

    @staticmethod
    # Author and their books, read concurrently
    async def _load_with_books(
        session_factory: sessionmaker[Session], author_id: uuid.UUID
    ) -> AuthorDetail | None:
        author, books = await fan_out(
            session_factory,
            lambda db: AuthorRepository.get(db, author_id),
            lambda db: BookRepository.list_by_author(db, author_id),
        )
        if author is None:
            return None
        return AuthorDetail(author=author, books=books)

    @staticmethod
    # Author detail
    async def get_author_detail(
        session_factory: sessionmaker[Session], author_id: uuid.UUID
    ) -> AuthorDetail:
        detail = await AuthorService._load_with_books(session_factory, author_id)
        if detail is None:
            raise AuthorNotFound(author_id)
        return detail

    @staticmethod
    # Create author
    def create_author(db: Session, form: AuthorForm) -> Author | ValidationFailed:
        submitted = form.model_dump()
        errors = validate(submitted, AUTHOR_FORM_RULES)
        if errors:
            return ValidationFailed(values=form, errors=errors)

        cleaned = sanitize(submitted, AUTHOR_FORM_SANITIZERS)
        data = AuthorCreate(
            first_name=cleaned["first_name"],
            family_name=cleaned["family_name"],
            date_of_birth=parse_iso8601(cleaned["date_of_birth"]) if cleaned["date_of_birth"] else None,
            date_of_death=parse_iso8601(cleaned["date_of_death"]) if cleaned["date_of_death"] else None,
        )
        return AuthorRepository.create(db, data)

    @staticmethod
    # Delete confirmation; None when the author is already gone
    async def get_delete_preview(
        session_factory: sessionmaker[Session], author_id: uuid.UUID
    ) -> AuthorDetail | None:
        return await AuthorService._load_with_books(session_factory, author_id)

    @staticmethod
    # Delete author unless books still reference it
    async def delete_author(
        session_factory: sessionmaker[Session], author_id: uuid.UUID
    ) -> AuthorDeleted | DeletionBlocked:
        # state may have changed since the preview was shown
        detail = await AuthorService._load_with_books(session_factory, author_id)
        if detail is None:
            return AuthorDeleted(author_id=author_id)

        if detail.books:
            logger.info(
                "Refusing to delete author %s: %d book(s) still reference it",
                author_id,
                len(detail.books),
            )
            return DeletionBlocked(detail=detail)

        def _remove() -> bool:
            with session_factory() as db:
                return AuthorRepository.delete(db, author_id)

        _ = await run_in_threadpool(_remove)
        return AuthorDeleted(author_id=author_id)

    @staticmethod
    # Update form (not supported yet)
    def update_author_form(author_id: uuid.UUID) -> NoReturn:
        raise NotImplementedOperation("NOT IMPLEMENTED: Author update GET")

    @staticmethod
    # Update author (not supported yet)
    def update_author(author_id: uuid.UUID) -> NoReturn:
        raise NotImplementedOperation("NOT IMPLEMENTED: Author update POST")
