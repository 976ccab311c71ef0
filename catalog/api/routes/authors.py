import uuid
from typing import Annotated
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session, sessionmaker
from starlette.status import (
    HTTP_303_SEE_OTHER,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_CONTENT,
)

from catalog.core.config import settings
from catalog.core.logging import get_logger
from catalog.db.session import get_db, get_session_factory
from catalog.schemas.author import (
    AuthorDeletePage,
    AuthorDetailPage,
    AuthorForm,
    AuthorFormPage,
    AuthorListPage,
    AuthorRead,
    author_url,
)
from catalog.schemas.book import BookSummary
from catalog.services.author_service import (
    AuthorDetail,
    AuthorService,
    DeletionBlocked,
    ValidationFailed,
)

router = APIRouter(tags=["authors"])

SessionFactory = Annotated[sessionmaker[Session], Depends(get_session_factory)]


def _author_list_url() -> str:
    return f"{settings.CATALOG_PREFIX}/authors"


def _delete_page(detail: AuthorDetail) -> AuthorDeletePage:
    return AuthorDeletePage(
        author=AuthorRead.model_validate(detail.author),
        author_books=[BookSummary.model_validate(book) for book in detail.books],
    )


@router.get("/authors", response_model=AuthorListPage)
def list_authors(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
):
    logger = get_logger(__name__, request)
    logger.info("Listing authors")
    authors = AuthorService.list_authors(db)
    return AuthorListPage(author_list=[AuthorRead.model_validate(a) for a in authors])


@router.get("/author/create", response_model=AuthorFormPage)
def create_author_form():
    return AuthorFormPage()


@router.post(
    "/author/create",
    status_code=HTTP_303_SEE_OTHER,
    responses={HTTP_422_UNPROCESSABLE_CONTENT: {"model": AuthorFormPage}},
)
def create_author(
    request: Request,
    form: AuthorForm,
    db: Annotated[Session, Depends(get_db)],
):
    logger = get_logger(__name__, request)
    result = AuthorService.create_author(db, form)
    if isinstance(result, ValidationFailed):
        logger.info("Author form rejected: %d error(s)", len(result.errors))
        page = AuthorFormPage(author=result.values, errors=result.errors)
        return JSONResponse(
            status_code=HTTP_422_UNPROCESSABLE_CONTENT, content=page.model_dump(mode="json")
        )

    logger.info("Author created: %s", result.id)
    return RedirectResponse(author_url(result.id), status_code=HTTP_303_SEE_OTHER)


@router.get("/author/{author_id}", response_model=AuthorDetailPage)
async def author_detail(author_id: uuid.UUID, session_factory: SessionFactory):
    detail = await AuthorService.get_author_detail(session_factory, author_id)
    return AuthorDetailPage(
        author=AuthorRead.model_validate(detail.author),
        author_books=[BookSummary.model_validate(book) for book in detail.books],
    )


@router.get(
    "/author/{author_id}/delete",
    response_model=AuthorDeletePage,
    responses={HTTP_303_SEE_OTHER: {"description": "Author already deleted"}},
)
async def delete_author_form(author_id: uuid.UUID, session_factory: SessionFactory):
    detail = await AuthorService.get_delete_preview(session_factory, author_id)
    if detail is None:
        return RedirectResponse(_author_list_url(), status_code=HTTP_303_SEE_OTHER)
    return _delete_page(detail)


@router.post(
    "/author/{author_id}/delete",
    status_code=HTTP_303_SEE_OTHER,
    responses={HTTP_409_CONFLICT: {"model": AuthorDeletePage}},
)
async def delete_author(
    request: Request,
    author_id: uuid.UUID,
    session_factory: SessionFactory,
):
    logger = get_logger(__name__, request)
    outcome = await AuthorService.delete_author(session_factory, author_id)
    if isinstance(outcome, DeletionBlocked):
        page = _delete_page(outcome.detail)
        return JSONResponse(status_code=HTTP_409_CONFLICT, content=page.model_dump(mode="json"))

    logger.info("Author deleted: %s", author_id)
    return RedirectResponse(_author_list_url(), status_code=HTTP_303_SEE_OTHER)


@router.get("/author/{author_id}/update")
def update_author_form(author_id: uuid.UUID) -> None:
    AuthorService.update_author_form(author_id)


@router.post("/author/{author_id}/update")
def update_author(author_id: uuid.UUID) -> None:
    AuthorService.update_author(author_id)
