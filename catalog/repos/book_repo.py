import uuid
from sqlalchemy import Row, select
from sqlalchemy.orm import Session

from catalog.models.book import Book
from catalog.schemas.book import BookCreate


class BookRepository:
    @staticmethod
    # Create a new book
    def create(db: Session, data: BookCreate) -> Book:
        book = Book(**data.model_dump())
        db.add(book)
        db.commit()
        db.refresh(book)
        return book

    @staticmethod
    # Titles and summaries of an author's books
    def list_by_author(db: Session, author_id: uuid.UUID) -> list[Row[tuple[str, str]]]:
        stmt = (
            select(Book.title, Book.summary)
            .where(Book.author_id == author_id)
            .order_by(Book.title)
        )
        return list(db.execute(stmt).all())
