import uuid
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from catalog.models.author import Author
from catalog.schemas.author import AuthorCreate


class AuthorRepository:

    @staticmethod
    # Create a new author
    def create(db: Session, data: AuthorCreate) -> Author:
        author = Author(**data.model_dump())
        db.add(author)
        db.commit()
        db.refresh(author)
        return author

    @staticmethod
    # List authors by family name, oldest first on ties
    def list(db: Session) -> list[Author]:
        stmt = select(Author).order_by(
            Author.family_name.asc(), Author.created_at.asc()
        )
        return list(db.scalars(stmt).all())

    @staticmethod
    # Get an author by ID
    def get(db: Session, author_id: uuid.UUID) -> Author | None:
        stmt = select(Author).where(Author.id == author_id)
        return db.scalars(stmt).first()

    @staticmethod
    # Delete an author by ID; False when there was nothing to delete
    def delete(db: Session, author_id: uuid.UUID) -> bool:
        result = db.execute(delete(Author).where(Author.id == author_id))
        db.commit()
        return bool(result.rowcount)
