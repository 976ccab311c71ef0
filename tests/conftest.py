import pytest
from datetime import date
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from catalog.main import app
from catalog.db.session import build_engine, get_session_factory, init_db
from catalog.repos.author_repo import AuthorRepository
from catalog.repos.book_repo import BookRepository
from catalog.schemas.author import AuthorCreate
from catalog.schemas.book import BookCreate


@pytest.fixture
def test_engine(tmp_path):
    """Throwaway SQLite database, one file per test."""
    engine = build_engine(f"sqlite:///{tmp_path / 'catalog.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    """Create a fresh database session for each test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def test_client(session_factory):
    """Test client wired to the per-test database."""
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_author_model(db_session):
    """Author without books."""
    return AuthorRepository.create(
        db_session,
        AuthorCreate(
            first_name="Jane",
            family_name="Austen",
            date_of_birth=date(1775, 12, 16),
            date_of_death=date(1817, 7, 18),
        ),
    )


@pytest.fixture
def author_with_books(db_session):
    """Author referenced by two books."""
    author = AuthorRepository.create(
        db_session,
        AuthorCreate(first_name="Isaac", family_name="Asimov", date_of_birth=date(1920, 1, 2)),
    )
    for title, summary in (
        ("Foundation", "A mathematician foresees the fall of the Empire."),
        ("I, Robot", "Stories about the Three Laws of Robotics."),
    ):
        _ = BookRepository.create(
            db_session,
            BookCreate(title=title, summary=summary, isbn=None, author_id=author.id),
        )
    return author
