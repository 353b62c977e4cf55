from typing import AsyncIterator

import pytest

from blog.database import Database
from blog.repositories.post_repository import PostRepository
from blog.schemas.post_schema import CreatePost
from blog.services.post_service import PostService
from blog.settings import Settings


def pytest_configure():
    pytest.api_url = "http://blog-api.test"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        debug=False,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'data' / 'blog.db'}",
        api_url=pytest.api_url,
        posts_per_page=2,
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncIterator[Database]:
    database = Database(settings)
    await database.connect()
    await database.migrate()
    yield database
    await database.dispose()


@pytest.fixture
def make_create_post(faker):
    def make(**overrides) -> CreatePost:
        data = {
            "title": faker.sentence(nb_words=4),
            "content": faker.text(),
            "author": faker.name(),
        }
        data.update(overrides)
        return CreatePost(**data)

    return make


@pytest.fixture
def make_post_row(faker):
    def make(**overrides) -> dict:
        data = {
            "title": faker.sentence(nb_words=4),
            "slug": faker.unique.slug(),
            "content": faker.text(),
            "excerpt": None,
            "author": faker.name(),
            "status": "draft",
            "view_count": 0,
            "created_at": faker.unique.iso8601(tzinfo=None),
            "updated_at": None,
            "published_at": None,
            "updated_by": None,
        }
        data.update(overrides)
        return data

    return make


@pytest.fixture
def post_repository(database: Database) -> PostRepository:
    return PostRepository(database)


@pytest.fixture
def post_service(post_repository: PostRepository) -> PostService:
    return PostService(post_repository)
