import pytest

from blog.repositories.post_repository import PostRepository


@pytest.fixture
async def stored_posts(make_post_row, post_repository: PostRepository) -> list[dict]:
    posts = []
    for index in range(5):
        posts.append(
            await post_repository.create_post(
                make_post_row(
                    created_at=f"2024-01-0{index + 1}T12:00:00.000000+00:00",
                    status="published" if index % 2 == 0 else "draft",
                )
            )
        )
    return posts
