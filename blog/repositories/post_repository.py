from typing import Any

from aws_lambda_powertools import Logger
from sqlalchemy import TextClause, text

from blog.database import Database

SQLITE_MAX_INTEGER = 2**63 - 1

UPDATABLE_COLUMNS = frozenset(
    {
        "title",
        "slug",
        "content",
        "excerpt",
        "author",
        "status",
        "updated_at",
        "published_at",
        "updated_by",
    }
)


class UpdateStatement:
    """Collects the columns of a partial update and renders them as a
    single ``UPDATE ... RETURNING *`` statement.

    Values are only ever passed as named bind parameters; column names are
    checked against a fixed whitelist before they reach the SQL text.
    """

    def __init__(self, table: str, columns: frozenset[str] = UPDATABLE_COLUMNS):
        self._table = table
        self._columns = columns
        self._values: dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._values)

    def set(self, column: str, value: Any) -> "UpdateStatement":
        if column not in self._columns:
            raise ValueError(f"Column cannot be updated {column=}")
        self._values[column] = value
        return self

    def render(self, key: int) -> tuple[TextClause, dict[str, Any]]:
        if not self._values:
            raise ValueError("Nothing to update")
        assignments = ", ".join(f"{column} = :{column}" for column in self._values)
        return (
            text(f"UPDATE {self._table} SET {assignments} WHERE id = :id RETURNING *"),
            {**self._values, "id": key},
        )


class PostRepository:
    TABLE = "posts"

    def __init__(self, database: Database):
        self._logger = Logger(utc=True)
        self._engine = database.engine

    async def create_post(self, data: dict[str, Any]) -> dict[str, Any]:
        async with self._engine.begin() as conn:
            result = await conn.execute(
                text(
                    "INSERT INTO posts (title, slug, content, excerpt, author, status, "
                    "view_count, created_at, updated_at, published_at, updated_by) "
                    "VALUES (:title, :slug, :content, :excerpt, :author, :status, "
                    ":view_count, :created_at, :updated_at, :published_at, :updated_by) "
                    "RETURNING *"
                ),
                data,
            )
            return dict(result.mappings().one())

    async def get_post_by_id(self, post_id: int) -> dict[str, Any] | None:
        async with self._engine.connect() as conn:
            result = await conn.execute(
                text("SELECT * FROM posts WHERE id = :id"), {"id": post_id}
            )
            row = result.mappings().first()
        return dict(row) if row else None

    async def get_post_by_slug(self, slug: str) -> dict[str, Any] | None:
        async with self._engine.connect() as conn:
            result = await conn.execute(
                text("SELECT * FROM posts WHERE slug = :slug"), {"slug": slug}
            )
            row = result.mappings().first()
        return dict(row) if row else None

    async def get_posts(
        self, limit: int, offset: int, status: str | None = None
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"limit": limit, "offset": offset}
        where = ""
        if status is not None:
            where = "WHERE status = :status "
            params["status"] = status
        async with self._engine.connect() as conn:
            result = await conn.execute(
                text(
                    f"SELECT * FROM posts {where}"
                    "ORDER BY created_at DESC, id DESC LIMIT :limit OFFSET :offset"
                ),
                params,
            )
            return [dict(row) for row in result.mappings()]

    async def count_posts(self, status: str | None = None) -> int:
        async with self._engine.connect() as conn:
            result = await conn.execute(
                text(
                    "SELECT COUNT(*) FROM posts "
                    "WHERE :status IS NULL OR status = :status"
                ),
                {"status": status},
            )
            return result.scalar_one()

    async def slug_exists(self, slug: str, exclude_id: int | None = None) -> bool:
        async with self._engine.connect() as conn:
            result = await conn.execute(
                text(
                    "SELECT 1 FROM posts WHERE slug = :slug "
                    "AND (:exclude_id IS NULL OR id != :exclude_id) LIMIT 1"
                ),
                {"slug": slug, "exclude_id": exclude_id},
            )
            return result.first() is not None

    async def increment_view_count(self, post_id: int) -> int:
        async with self._engine.begin() as conn:
            result = await conn.execute(
                text("UPDATE posts SET view_count = view_count + 1 WHERE id = :id"),
                {"id": post_id},
            )
            return result.rowcount

    async def update_post(
        self, post_id: int, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        statement = UpdateStatement(self.TABLE)
        for column, value in data.items():
            statement.set(column, value)
        query, params = statement.render(post_id)
        async with self._engine.begin() as conn:
            result = await conn.execute(query, params)
            row = result.mappings().first()
        return dict(row) if row else None

    async def delete_post(self, post_id: int) -> int:
        async with self._engine.begin() as conn:
            result = await conn.execute(
                text("DELETE FROM posts WHERE id = :id"), {"id": post_id}
            )
            return result.rowcount
