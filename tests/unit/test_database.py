import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from blog.database import MIGRATIONS_PATH, Database, _split_statements
from blog.settings import Settings
from blog.utils import utc_now

EXPECTED_COLUMNS = {
    "id",
    "title",
    "slug",
    "content",
    "excerpt",
    "author",
    "status",
    "view_count",
    "created_at",
    "updated_at",
    "published_at",
    "updated_by",
}


@pytest.mark.asyncio
class TestDatabase:
    async def test_successfully_apply_migrations_once(self, database: Database):
        assert await database.migrate() == []

        async with database.engine.connect() as conn:
            result = await conn.execute(
                text("SELECT version FROM schema_migrations ORDER BY version")
            )
            versions = [row.version for row in result]

        assert versions == sorted(path.stem for path in MIGRATIONS_PATH.glob("*.sql"))

    async def test_posts_table_has_every_column(self, database: Database):
        async with database.engine.connect() as conn:
            result = await conn.execute(text("PRAGMA table_info(posts)"))
            columns = {row.name for row in result}

        assert columns == EXPECTED_COLUMNS

    async def test_creates_missing_data_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "blog.db"
        database = Database(Settings(database_url=f"sqlite+aiosqlite:///{path}"))

        await database.connect()
        applied = await database.migrate()
        await database.dispose()

        assert path.exists()
        assert len(applied) == len(list(MIGRATIONS_PATH.glob("*.sql")))

    async def test_ping(self, database: Database):
        assert await database.ping() is True

    async def test_engine_requires_connect(self, settings: Settings):
        with pytest.raises(RuntimeError):
            Database(settings).engine

    async def test_created_at_default_matches_utc_now_width(self, database: Database):
        async with database.engine.begin() as conn:
            await conn.execute(
                text(
                    "INSERT INTO posts (title, slug, content, author) "
                    "VALUES ('Defaults', 'defaults', 'Body', 'Admin')"
                )
            )
            result = await conn.execute(
                text("SELECT created_at FROM posts WHERE slug = 'defaults'")
            )
            created_at = result.scalar_one()

        assert len(created_at) == len(utc_now())
        assert created_at.endswith("+00:00")

    async def test_fail_to_migrate_due_to_broken_script_leaves_nothing_behind(
        self, tmp_path
    ):
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "0001_create_tags.sql").write_text(
            "CREATE TABLE tags (id INTEGER PRIMARY KEY);\n"
            "ALTER TABLE tags ADD COLUMN name TEXT;\n"
            "INSERT INTO missing_table VALUES (1);\n"
        )
        database = Database(
            Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}")
        )
        await database.connect()
        try:
            with pytest.raises(OperationalError):
                await database.migrate(migrations)

            async with database.engine.connect() as conn:
                result = await conn.execute(
                    text("SELECT name FROM sqlite_master WHERE name = 'tags'")
                )
                assert result.first() is None
                result = await conn.execute(text("SELECT COUNT(*) FROM schema_migrations"))
                assert result.scalar_one() == 0

            (migrations / "0001_create_tags.sql").write_text(
                "CREATE TABLE tags (id INTEGER PRIMARY KEY);\n"
                "ALTER TABLE tags ADD COLUMN name TEXT;\n"
            )
            assert await database.migrate(migrations) == ["0001_create_tags"]
        finally:
            await database.dispose()

    async def test_successfully_migrate_script_with_semicolons_in_literals(
        self, tmp_path
    ):
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "0001_create_notes.sql").write_text(
            "CREATE TABLE notes (body TEXT);\n"
            "-- seed rows; one per line\n"
            "INSERT INTO notes (body) VALUES ('first; second');\n"
        )
        database = Database(
            Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}")
        )
        await database.connect()
        try:
            await database.migrate(migrations)

            async with database.engine.connect() as conn:
                result = await conn.execute(text("SELECT body FROM notes"))
                assert result.scalar_one() == "first; second"
        finally:
            await database.dispose()


class TestSplitStatements:
    def test_successfully_split_plain_statements(self):
        assert _split_statements("SELECT 1;\nSELECT 2;\n") == ["SELECT 1", "SELECT 2"]

    def test_semicolon_inside_string_literal(self):
        assert _split_statements("INSERT INTO t VALUES ('a;b');SELECT 1;") == [
            "INSERT INTO t VALUES ('a;b')",
            "SELECT 1",
        ]

    def test_semicolon_inside_comment(self):
        assert _split_statements("-- one; two\nSELECT 1;") == ["-- one; two\nSELECT 1"]

    def test_statement_without_trailing_semicolon(self):
        assert _split_statements("SELECT 1;\nSELECT 2") == ["SELECT 1", "SELECT 2"]
