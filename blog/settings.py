from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    debug: bool = False
    app_name: str = "blog"
    database_url: str = "sqlite+aiosqlite:///./data/blog.db"
    database_pool_size: int = 5
    database_acquire_timeout: float = 3.0
    cors_allow_origins: list[str] = ["*"]
    api_url: str = "http://localhost:3001"
    api_timeout: float = 5.0
    posts_per_page: int = 6

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
