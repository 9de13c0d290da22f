from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    db_path: Path = Path(__file__).resolve().parent.parent / "movies.db"
    init_schema: bool = True
    default_page_size: int = 20
    log_level: str = "INFO"

    model_config = {"env_prefix": "MOVIE_CATALOG_"}


settings = Settings()
