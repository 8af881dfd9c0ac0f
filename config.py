from datetime import date
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Backend REST
    API_BASE_URL: str = "http://localhost:4000/api"
    REQUEST_TIMEOUT: float = 15.0

    # Sesión local (token, usuario y tema persistidos entre recargas)
    SESSION_DB_PATH: str = "session.db"
    DEFAULT_THEME: str = "dark"

    # Listados
    SEARCH_DEBOUNCE_SECONDS: float = 0.3
    VOTERS_PAGE_SIZE: int = 10

    # Campaña
    DEFAULT_MUNICIPALITY: str = "Valledupar"
    ELECTION_DATE: Optional[date] = None

    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
