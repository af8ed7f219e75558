import os
from functools import lru_cache
from pathlib import Path

from categories import Category


class Settings:
    def __init__(
        self,
        database_url: str,
        timezone: str,
        categories: tuple[str, ...],
        recent_limit: int,
    ) -> None:
        self.database_url = database_url
        self.timezone = timezone
        self.categories = categories
        self.recent_limit = recent_limit


def _ensure_data_dir() -> Path:
    root = Path(os.getenv("FINANCE_DATA_DIR", "./data")).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root


def _parse_categories(raw: str) -> tuple[str, ...]:
    names: list[str] = []
    for part in raw.split(","):
        name = part.strip().lower()
        if name and name not in names:
            names.append(name)
    if Category.other.value not in names:
        names.append(Category.other.value)
    return tuple(names)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    data_dir = _ensure_data_dir()
    default_db = data_dir / "finance.db"
    database_url = os.getenv("FINANCE_DATABASE_URL", f"sqlite:///{default_db}")
    timezone = os.getenv("FINANCE_TIMEZONE", "UTC")
    categories = _parse_categories(
        os.getenv("FINANCE_CATEGORIES", ",".join(c.value for c in Category))
    )
    recent_limit = int(os.getenv("FINANCE_RECENT_LIMIT", "5"))
    return Settings(
        database_url=database_url,
        timezone=timezone,
        categories=categories,
        recent_limit=recent_limit,
    )
