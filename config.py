import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Storage
    db_file: str = field(default_factory=lambda: os.getenv("BOOKSHELF_DB_FILE", "bookshelf.db"))
    storage_key: str = field(default_factory=lambda: os.getenv("BOOKSHELF_STORAGE_KEY", "books"))

    # Output and logging
    output_mode: str = field(default_factory=lambda: os.getenv("BOOKSHELF_OUTPUT", "plain"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())

    # Ask before removing a book
    confirm_deletions: bool = field(default_factory=lambda: _env_bool("CONFIRM_DELETIONS", "True"))

    app_name: str = field(default_factory=lambda: os.getenv("APP_NAME", "Bookshelf CLI"))


settings = Settings()
