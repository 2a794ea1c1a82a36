"""
Runtime settings read from the environment (and a local .env file).
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-1.5-flash"

# Maximum upload size per file (bytes). Set to 10 MB by default.
DEFAULT_MAX_UPLOAD_SIZE = 10 * 1024 * 1024

DEFAULT_ALLOWED_EXTENSIONS = frozenset({
    "pdf", "png", "jpg", "jpeg", "webp", "heic",
    "xls", "xlsx", "csv",
})


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL
    max_upload_size: int = DEFAULT_MAX_UPLOAD_SIZE
    allowed_extensions: FrozenSet[str] = field(default=DEFAULT_ALLOWED_EXTENSIONS)
    log_level: str = "INFO"

    def is_allowed(self, filename: str) -> bool:
        return "." in filename and filename.rsplit(".", 1)[1].lower() in self.allowed_extensions


def _parse_extensions(value: Optional[str]) -> FrozenSet[str]:
    if not value:
        return DEFAULT_ALLOWED_EXTENSIONS
    return frozenset(ext.strip().lstrip(".").lower() for ext in value.split(",") if ext.strip())


def load_settings() -> Settings:
    """Build Settings from environment variables, loading .env first."""
    load_dotenv()
    return Settings(
        api_key=os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY"),
        model_name=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        max_upload_size=int(os.getenv("MAX_UPLOAD_SIZE", DEFAULT_MAX_UPLOAD_SIZE)),
        allowed_extensions=_parse_extensions(os.getenv("ALLOWED_EXTENSIONS")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
