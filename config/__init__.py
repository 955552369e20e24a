import os
from typing import Optional

_ENVIRONMENTS = {
    "dev": "development",
    "development": "development",
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
}


def get_settings_module(env: Optional[str] = None) -> str:
    """Dotted path of the settings module for ``env`` (default: ``$APP_ENV``).

    Unknown names fall back to development.
    """
    name = (env or os.getenv("APP_ENV") or "development").strip().lower()
    return f"config.{_ENVIRONMENTS.get(name, 'development')}"
