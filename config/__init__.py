import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module, development by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def parse_id_list(value: str) -> frozenset:
    """Comma separated Discord ids -> frozenset of strings."""
    return frozenset(part.strip() for part in (value or "").split(",") if part.strip())
