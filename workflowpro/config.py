import os
from pathlib import Path

from sqlalchemy.engine import make_url

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"

LOCAL_ENVIRONMENTS = ("local", "test")


class ConfigurationError(RuntimeError):
    pass


def resolve_database_url(environ=None) -> str:
    """Build the database URL from DATABASE_URL and DATABASE_TOKEN.

    Outside local/test mode both values are required. In local/test mode a
    missing URL falls back to a SQLite file under data/.
    """
    environ = os.environ if environ is None else environ
    app_env = environ.get("APP_ENV", "production").lower()
    url = environ.get("DATABASE_URL")
    token = environ.get("DATABASE_TOKEN")

    if app_env not in LOCAL_ENVIRONMENTS:
        missing = [name for name, value in (("DATABASE_URL", url), ("DATABASE_TOKEN", token)) if not value]
        if missing:
            raise ConfigurationError(
                f"{', '.join(missing)} must be set when APP_ENV={app_env!r}"
            )

    if not url:
        DATA_DIR.mkdir(exist_ok=True)
        return f"sqlite:///{DATA_DIR / 'workflowpro.db'}"

    parsed = make_url(url)
    if not (token and parsed.host):
        return url
    return parsed.set(password=token).render_as_string(hide_password=False)


APP_ENV = os.getenv("APP_ENV", "production").lower()
DATABASE_URL = resolve_database_url()

AUTO_CREATE_DB = os.getenv("AUTO_CREATE_DB", "true").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Event payloads mirror the database schema the tables live in
CHANGE_FEED_SCHEMA = os.getenv("CHANGE_FEED_SCHEMA", "public")
