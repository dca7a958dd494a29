import os


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    _host = os.getenv("POSTGRES_HOST")
    if _host:
        _database = os.getenv("POSTGRES_DB")
        _user = os.getenv("POSTGRES_USER")
        _password = os.getenv("POSTGRES_PASSWORD")
        _port = os.getenv("POSTGRES_PORT", "5432")
        return f"postgresql://{_user}:{_password}@{_host}:{_port}/{_database}"

    return "sqlite:///./storefront.db"


DATABASE_URL = _database_url()
DB_CONNECT_RETRIES = int(os.getenv("DB_CONNECT_RETRIES", "5"))

API_VERSION = os.getenv("API_VERSION", "1.0.0")
API_PREFIX = os.getenv("API_PREFIX", "/api/v1")
DOCUMENTATION_URL = os.getenv("DOCUMENTATION_URL", "/docs")

GZIP_MINIMUM_SIZE = int(os.getenv("GZIP_MINIMUM_SIZE", "1000"))
CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]

# Seconds; 0 disables the list/categories cache
CACHE_TTL = int(os.getenv("CACHE_TTL", "30"))

# Pending events per subscriber before the oldest is dropped
SUBSCRIPTION_QUEUE_SIZE = int(os.getenv("SUBSCRIPTION_QUEUE_SIZE", "100"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = _get_bool("LOG_TO_FILE", False)
LOG_DIR = os.getenv("LOG_DIR", "logs")

GRAPHIQL_ENABLED = _get_bool("GRAPHIQL_ENABLED", True)
