"""
Runtime configuration for the API Tester backend.

Values are read from environment variables once at import time.
Services look them up through this module when they run, so tests
can monkeypatch individual settings.
"""

import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Database
DATABASE_URL = os.getenv("API_TESTER_DATABASE_URL", "sqlite:///./api_tester.db")

# Bearer token verification (tokens are issued by the external auth service)
JWT_SECRET_KEY = os.getenv("API_TESTER_JWT_SECRET", "change-this-secret-key-in-production-deployments")
JWT_ALGORITHM = os.getenv("API_TESTER_JWT_ALGORITHM", "HS256")

# Outbound execution
EXECUTION_TIMEOUT_SECONDS = float(os.getenv("API_TESTER_EXECUTION_TIMEOUT", "30"))
FOLLOW_REDIRECTS = _env_bool("API_TESTER_FOLLOW_REDIRECTS", True)
MAX_REQUEST_BODY_BYTES = int(os.getenv("API_TESTER_MAX_REQUEST_BODY_BYTES", str(1024 * 1024)))
BLOCK_PRIVATE_NETWORKS = _env_bool("API_TESTER_BLOCK_PRIVATE_NETWORKS", False)

# History pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = int(os.getenv("API_TESTER_MAX_PAGE_SIZE", "100"))

# Application
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("API_TESTER_CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
LOG_LEVEL = os.getenv("API_TESTER_LOG_LEVEL", "INFO").upper()
