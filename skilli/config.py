import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./skilli.db")

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Global route prefix shared with the mobile client ("/api/...")
API_PREFIX = os.getenv("API_PREFIX", "/api")

# JWT - CRITICAL: No default secret key in production
JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    import warnings

    warnings.warn(
        "JWT_SECRET not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    JWT_SECRET = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# Keys the HMAC used to store refresh tokens; falls back to a value derived from JWT_SECRET
JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET") or f"{JWT_SECRET}:refresh"
JWT_ALGORITHM = "HS256"
# Duration strings: "<number><d|h|m|s>", e.g. "15m", "7d"
JWT_EXPIRES_IN = os.getenv("JWT_EXPIRES_IN", "15m")
JWT_REFRESH_EXPIRES_IN = os.getenv("JWT_REFRESH_EXPIRES_IN", "7d")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# CORS - the mobile app has no fixed origin, so "*" is the default
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "*")

# Uploads are written to disk and served statically under /uploads
UPLOAD_DIR = os.getenv("UPLOAD_DIR", str(Path.cwd() / "uploads"))
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(5 * 1024 * 1024)))

# Rate limiting for login/register
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
AUTH_RATE_LIMIT = int(os.getenv("AUTH_RATE_LIMIT", "20"))
AUTH_RATE_WINDOW = int(os.getenv("AUTH_RATE_WINDOW", "60"))
# Optional: counters are kept in memory and synced to Redis when configured
REDIS_URL = os.getenv("REDIS_URL")
