import os

from dotenv import load_dotenv

load_dotenv()

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./social.db")
DB_TIMEOUT_SECONDS = int(os.getenv("DB_TIMEOUT_SECONDS", "5"))
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))

# Retry configuration (startup only)
DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", "3"))
DB_RETRY_MIN_WAIT = int(os.getenv("DB_RETRY_MIN_WAIT", "1"))
DB_RETRY_MAX_WAIT = int(os.getenv("DB_RETRY_MAX_WAIT", "10"))

# Auth configuration
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_HOURS = int(os.getenv("JWT_EXPIRE_HOURS", "24"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

# Pagination and content limits
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))
DEFAULT_COMMENT_LIMIT = int(os.getenv("DEFAULT_COMMENT_LIMIT", "50"))
# SQLite INTEGER is a signed 64-bit value
MAX_SQL_INTEGER = 2**63 - 1

POST_MAX_LENGTH = 500
COMMENT_MAX_LENGTH = 200
PASSWORD_MIN_LENGTH = 6

# Application
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
API_VERSION = "1.0.0"
