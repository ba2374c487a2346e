import os

SECRET_KEY = os.environ.get("SECRET_KEY", "TODOAPP_DEV_SECRET_KEY")
ALGORITHM = os.environ.get("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = float(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

# Default to local SQLite for dev/tests; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./todoapp.db")

# Where the browser pages reach the backend. Empty means in-process (same app).
BACKEND_URL = os.environ.get("BACKEND_URL", "")

COOKIE_SECURE = os.environ.get("COOKIE_SECURE", "0").lower() in ("1", "true", "yes", "on")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
# Optional directory for a full debug log file
LOG_DIR = os.environ.get("LOG_DIR", "")
