import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_platform"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# en | ar; used when neither ?lang= nor Accept-Language matches a catalog
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")

# Approvals rely on SELECT ... FOR UPDATE, which locks under any InnoDB level.
TX_ISOLATION_LEVEL = os.getenv("TX_ISOLATION_LEVEL", "REPEATABLE READ")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo employees on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
