import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "sqlite" or "mysql"; chosen once at startup
DB_BACKEND = os.getenv("DB_BACKEND", "sqlite")

if DB_BACKEND == "mysql":
    DB_CONFIG = {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", "attendance_db"),
    }
else:
    DB_CONFIG = {"path": os.getenv("DB_PATH", "attendance.db")}

# Institution zone used to read schedules (IANA name)
TIMEZONE = os.getenv("TIMEZONE", "UTC")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
