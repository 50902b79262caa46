import os

SECRET_KEY = "test-secret"

DB_BACKEND = "sqlite"
DB_CONFIG = {"path": os.getenv("DB_PATH", "attendance_test.db")}

TIMEZONE = "UTC"

LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = True
