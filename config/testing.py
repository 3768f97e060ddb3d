import os

SECRET_KEY = "test-secret"

JWT_SECRET = "test-jwt-secret-0123456789abcdef0123"
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_MINUTES = 15

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "faculty_db_test"),
}

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
LOG_FILE = ""

ATTENDANCE_WARNING_THRESHOLD = 75.0

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
