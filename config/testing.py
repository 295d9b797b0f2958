import os

SECRET_KEY = "test-secret"

JWT_SECRET = "test-jwt-secret"
JWT_ALGORITHM = "HS256"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "leave_portal_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SENIORITY_BONUS_TABLE = "5:1,10:2,15:3,20:5,25:7,30:8"
DEFAULT_BASE_ALLOWANCE = 25
ALLOWANCE_LEAVE_TYPES = ""
CEO_LEAVE_POLICY = "UNSUPPORTED"
SKIP_VACANT_APPROVER_LEVELS = False
