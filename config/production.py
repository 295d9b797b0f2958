import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

JWT_SECRET = os.getenv("JWT_SECRET", "please-set-JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "leave_portal"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SENIORITY_BONUS_TABLE = os.getenv("SENIORITY_BONUS_TABLE", "5:1,10:2,15:3,20:5,25:7,30:8")
DEFAULT_BASE_ALLOWANCE = int(os.getenv("DEFAULT_BASE_ALLOWANCE", "25"))
ALLOWANCE_LEAVE_TYPES = os.getenv("ALLOWANCE_LEAVE_TYPES", "")
CEO_LEAVE_POLICY = os.getenv("CEO_LEAVE_POLICY", "UNSUPPORTED")
SKIP_VACANT_APPROVER_LEVELS = bool(int(os.getenv("SKIP_VACANT_APPROVER_LEVELS", "0")))
