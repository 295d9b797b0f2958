import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Shared with the identity service that issues the bearer tokens.
JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "leave_portal"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Leave rules
SENIORITY_BONUS_TABLE = os.getenv("SENIORITY_BONUS_TABLE", "5:1,10:2,15:3,20:5,25:7,30:8")
DEFAULT_BASE_ALLOWANCE = int(os.getenv("DEFAULT_BASE_ALLOWANCE", "25"))
# Empty: every leave type counts against the allowance. Example: "ANNUAL_PAID"
ALLOWANCE_LEAVE_TYPES = os.getenv("ALLOWANCE_LEAVE_TYPES", "")
# UNSUPPORTED or SELF_ASSIGN
CEO_LEAVE_POLICY = os.getenv("CEO_LEAVE_POLICY", "UNSUPPORTED")
SKIP_VACANT_APPROVER_LEVELS = bool(int(os.getenv("SKIP_VACANT_APPROVER_LEVELS", "0")))
