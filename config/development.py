import os

from config import parse_id_list

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workday_bot"),
}

# Discord role ids granting admin / PM rights
ADMIN_ROLE_IDS = parse_id_list(os.getenv("ADMIN_ROLE_IDS", ""))
PM_ROLE_IDS = parse_id_list(os.getenv("PM_ROLE_IDS", ""))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
