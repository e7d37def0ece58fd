import os

from config import parse_id_list

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workday_bot_test"),
}

ADMIN_ROLE_IDS = parse_id_list(os.getenv("ADMIN_ROLE_IDS", "900"))
PM_ROLE_IDS = parse_id_list(os.getenv("PM_ROLE_IDS", "800"))

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
