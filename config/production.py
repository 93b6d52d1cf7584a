import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "finstrava"),
}

CRON_SECRET = os.getenv("CRON_SECRET", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEBUG = False
