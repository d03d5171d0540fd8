import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "freemeal_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

SMTP_CONFIG = {"host": "localhost", "port": 2525}
FROM_NAME = "Pantry"
FROM_EMAIL = "no-reply@test.local"
REPORT_RECIPIENTS = "reports@test.local"
CRON_SECRET = "test-cron-secret"

REPORT_TIMEZONE = "Asia/Manila"
REPORT_CRON = "0 12 * * mon"
ENABLE_SCHEDULER = False
