import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "freemeal_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo people + the demo admin on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Weekly report mail
SMTP_CONFIG = {
    "host": os.getenv("SMTP_HOST", "localhost"),
    "port": int(os.getenv("SMTP_PORT", "587")),
    "user": os.getenv("SMTP_USER", ""),
    "password": os.getenv("SMTP_PASS", ""),
}
FROM_NAME = os.getenv("FROM_NAME", "Pantry")
FROM_EMAIL = os.getenv("FROM_EMAIL", "no-reply@localhost")
REPORT_RECIPIENTS = os.getenv("REPORT_RECIPIENTS", "")
CRON_SECRET = os.getenv("CRON_SECRET", "dev-cron-secret")

REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "Asia/Manila")
REPORT_CRON = os.getenv("REPORT_CRON", "0 12 * * mon")
ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "0")))
