import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "freemeal_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SMTP_CONFIG = {
    "host": os.getenv("SMTP_HOST", "localhost"),
    "port": int(os.getenv("SMTP_PORT", "587")),
    "user": os.getenv("SMTP_USER", ""),
    "password": os.getenv("SMTP_PASS", ""),
}
FROM_NAME = os.getenv("FROM_NAME", "Pantry")
FROM_EMAIL = os.getenv("FROM_EMAIL", "no-reply@localhost")
REPORT_RECIPIENTS = os.getenv("REPORT_RECIPIENTS", "")
# Empty secret disables the cron endpoint (always 401)
CRON_SECRET = os.getenv("CRON_SECRET", "")

REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "Asia/Manila")
REPORT_CRON = os.getenv("REPORT_CRON", "0 12 * * mon")
ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "1")))
