import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
JWT_SECRET_KEY = os.getenv("JWT_SECRET", SECRET_KEY)
JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", "7"))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_hub"),
}

CORS_ORIGINS = os.getenv("CLIENT_URL", "http://localhost:3000")
REPORTS_DIR = os.getenv("REPORTS_DIR", "reports")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Fallbacks for the office rules; rows in the settings table take precedence.
OFFICE_LATITUDE = float(os.getenv("OFFICE_LATITUDE", "-26.1942"))
OFFICE_LONGITUDE = float(os.getenv("OFFICE_LONGITUDE", "28.0578"))
LOCATION_RADIUS_METERS = float(os.getenv("LOCATION_RADIUS_METERS", "5000"))
WORK_START_TIME = os.getenv("WORK_START_TIME", "09:00")
LATE_THRESHOLD_MINUTES = int(os.getenv("LATE_THRESHOLD_MINUTES", "15"))
OVERTIME_THRESHOLD_HOURS = float(os.getenv("OVERTIME_THRESHOLD_HOURS", "8"))

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed default settings and demo accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
