"""Runtime configuration, read from the environment (and a .env file if present)"""
import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# Persistence
DATA_DIR = os.getenv("RENTAL_DATA_DIR", "data")
FIELD_DELIMITER = ","
SEED_DEFAULT_FLEET = _flag("RENTAL_SEED_FLEET", "true")

# Auth (override these in production)
SECRET_KEY = os.getenv("RENTAL_SECRET_KEY", "your-secret-key-keep-it-secret")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("RENTAL_TOKEN_EXPIRE_MINUTES", "30"))
VALID_EMPLOYEE_IDS = [
    emp.strip() for emp in os.getenv("RENTAL_EMPLOYEE_IDS", "EMP001,EMP002,EMP003").split(",")
    if emp.strip()
]
ADMIN_USERNAME = os.getenv("RENTAL_ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("RENTAL_ADMIN_PASSWORD", "admin123")
ADMIN_EMPLOYEE_ID = os.getenv("RENTAL_ADMIN_EMPLOYEE_ID", "EMP001")

# Logging
LOG_LEVEL = os.getenv("RENTAL_LOG_LEVEL", "INFO").upper()
