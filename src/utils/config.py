# runtime configuration, read once from the environment (and .env if present)
import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DEBUG = _flag("DEBUG")

DATA_DIR = os.getenv("STOREFRONT_DATA_DIR", "data")
DB_PATH = os.getenv("STOREFRONT_DB_PATH", os.path.join(DATA_DIR, "db.sqlite"))
LOCAL_STORAGE_PATH = os.getenv(
    "STOREFRONT_LOCAL_STORAGE", os.path.join(DATA_DIR, "local_storage.json")
)
STORAGE_DIR = os.getenv("STOREFRONT_STORAGE_DIR", os.path.join(DATA_DIR, "storage"))
SEED_DEMO_DATA = _flag("STOREFRONT_SEED_DEMO_DATA", "1")

# email delivery
RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
SENDER_EMAIL = os.getenv("SENDER_EMAIL", "onboarding@resend.dev")
STORE_OWNER_EMAIL = os.getenv("STORE_OWNER_EMAIL", "")
MAIL_DRY_RUN = _flag("MAIL_DRY_RUN")

STORE_NAME = os.getenv("STORE_NAME", "FITIN")
CURRENCY = "PKR"
