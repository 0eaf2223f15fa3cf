# creature_import/config.py
import os
import json
from dotenv import load_dotenv

load_dotenv()  # Automatically load .env in project root

CONFIG_DIR = os.path.expanduser("~/.creature_import_config")
STORAGE_CONFIG_PATH = os.path.join(CONFIG_DIR, "storage.json")

DEFAULT_FORMAT = "dolmenwood"
KNOWN_FORMATS = ("dolmenwood", "ose")


def get_storage_base_url() -> str:
    # 1. Try storage.json
    if os.path.exists(STORAGE_CONFIG_PATH):
        with open(STORAGE_CONFIG_PATH, "r") as f:
            url = json.load(f).get("base_url")
            if url:
                return url

    # 2. Try .env fallback
    return os.getenv("STORAGE_API_BASE", "").strip()


def save_storage_base_url(url: str):
    os.makedirs(CONFIG_DIR, exist_ok=True)
    with open(STORAGE_CONFIG_PATH, "w") as f:
        json.dump({"base_url": url}, f)


def get_storage_api_key() -> str:
    return os.getenv("STORAGE_API_KEY", "").strip()


def get_default_format() -> str:
    fmt = os.getenv("CREATURE_IMPORT_FORMAT", DEFAULT_FORMAT).strip().lower()
    return fmt if fmt in KNOWN_FORMATS else DEFAULT_FORMAT
