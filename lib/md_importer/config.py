# md_importer/config.py
import os
import json
from dotenv import load_dotenv

load_dotenv()  # Automatically load .env in project root

CONFIG_DIR = os.path.expanduser("~/.md_importer_config")
TOKEN_PATH = os.path.join(CONFIG_DIR, "token.json")


def _get_env(name: str, default: str = "") -> str:
    value = os.getenv(name, "").strip()
    if value:
        return value
    return default


def get_store_base_url() -> str:
    return _get_env("STORE_API_BASE").rstrip("/")


def get_compendium_base_url(store_base_url: str = "") -> str:
    # Spells usually live on the same service as actors
    fallback = store_base_url or get_store_base_url()
    return _get_env("COMPENDIUM_API_BASE", fallback).rstrip("/")


def get_api_key():
    # 1. Try token.json
    if os.path.exists(TOKEN_PATH):
        with open(TOKEN_PATH, "r") as f:
            return json.load(f).get("token")

    # 2. Try .env fallback
    return os.getenv("STORE_API_KEY") or None


def save_api_key(token: str):
    os.makedirs(CONFIG_DIR, exist_ok=True)
    with open(TOKEN_PATH, "w") as f:
        json.dump({"token": token}, f)


def get_request_timeout() -> float:
    value = _get_env("STORE_TIMEOUT", "8")
    try:
        return max(1.0, float(value))
    except ValueError:
        return 8.0


def get_max_lookup_concurrency() -> int:
    value = _get_env("COMPENDIUM_MAX_CONCURRENCY", "8")
    try:
        return max(1, int(value))
    except ValueError:
        return 8
