import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    PORT: int = int(os.environ.get("PORT", 8080))
    MAX_TEXT_LEN: int = int(os.environ.get("MAX_TEXT_LEN", 256))
    INPUT_TOOLS_BASE_URL: str = os.environ.get("INPUT_TOOLS_BASE_URL", "https://inputtools.google.com/request")
    INPUT_TOOLS_ITC: str = os.environ.get("INPUT_TOOLS_ITC", "yue-hant-t-i0-und")
    INPUT_TOOLS_NUM: int = int(os.environ.get("INPUT_TOOLS_NUM", 13))
    # Constant so identical queries produce byte-identical URLs
    INPUT_TOOLS_CALLBACK: str = os.environ.get("INPUT_TOOLS_CALLBACK", "_callbacks____inputtools")
    INPUT_TOOLS_TIMEOUT_SECONDS: int = int(os.environ.get("INPUT_TOOLS_TIMEOUT_SECONDS", 5))
    LOCATOR_CACHE_MAX_SIZE: int = int(os.environ.get("LOCATOR_CACHE_MAX_SIZE", 100))
    RESPONSE_CACHE_MAX_SIZE: int = int(os.environ.get("RESPONSE_CACHE_MAX_SIZE", 5000))
    RESPONSE_CACHE_TTL_SECONDS: int = int(os.environ.get("RESPONSE_CACHE_TTL_SECONDS", 600))
    DEBOUNCE_MS: int = int(os.environ.get("DEBOUNCE_MS", 200))
    INITIAL_DEBOUNCE_MS: int = int(os.environ.get("INITIAL_DEBOUNCE_MS", 100))
    SIMPLIFIED_CHINESE: bool = _env_bool("SIMPLIFIED_CHINESE")
    COPY_MODE: str = os.environ.get("COPY_MODE", "copy")
    MAX_SESSIONS: int = int(os.environ.get("MAX_SESSIONS", 1000))


settings = Settings()
