import os

# Basic settings helper to read environment configuration.


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.SERPAPI_KEY: str | None = os.getenv("SERPAPI_KEY") or None
        self.SERPAPI_BASE_URL: str = os.getenv("SERPAPI_BASE_URL", "https://serpapi.com/search")
        self.OPEN_LIBRARY_BASE_URL: str = os.getenv("OPEN_LIBRARY_BASE_URL", "https://openlibrary.org")
        self.SEARCH_TIMEOUT_SECONDS: float = _as_float(os.getenv("SEARCH_TIMEOUT_SECONDS"), 20.0)
        self.SEARCH_LOCATION: str = os.getenv("SEARCH_LOCATION", "United States")
        self.SEARCH_GL: str = os.getenv("SEARCH_GL", "us")
        self.SEARCH_HL: str = os.getenv("SEARCH_HL", "en")
        self.SEARCH_CURRENCY: str = os.getenv("SEARCH_CURRENCY", "USD")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
