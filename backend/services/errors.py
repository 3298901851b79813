"""
Search error types.

Every failure a search can hit is either invalid input or a provider HTTP
failure. Each error carries the HTTP status the API responds with and a
message suitable for the UI's error banner.
"""
from typing import Any, Dict, Optional


class SearchError(Exception):
    status_code: int = 500
    default_message: str = "Search failed"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InvalidSearchRequest(SearchError):
    status_code = 400
    default_message = "Invalid search request"


class ConfigurationError(SearchError):
    status_code = 500
    default_message = "SerpAPI key not configured"


class ProviderError(SearchError):
    """Provider failed in a way that has no more specific mapping."""
    status_code = 500
    default_message = "Search failed"


class ProviderBadRequest(ProviderError):
    status_code = 400
    default_message = "Invalid search parameters"


class ProviderAuthError(ProviderError):
    status_code = 401
    default_message = "Invalid SerpAPI key"


class ProviderTimeout(ProviderError):
    status_code = 408
    default_message = "Search request timed out"


class ProviderRateLimited(ProviderError):
    status_code = 429
    default_message = "API rate limit exceeded. Please try again later."
