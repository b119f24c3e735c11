from .client import ReviewHubClient
from .config_types import ClientConfig
from .errors import ApiError, AuthError, NetworkError, ReviewHubClientError

__all__ = ["ReviewHubClient", "ClientConfig", "ApiError", "AuthError", "NetworkError", "ReviewHubClientError"]
