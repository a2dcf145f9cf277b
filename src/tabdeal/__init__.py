"""tabdeal: async client for the Tabdeal exchange REST API."""

__version__ = "0.1.0"

from .client import ClientConfig, TabdealClient
from .errors import (
    APIError,
    AuthenticationError,
    EncodingError,
    TabdealError,
    TransportError,
    classify_error,
)
from .factory import create_client, create_client_from_settings
from .settings import Settings

__all__ = [
    "__version__",
    "ClientConfig",
    "TabdealClient",
    "APIError",
    "AuthenticationError",
    "EncodingError",
    "TabdealError",
    "TransportError",
    "classify_error",
    "create_client",
    "create_client_from_settings",
    "Settings",
]
