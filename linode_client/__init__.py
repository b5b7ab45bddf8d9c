"""Client for the Linode v4 REST API: NodeBalancers, their configs, and instance configs."""

from .api.pagination import ListOptions
from .client import LinodeClient
from .config import APIConfig, AppConfig, LoggingConfig, load_config
from .exceptions import (
    APIError,
    CancelledError,
    ConfigError,
    DecodeError,
    EndpointResolutionError,
    LinodeClientError,
    NotFoundError,
    RequestError,
    SerializationError,
    is_api_error,
    is_not_found,
)

__all__ = [
    "APIConfig",
    "APIError",
    "AppConfig",
    "CancelledError",
    "ConfigError",
    "DecodeError",
    "EndpointResolutionError",
    "LinodeClient",
    "LinodeClientError",
    "ListOptions",
    "LoggingConfig",
    "NotFoundError",
    "RequestError",
    "SerializationError",
    "is_api_error",
    "is_not_found",
    "load_config",
]
