"""Core recovery modules."""

from .errors import (  # noqa: F401
    ConfigurationError,
    GatewayError,
    ReclaimError,
    StoreError,
)
