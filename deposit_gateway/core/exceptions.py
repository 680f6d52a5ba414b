"""Exceptions shared by every gateway module."""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for all gateway errors."""


class InvalidParameterError(GatewayError):
    """Raised when a caller-supplied parameter is missing or malformed."""

    def __init__(self, parameter: str, message: str) -> None:
        super().__init__(f"{parameter}: {message}")
        self.parameter = parameter
        self.message = message


class FeatureNotImplementedError(GatewayError):
    """Raised by placeholder operations that are part of the API but not built."""

    def __init__(self, feature: str) -> None:
        super().__init__(f"{feature} is not implemented")
        self.feature = feature
