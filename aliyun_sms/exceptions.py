"""
Custom exceptions for the Aliyun SMS client library.
"""


class SmsClientError(Exception):
    """Base exception for SMS client errors."""
    pass


class ConfigurationError(SmsClientError):
    """Raised when credentials or client configuration are invalid."""
    pass


class EncodingError(SmsClientError):
    """Raised when a value cannot be percent-encoded."""
    pass


class TransportError(SmsClientError):
    """Raised when the HTTP request fails."""
    pass


class DeserializationError(SmsClientError):
    """Raised when the response body is not a valid SMS response."""
    pass
