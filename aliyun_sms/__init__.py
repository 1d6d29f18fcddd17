"""
Aliyun SMS Client Library

A Python client library that signs Aliyun SMS requests with the
ACS3-HMAC-SHA256 (V3) signature and sends them over HTTP.

Example usage:
    from aliyun_sms import SmsClient

    with SmsClient("your-access-key-id", "your-access-key-secret") as client:
        response = client.send_sms("18588888888", "SignName", "SMS_123", {"code": "1234"})
"""

from .client import SmsClient, SmsResponse
from .credentials import Credential
from .signer import SignedRequest, SigningMaterial, sign_request
from .exceptions import (
    SmsClientError,
    ConfigurationError,
    EncodingError,
    TransportError,
    DeserializationError
)
from .constants import (
    SIGNATURE_ALGORITHM,
    SEND_SMS_ACTION,
    SMS_API_VERSION,
    EMPTY_SHA256_HASH,
    DEFAULT_CONFIG
)

__version__ = "0.1.0"
__all__ = [
    "SmsClient",
    "SmsResponse",
    "Credential",
    "SignedRequest",
    "SigningMaterial",
    "sign_request",
    "SmsClientError",
    "ConfigurationError",
    "EncodingError",
    "TransportError",
    "DeserializationError",
    "SIGNATURE_ALGORITHM",
    "SEND_SMS_ACTION",
    "SMS_API_VERSION",
    "EMPTY_SHA256_HASH",
    "DEFAULT_CONFIG"
]
