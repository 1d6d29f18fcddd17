"""
Constants for the Aliyun SMS client library.
Values follow the ACS v3 request structure and signature documentation.
"""

# Signature algorithm (ACS v3)
SIGNATURE_ALGORITHM = "ACS3-HMAC-SHA256"

# SendSms API
SEND_SMS_ACTION = "SendSms"
SMS_API_VERSION = "2017-05-25"

# HTTP Headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_HOST = "host"
HEADER_ACS_ACTION = "x-acs-action"
HEADER_ACS_CONTENT_SHA256 = "x-acs-content-sha256"
HEADER_ACS_DATE = "x-acs-date"
HEADER_ACS_SIGNATURE_NONCE = "x-acs-signature-nonce"
HEADER_ACS_VERSION = "x-acs-version"

# Signed headers, lowercase and in ascending order
SIGNED_HEADERS = (
    HEADER_HOST,
    HEADER_ACS_ACTION,
    HEADER_ACS_CONTENT_SHA256,
    HEADER_ACS_DATE,
    HEADER_ACS_SIGNATURE_NONCE,
    HEADER_ACS_VERSION,
)

# SHA-256 of the empty payload sent with every GET
EMPTY_SHA256_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

ACS_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Default configuration values
DEFAULT_CONFIG = {
    'endpoint': 'dysmsapi.aliyuncs.com',
    'region': 'cn-shanghai',
    'timeout': 3.0,                         # HTTP timeout in seconds
    'https': True,
    'danger_accept_invalid_certs': False,
}
