"""
ACS3-HMAC-SHA256 request signing.

This module turns canonicalized request data and a credential into the
``Authorization`` header expected by Aliyun RPC-style APIs:

1. hash the canonical request with SHA-256
2. build the string to sign: ``algorithm + "\\n" + hashed canonical request``
3. HMAC-SHA256 the string to sign with the AccessKey secret
4. format ``Credential``, ``SignedHeaders`` and ``Signature`` into the header

All functions are stateless and safe to call from multiple threads.
"""

import datetime
import hashlib
import hmac
import uuid
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Union

from .canonical import (
    build_canonical_headers,
    build_canonical_request,
    generate_canonical_query_string,
    signed_header_names,
)
from .constants import (
    ACS_TIMESTAMP_FORMAT,
    EMPTY_SHA256_HASH,
    HEADER_ACS_ACTION,
    HEADER_ACS_CONTENT_SHA256,
    HEADER_ACS_DATE,
    HEADER_ACS_SIGNATURE_NONCE,
    HEADER_ACS_VERSION,
    HEADER_AUTHORIZATION,
    HEADER_HOST,
    SIGNATURE_ALGORITHM,
)
from .credentials import Credential
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class SigningMaterial:
    """Per-request inputs that must never be reused across requests."""

    timestamp: str
    nonce: str
    payload_hash: str = EMPTY_SHA256_HASH
    algorithm: str = SIGNATURE_ALGORITHM

    @classmethod
    def fresh(cls) -> "SigningMaterial":
        """Generate a new UTC timestamp and UUID v4 nonce."""
        timestamp = datetime.datetime.now(datetime.timezone.utc).strftime(ACS_TIMESTAMP_FORMAT)
        return cls(timestamp=timestamp, nonce=str(uuid.uuid4()))


@dataclass(frozen=True)
class SignedRequest:
    """Result of signing, with every intermediate string kept for inspection."""

    canonical_query_string: str
    canonical_request: str
    string_to_sign: str
    signature: str
    authorization: str
    headers: Dict[str, str]


def sha256_hex(data: Union[bytes, str]) -> str:
    """Return the lowercase hex SHA-256 digest; text is UTF-8 encoded first."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).hexdigest()


def hmac_sha256(key: bytes, message: bytes) -> bytes:
    return hmac.new(key, message, hashlib.sha256).digest()


def build_string_to_sign(algorithm: str, hashed_canonical_request: str) -> str:
    return f"{algorithm}\n{hashed_canonical_request}"


def sign(credential: Credential, string_to_sign: str) -> str:
    """
    Compute the request signature.

    Args:
        credential: AccessKey pair; only the secret is used
        string_to_sign: Output of ``build_string_to_sign``

    Returns:
        Lowercase hex HMAC-SHA256 signature (64 characters)
    """
    return hmac_sha256(credential.secret_bytes, string_to_sign.encode('utf-8')).hex()


def build_authorization_header(
    algorithm: str,
    credential: Credential,
    signed_headers: str,
    signature: str,
) -> str:
    """Format the ``Authorization`` header value."""
    return (
        f"{algorithm} Credential={credential.access_key_id},"
        f"SignedHeaders={signed_headers},Signature={signature}"
    )


def sign_request(
    credential: Credential,
    params: Iterable[Tuple[str, str]],
    *,
    host: str,
    action: str,
    version: str,
    method: str = "GET",
    uri: str = "/",
    material: Optional[SigningMaterial] = None,
) -> SignedRequest:
    """
    Run the full signing pipeline for one request.

    Args:
        credential: AccessKey pair
        params: Query parameters as ``(name, value)`` pairs
        host: API endpoint host, e.g. ``dysmsapi.aliyuncs.com``
        action: API action, sent as ``x-acs-action``
        version: API version, sent as ``x-acs-version``
        method: HTTP method
        uri: Canonical resource path
        material: Timestamp and nonce to sign with; generated when omitted

    Returns:
        SignedRequest carrying the headers to attach to the HTTP request

    Raises:
        ConfigurationError: If credential is not a Credential
        EncodingError: If a query parameter cannot be encoded
    """
    if not isinstance(credential, Credential):
        raise ConfigurationError(
            "Expected Credential for signing but received "
            f"{type(credential).__name__}."
        )
    if material is None:
        material = SigningMaterial.fresh()

    canonical_query_string = generate_canonical_query_string(params)
    headers = {
        HEADER_HOST: host,
        HEADER_ACS_ACTION: action,
        HEADER_ACS_CONTENT_SHA256: material.payload_hash,
        HEADER_ACS_DATE: material.timestamp,
        HEADER_ACS_SIGNATURE_NONCE: material.nonce,
        HEADER_ACS_VERSION: version,
    }
    signed_headers = signed_header_names()
    canonical_request = build_canonical_request(
        method.upper(),
        uri,
        canonical_query_string,
        build_canonical_headers(headers),
        signed_headers,
        material.payload_hash,
    )

    string_to_sign = build_string_to_sign(material.algorithm, sha256_hex(canonical_request))
    signature = sign(credential, string_to_sign)
    authorization = build_authorization_header(
        material.algorithm, credential, signed_headers, signature
    )

    return SignedRequest(
        canonical_query_string=canonical_query_string,
        canonical_request=canonical_request,
        string_to_sign=string_to_sign,
        signature=signature,
        authorization=authorization,
        headers={HEADER_AUTHORIZATION: authorization, **headers},
    )
