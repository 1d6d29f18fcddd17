"""
Unit tests for ACS3-HMAC-SHA256 signing.
"""

import hashlib
import hmac
import re
import uuid
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from aliyun_sms import (
    ConfigurationError,
    Credential,
    EMPTY_SHA256_HASH,
    SIGNATURE_ALGORITHM,
    SignedRequest,
    SigningMaterial,
    sign_request,
)
from aliyun_sms.signer import (
    build_authorization_header,
    build_string_to_sign,
    hmac_sha256,
    sha256_hex,
    sign,
)

HEX64_RE = re.compile(r"^[0-9a-f]{64}$")

# Golden fixture: AK / SECRET, fixed timestamp and nonce
GOLDEN_TIMESTAMP = "2024-01-01T00:00:00Z"
GOLDEN_NONCE = "3f2b8c1e-9d4a-4e6b-8f7a-1c2d3e4f5a6b"
GOLDEN_PARAMS = [
    ("PhoneNumbers", "18588888888"),
    ("SignName", "测试"),
    ("TemplateCode", "SMS_123"),
    ("TemplateParam", '{"code":"1"}'),
]
GOLDEN_QUERY_STRING = (
    "PhoneNumbers=18588888888"
    "&SignName=%E6%B5%8B%E8%AF%95"
    "&TemplateCode=SMS_123"
    "&TemplateParam=%7B%22code%22%3A%221%22%7D"
)
GOLDEN_CANONICAL_REQUEST = (
    "GET\n"
    "/\n"
    f"{GOLDEN_QUERY_STRING}\n"
    "host:dysmsapi.aliyuncs.com\n"
    "x-acs-action:SendSms\n"
    "x-acs-content-sha256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855\n"
    "x-acs-date:2024-01-01T00:00:00Z\n"
    "x-acs-signature-nonce:3f2b8c1e-9d4a-4e6b-8f7a-1c2d3e4f5a6b\n"
    "x-acs-version:2017-05-25\n"
    "\n"
    "host;x-acs-action;x-acs-content-sha256;x-acs-date;x-acs-signature-nonce;x-acs-version\n"
    "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
)
GOLDEN_HASHED_CANONICAL_REQUEST = "97a4ac3d279f59bb5120f9ac96572cb6efc044795088ec8e9e5cac4e53bc961e"
GOLDEN_STRING_TO_SIGN = f"ACS3-HMAC-SHA256\n{GOLDEN_HASHED_CANONICAL_REQUEST}"
GOLDEN_SIGNATURE = "dac173261c8e4484fdd37b992d693725a123cdada2070471b6401cf01e270dda"
GOLDEN_AUTHORIZATION = (
    "ACS3-HMAC-SHA256 Credential=AK,"
    "SignedHeaders=host;x-acs-action;x-acs-content-sha256;x-acs-date;"
    "x-acs-signature-nonce;x-acs-version,"
    f"Signature={GOLDEN_SIGNATURE}"
)


@pytest.fixture(scope="module")
def credential() -> Credential:
    return Credential("AK", "SECRET")


@pytest.fixture
def material() -> SigningMaterial:
    return SigningMaterial(timestamp=GOLDEN_TIMESTAMP, nonce=GOLDEN_NONCE)


def golden_sign(credential, material) -> SignedRequest:
    return sign_request(
        credential,
        GOLDEN_PARAMS,
        host="dysmsapi.aliyuncs.com",
        action="SendSms",
        version="2017-05-25",
        material=material,
    )


class TestCredential:
    """Test credential validation."""

    @pytest.mark.parametrize("key_id, secret", [
        ("", "SECRET"),
        ("AK", ""),
        (None, "SECRET"),
        ("AK", None),
    ])
    def test_missing_values_raise(self, key_id, secret):
        with pytest.raises(ConfigurationError):
            Credential(key_id, secret)

    @pytest.mark.parametrize("key_id", ["A,K", "A K", "AK\n", "A\x00K", "A;K", "A=K"])
    def test_key_id_breaking_header_raises(self, key_id):
        with pytest.raises(ConfigurationError):
            Credential(key_id, "SECRET")

    def test_secret_not_encodable_raises(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Credential("AK", "SEC\ud800RET")

        assert "SEC" not in str(exc_info.value)
        assert exc_info.value.__cause__ is None

    def test_secret_not_in_repr(self):
        credential = Credential("AK", "TOP-SECRET-VALUE")

        assert "TOP-SECRET-VALUE" not in repr(credential)
        assert "AK" in repr(credential)

    def test_error_message_does_not_leak_secret(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Credential("A,K", "TOP-SECRET-VALUE")

        assert "TOP-SECRET-VALUE" not in str(exc_info.value)

    def test_immutable(self, credential):
        with pytest.raises(AttributeError):
            credential.access_key_secret = "other"

    def test_secret_bytes(self):
        assert Credential("AK", "密钥").secret_bytes == "密钥".encode("utf-8")


class TestHashing:
    """Test hash and HMAC primitives."""

    def test_empty_payload_constant(self):
        assert sha256_hex(b"") == EMPTY_SHA256_HASH
        assert sha256_hex("") == EMPTY_SHA256_HASH
        assert EMPTY_SHA256_HASH == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    @pytest.mark.parametrize("data", [b"", b"a", "测试", b"x" * 10000])
    def test_sha256_hex_is_64_lowercase_hex(self, data):
        assert HEX64_RE.match(sha256_hex(data))

    def test_str_is_utf8_encoded(self):
        assert sha256_hex("测试") == hashlib.sha256("测试".encode("utf-8")).hexdigest()

    def test_hmac_sha256(self):
        expected = hmac.new(b"key", b"message", hashlib.sha256).digest()

        assert hmac_sha256(b"key", b"message") == expected
        assert len(hmac_sha256(b"key", b"message")) == 32

    def test_sign_is_64_lowercase_hex(self, credential):
        assert HEX64_RE.match(sign(credential, "anything"))
        assert HEX64_RE.match(sign(credential, ""))

    def test_sign_uses_secret_as_key(self, credential):
        expected = hmac.new(b"SECRET", b"payload", hashlib.sha256).hexdigest()

        assert sign(credential, "payload") == expected


class TestFormatting:
    """Test string to sign and Authorization header formatting."""

    def test_string_to_sign(self):
        assert build_string_to_sign("ALG", "abc") == "ALG\nabc"

    def test_authorization_header(self, credential):
        header = build_authorization_header("ALG", credential, "host;x-a", "f00")

        assert header == "ALG Credential=AK,SignedHeaders=host;x-a,Signature=f00"


class TestSigningMaterial:
    """Test per-request timestamp and nonce generation."""

    def test_fresh_defaults(self):
        material = SigningMaterial.fresh()

        assert material.algorithm == SIGNATURE_ALGORITHM
        assert material.payload_hash == EMPTY_SHA256_HASH
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$", material.timestamp)
        assert uuid.UUID(material.nonce).version == 4

    def test_fresh_nonces_unique(self):
        nonces = {SigningMaterial.fresh().nonce for _ in range(100)}

        assert len(nonces) == 100


class TestSignRequest:
    """Test the full signing pipeline against the golden fixture."""

    def test_golden_canonical_query_string(self, credential, material):
        assert golden_sign(credential, material).canonical_query_string == GOLDEN_QUERY_STRING

    def test_golden_canonical_request(self, credential, material):
        assert golden_sign(credential, material).canonical_request == GOLDEN_CANONICAL_REQUEST

    def test_golden_string_to_sign(self, credential, material):
        assert sha256_hex(GOLDEN_CANONICAL_REQUEST) == GOLDEN_HASHED_CANONICAL_REQUEST
        assert golden_sign(credential, material).string_to_sign == GOLDEN_STRING_TO_SIGN

    def test_golden_signature(self, credential, material):
        assert golden_sign(credential, material).signature == GOLDEN_SIGNATURE

    def test_golden_authorization(self, credential, material):
        assert golden_sign(credential, material).authorization == GOLDEN_AUTHORIZATION

    def test_golden_headers(self, credential, material):
        headers = golden_sign(credential, material).headers

        assert headers == {
            "Authorization": GOLDEN_AUTHORIZATION,
            "host": "dysmsapi.aliyuncs.com",
            "x-acs-action": "SendSms",
            "x-acs-content-sha256": EMPTY_SHA256_HASH,
            "x-acs-date": GOLDEN_TIMESTAMP,
            "x-acs-signature-nonce": GOLDEN_NONCE,
            "x-acs-version": "2017-05-25",
        }

    def test_deterministic(self, credential, material):
        results = {golden_sign(credential, material).authorization for _ in range(10)}

        assert results == {GOLDEN_AUTHORIZATION}

    def test_param_order_irrelevant(self, credential, material):
        signed = sign_request(
            credential,
            list(reversed(GOLDEN_PARAMS)),
            host="dysmsapi.aliyuncs.com",
            action="SendSms",
            version="2017-05-25",
            material=material,
        )

        assert signed.authorization == GOLDEN_AUTHORIZATION

    def test_method_uppercased(self, credential, material):
        signed = sign_request(
            credential,
            GOLDEN_PARAMS,
            host="dysmsapi.aliyuncs.com",
            action="SendSms",
            version="2017-05-25",
            method="get",
            material=material,
        )

        assert signed.signature == GOLDEN_SIGNATURE

    def test_different_secret_changes_signature(self, material):
        signed = golden_sign(Credential("AK", "OTHER"), material)

        assert signed.canonical_request == GOLDEN_CANONICAL_REQUEST
        assert signed.signature != GOLDEN_SIGNATURE

    def test_fresh_material_per_call(self, credential):
        first = sign_request(credential, GOLDEN_PARAMS, host="h", action="a", version="v")
        second = sign_request(credential, GOLDEN_PARAMS, host="h", action="a", version="v")

        assert first.headers["x-acs-signature-nonce"] != second.headers["x-acs-signature-nonce"]
        assert first.signature != second.signature

    @pytest.mark.parametrize("credential", [None, ("AK", "SECRET"), {"access_key_id": "AK"}])
    def test_invalid_credential_fails_before_hashing(self, credential, material):
        with patch("aliyun_sms.signer.sha256_hex") as mock_hash, \
                patch("aliyun_sms.signer.hmac_sha256") as mock_hmac:
            with pytest.raises(ConfigurationError):
                golden_sign(credential, material)

        mock_hash.assert_not_called()
        mock_hmac.assert_not_called()

    def test_concurrent_signing(self, credential, material):
        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(
                lambda _: golden_sign(credential, material).authorization, range(50)
            ))

        assert set(results) == {GOLDEN_AUTHORIZATION}
