"""
Aliyun SMS client.

This module wires the ACS3-HMAC-SHA256 signer to a ``requests`` session and
exposes the ``SendSms`` API.
"""

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

import requests

from .constants import (
    DEFAULT_CONFIG,
    HEADER_ACS_SIGNATURE_NONCE,
    SEND_SMS_ACTION,
    SMS_API_VERSION,
)
from .credentials import Credential
from .exceptions import (
    ConfigurationError,
    DeserializationError,
    TransportError,
)
from .logger import logger
from .signer import SigningMaterial, sign_request


@dataclass(frozen=True)
class SmsResponse:
    """Body returned by ``SendSms``."""

    code: str
    message: str
    request_id: str
    biz_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.code == "OK"

    @classmethod
    def from_dict(cls, data: Any) -> "SmsResponse":
        """
        Build a response from decoded JSON.

        Raises:
            DeserializationError: If data is not an object or lacks
                Code, Message or RequestId
        """
        if not isinstance(data, dict):
            raise DeserializationError(
                f"Expected JSON object in response, received {type(data).__name__}"
            )
        try:
            return cls(
                code=data['Code'],
                message=data['Message'],
                request_id=data['RequestId'],
                biz_id=data.get('BizId'),
            )
        except KeyError as e:
            raise DeserializationError(f"Response is missing field {e}") from e


class SmsClient:
    """
    Client for the Aliyun SMS ``SendSms`` API.

    Each call is signed with a fresh timestamp and nonce, so one client can be
    shared across threads for signing; the underlying ``requests.Session``
    follows the usual ``requests`` thread-safety caveats.
    """

    def __init__(self, access_key_id: str, access_key_secret: str, **config):
        """
        Initialize SMS client.

        Args:
            access_key_id: AccessKey ID
            access_key_secret: AccessKey secret
            **config: Configuration options (endpoint, region, timeout,
                https, danger_accept_invalid_certs)

        Raises:
            ConfigurationError: If credentials or configuration are invalid
        """
        self.credential = Credential(access_key_id, access_key_secret)

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}

        # Validate configuration
        self._validate_config()

        # Create HTTP session
        self.session = requests.Session()
        self.session.verify = not self.config['danger_accept_invalid_certs']

    @classmethod
    def from_credential(cls, credential: Credential, **config) -> "SmsClient":
        return cls(credential.access_key_id, credential.access_key_secret, **config)

    def _validate_config(self):
        """Validate client configuration."""
        unknown = set(self.config) - set(DEFAULT_CONFIG)
        if unknown:
            raise ConfigurationError(f"Unknown configuration options: {', '.join(sorted(unknown))}")

        endpoint = self.config['endpoint']
        if not isinstance(endpoint, str) or not endpoint.strip():
            raise ConfigurationError("endpoint cannot be empty")
        if "://" in endpoint or "/" in endpoint:
            raise ConfigurationError("endpoint must be a host name without scheme or path")

        timeout = self.config['timeout']
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigurationError("timeout must be a positive number of seconds")

        for option in ('https', 'danger_accept_invalid_certs'):
            if not isinstance(self.config[option], bool):
                raise ConfigurationError(f"{option} must be True or False")

    @property
    def endpoint(self) -> str:
        return self.config['endpoint'].strip()

    @property
    def scheme(self) -> str:
        return 'https' if self.config['https'] else 'http'

    def build_url(self, canonical_query_string: str) -> str:
        """Build the request URL; the query string is sent exactly as signed."""
        url = f"{self.scheme}://{self.endpoint}/"
        if canonical_query_string:
            url = f"{url}?{canonical_query_string}"
        return url

    @staticmethod
    def _prepare_phone_numbers(phone_numbers: Union[str, Iterable[str]]) -> str:
        if isinstance(phone_numbers, str):
            return phone_numbers
        return ','.join(phone_numbers)

    @staticmethod
    def _prepare_template_param(template_param: Union[str, Mapping[str, Any]]) -> str:
        if isinstance(template_param, str):
            return template_param
        return json.dumps(dict(template_param), ensure_ascii=False, separators=(',', ':'))

    def send_sms(
        self,
        phone_numbers: Union[str, Iterable[str]],
        sign_name: str,
        template_code: str,
        template_param: Union[str, Mapping[str, Any]],
        material: Optional[SigningMaterial] = None,
    ) -> SmsResponse:
        """
        Send an SMS message.

        The signature name and template must have been approved in the
        SMS console beforehand.

        Args:
            phone_numbers: Recipient number, or several numbers
            sign_name: Approved signature name
            template_code: Approved template code, e.g. ``SMS_123456789``
            template_param: Template variables as a JSON string or a mapping
            material: Timestamp and nonce override, generated when omitted

        Returns:
            SmsResponse with the API result code

        Raises:
            EncodingError: If a parameter cannot be encoded
            TransportError: If the HTTP request fails
            DeserializationError: If the response body is not valid
        """
        query_params = [
            ('PhoneNumbers', self._prepare_phone_numbers(phone_numbers)),
            ('SignName', sign_name),
            ('TemplateCode', template_code),
            ('TemplateParam', self._prepare_template_param(template_param)),
        ]
        return self._make_request(SEND_SMS_ACTION, SMS_API_VERSION, query_params, material)

    def _make_request(self, action: str, version: str, query_params, material=None) -> SmsResponse:
        """
        Sign and send a GET request, then decode the JSON body.

        Raises:
            TransportError: If the HTTP request fails
            DeserializationError: If the response body is not valid
        """
        signed = sign_request(
            self.credential,
            query_params,
            host=self.endpoint,
            action=action,
            version=version,
            material=material,
        )
        url = self.build_url(signed.canonical_query_string)
        nonce = signed.headers[HEADER_ACS_SIGNATURE_NONCE]
        logger.debug(f"action={action} | host={self.endpoint} | nonce={nonce} | sending request")

        try:
            response = self.session.request(
                'GET',
                url,
                headers=dict(signed.headers),
                timeout=self.config['timeout'],
            )
        except requests.RequestException as e:
            logger.error(f"action={action} | nonce={nonce} | HTTP request failed: {e}")
            raise TransportError(f"HTTP request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"action={action} | nonce={nonce} | status={response.status_code} | invalid JSON body"
            )
            raise DeserializationError(f"Response is not valid JSON: {e}") from e

        result = SmsResponse.from_dict(data)
        logger.debug(
            f"action={action} | nonce={nonce} | request_id={result.request_id} | code={result.code}"
        )
        return result

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        return f"SmsClient(credential={self.credential!r}, endpoint={self.endpoint!r})"
