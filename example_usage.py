#!/usr/bin/env python3
"""
Basic usage examples for the Aliyun SMS client library.

This script shows how to sign a SendSms request offline and how to send
one with real credentials taken from the environment:

    ACCESS_KEY_ID=... ACCESS_KEY_SECRET=... python example_usage.py 18588888888
"""

import logging
import os
import sys

from aliyun_sms import (
    SmsClient,
    SmsClientError,
    Credential,
    SigningMaterial,
    sign_request,
)
from aliyun_sms.logger import add_stream_handler


def demonstrate_offline_signing():
    """Sign a request with fixed inputs; no network access needed."""

    print("=== Offline Signing Example ===\n")

    credential = Credential("AK", "SECRET")
    material = SigningMaterial(
        timestamp="2024-01-01T00:00:00Z",
        nonce="3f2b8c1e-9d4a-4e6b-8f7a-1c2d3e4f5a6b",
    )
    signed = sign_request(
        credential,
        [
            ("PhoneNumbers", "18588888888"),
            ("SignName", "测试"),
            ("TemplateCode", "SMS_123"),
            ("TemplateParam", '{"code":"1"}'),
        ],
        host="dysmsapi.aliyuncs.com",
        action="SendSms",
        version="2017-05-25",
        material=material,
    )

    print(f"Canonical query string:\n  {signed.canonical_query_string}\n")
    print(f"Canonical request:\n{signed.canonical_request}\n")
    print(f"String to sign:\n{signed.string_to_sign}\n")
    print(f"Authorization:\n  {signed.authorization}\n")


def send_with_environment_credentials(phone_number: str):
    """Send a real message using ACCESS_KEY_ID / ACCESS_KEY_SECRET."""

    print("=== Send SMS Example ===\n")

    try:
        with SmsClient(
            os.environ.get("ACCESS_KEY_ID", ""),
            os.environ.get("ACCESS_KEY_SECRET", ""),
            timeout=5,
        ) as client:
            response = client.send_sms(
                phone_number,
                os.environ.get("SMS_SIGN_NAME", "模板名称"),
                os.environ.get("SMS_TEMPLATE_CODE", "SMS_123456789"),
                {"code": "3306"},
            )
    except SmsClientError as e:
        print(f"SMS Client Error: {e}")
        sys.exit(1)

    if response.ok:
        print(f"✓ Sent, BizId={response.biz_id} RequestId={response.request_id}")
    else:
        print(f"✗ Rejected: {response.code} {response.message} (RequestId={response.request_id})")


if __name__ == "__main__":
    add_stream_handler(logging.DEBUG)
    demonstrate_offline_signing()

    if len(sys.argv) > 1:
        send_with_environment_credentials(sys.argv[1])
    else:
        print("Pass a phone number to send a real message.")
