"""Secure Cookie Codec - authenticated encryption of cookie payloads with Fernet.

Invariants:
    - The cookie name is bound into the encrypted payload: a tru-session value can never be
      replayed as tru-user
    - Decoding failures of any kind raise CookieError, never a cryptography exception
    - Keys are configured as hex strings (cookie_hash_key, cookie_encrypt_key)
    - Empty or all-zero keys are refused: a codec is never built from a guessable key

Design Decisions:
    - Fernet key = 16 signing bytes derived from the hash key + 16 encryption bytes derived
      from the encrypt key, so both configured secrets keep their role
"""

import base64
import binascii
import hashlib
import json

from cryptography.fernet import Fernet, InvalidToken

from octopus.core.errors import CookieError


class SecureCookie:
    """Encode/decode dict payloads into opaque cookie values."""

    def __init__(self, hash_key_hex: str, encrypt_key_hex: str):
        try:
            hash_key = bytes.fromhex(hash_key_hex)
            encrypt_key = bytes.fromhex(encrypt_key_hex)
        except ValueError as e:
            raise CookieError(f"Cookie keys must be hex encoded: {e}")
        if not any(hash_key) or not any(encrypt_key):
            raise CookieError("Cookie keys are not configured")
        signing = hashlib.sha256(hash_key).digest()[:16]
        encryption = hashlib.sha256(encrypt_key).digest()[:16]
        self._fernet = Fernet(base64.urlsafe_b64encode(signing + encryption))

    def encode(self, name: str, payload: dict) -> str:
        body = json.dumps({"name": name, "value": payload}, separators=(",", ":"))
        return self._fernet.encrypt(body.encode()).decode()

    def decode(self, name: str, value: str) -> dict:
        try:
            raw = self._fernet.decrypt(value.encode())
            envelope = json.loads(raw)
        except (InvalidToken, binascii.Error, ValueError) as e:
            raise CookieError(f"Invalid {name} cookie: {type(e).__name__}")
        if not isinstance(envelope, dict) or envelope.get("name") != name:
            raise CookieError(f"Cookie value is not a {name} cookie")
        payload = envelope.get("value")
        if not isinstance(payload, dict):
            raise CookieError(f"Malformed {name} cookie")
        return payload
