"""
signatures.py — Login codes and confirmation keys for the mobile authenticator.

Pure functions, no I/O and no clock access: callers pass the time value in.

- Login codes follow RFC 6238 (HMAC-SHA1, 30s step, 8-byte big-endian counter,
  dynamic truncation) but render the truncated value as 5 characters from a
  26-symbol alphabet instead of decimal digits.
- Confirmation keys are HMAC-SHA1 over (8-byte big-endian time + tag prefix),
  returned as standard base64.

Both secrets arrive base64-encoded; HMAC is always keyed with the decoded bytes.
"""

import base64
import binascii
import hashlib
import hmac
import struct

# --- Config / constants ----------------------------------------------------
TIME_STEP = 30              # seconds per login code
CODE_LENGTH = 5
CODE_CHARACTERS = "23456789BCDFGHJKMNPQRTVWXY"
MAX_TAG_LENGTH = 32         # bytes of tag mixed into a confirmation key


# --- RFC helpers -----------------------------------------------------------
def decode_secret(secret_b64: str) -> bytes:
    """
    Decode a base64 secret into the raw key bytes.

    Raises:
        ValueError: empty or malformed base64
    """
    if not secret_b64:
        raise ValueError("Secret is empty")
    try:
        return base64.b64decode(secret_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Invalid base64 secret") from e


def int_to_bytes(i: int) -> bytes:
    """
    Encode an integer as the 8-byte big-endian buffer used for HMAC messages.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation.

    - offset = last_byte & 0x0F
    - take 4 bytes from offset, clearing the MSB of the first
    - returns a 31-bit unsigned integer
    """
    offset = hmac_digest[-1] & 0x0F
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    return code


# --- Login codes -----------------------------------------------------------
def generate_code(shared_secret: str, time: int) -> str:
    """
    Derive the login code valid for the 30-second window containing `time`.

    Steps:
    1. base64-decode shared_secret -> raw key bytes
    2. message = 8-byte big-endian (time // 30)
    3. HMAC-SHA1(key, message)
    4. dynamic truncate -> code point
    5. 5 x (code point mod 26) as index into CODE_CHARACTERS,
       least-significant character first

    Arguments:
        shared_secret: base64 shared secret
        time: unix time in seconds (already corrected to server time)

    Raises:
        ValueError: time is zero or the secret is not valid base64
    """
    if not time:
        raise ValueError("Time must be non-zero")

    key = decode_secret(shared_secret)
    msg = int_to_bytes(time // TIME_STEP)
    digest = hmac.new(key, msg, hashlib.sha1).digest()

    code_point = dynamic_truncate(digest)
    chars = []
    for _ in range(CODE_LENGTH):
        chars.append(CODE_CHARACTERS[code_point % len(CODE_CHARACTERS)])
        code_point //= len(CODE_CHARACTERS)
    return "".join(chars)


# --- Confirmation keys -----------------------------------------------------
def confirmation_buffer(time: int, tag: str = None) -> bytes:
    """
    Build the message signed by a confirmation key.

    First 8 bytes: `time` widened to a signed 64-bit big-endian integer.
    Then at most MAX_TAG_LENGTH bytes of the UTF-8 tag; longer tags are cut,
    so two tags sharing their first 32 bytes produce the same buffer.
    """
    buffer = int_to_bytes(time)
    if tag:
        buffer += tag.encode("utf-8")[:MAX_TAG_LENGTH]
    return buffer


def generate_confirmation_key(identity_secret: str, time: int, tag: str = None) -> str:
    """
    Derive the base64 confirmation key for `time` and an optional `tag`.

    Raises:
        ValueError: time is zero or the secret is not valid base64
    """
    if not time:
        raise ValueError("Time must be non-zero")

    key = decode_secret(identity_secret)
    digest = hmac.new(key, confirmation_buffer(time, tag), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")
