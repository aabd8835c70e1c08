"""
Rockkeep - Cryptography Module

All cryptographic operations of the vault live in this one file:

    1. Master Password + random salt -> PBKDF2-HMAC-SHA256 -> Key (32 bytes)
    2. Key + random nonce -> AES-256-GCM -> ciphertext + 16-byte tag
    3. Blob = salt || nonce || ciphertext || tag  (base64 on disk)
    4. Random password generation from character classes

Every secret gets its own salt and nonce, so no key/nonce pair is ever used
twice. Keys only exist for the duration of one encrypt or decrypt call and are
overwritten with zeros before the call returns.

Nothing in this module performs I/O, prints or logs.
"""

import base64
import binascii
import os
import secrets
from typing import List, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .config import (
    DIGITS,
    KEY_SIZE,
    LOWERCASE,
    MAX_LENGTH_EXCLUSIVE,
    MIN_BLOB_SIZE,
    MIN_LENGTH_EXCLUSIVE,
    NONCE_SIZE,
    PBKDF2_ITERATIONS,
    SALT_SIZE,
    SPECIAL,
    UPPERCASE,
)
from .errors import AuthenticationError, InvalidArgumentError, MalformedDataError


# =============================================================================
# Memory hygiene
# =============================================================================

def wipe(buf: Optional[bytearray]) -> None:
    """
    Overwrite a mutable buffer with zeros in place.

    Best effort only: immutable copies made by Python or by the crypto
    backend cannot be reached from here.
    """
    if buf:
        buf[:] = bytes(len(buf))


# =============================================================================
# Key Derivation
# =============================================================================

def derive_key(master_password: str, salt: bytes) -> bytearray:
    """
    Derive the 32-byte encryption key from the master password.

    PBKDF2-HMAC-SHA256 with 600,000 iterations. Same password and salt always
    give the same key, which is what lets decrypt rebuild it from the salt
    stored in the blob.

    Args:
        master_password: User's master password
        salt: 16-byte salt taken from (or destined for) the blob

    Returns:
        32-byte key as a bytearray so the caller can wipe it

    Raises:
        ValueError: If salt is not 16 bytes (programming error)
    """
    if len(salt) != SALT_SIZE:
        raise ValueError(f"salt must be {SALT_SIZE} bytes, got {len(salt)}")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=bytes(salt),
        iterations=PBKDF2_ITERATIONS,
    )
    password = bytearray(master_password.encode('utf-8'))
    try:
        return bytearray(kdf.derive(password))
    finally:
        wipe(password)


# =============================================================================
# Encryption (AES-256-GCM)
# =============================================================================

def encrypt_secret(plaintext: bytes, master_password: str) -> bytes:
    """
    Encrypt one secret into a self-contained blob.

    Layout of the returned blob:
        salt (16) || nonce (12) || ciphertext (len(plaintext)) || tag (16)

    No associated data is bound; the tag covers the ciphertext only.

    Args:
        plaintext: The secret to protect
        master_password: Master password the key is derived from

    Returns:
        Raw blob bytes (use encode_blob() before writing to JSON)
    """
    salt = os.urandom(SALT_SIZE)
    # NEVER reuse: fresh nonce per blob, and a fresh key through the fresh salt
    nonce = os.urandom(NONCE_SIZE)

    data = bytearray(plaintext)
    key = None
    try:
        key = derive_key(master_password, salt)
        # AESGCM returns ciphertext || tag
        sealed = AESGCM(key).encrypt(nonce, data, None)
        return salt + nonce + sealed
    finally:
        wipe(key)
        wipe(data)


def decrypt_secret(blob: bytes, master_password: str) -> bytes:
    """
    Decrypt a blob produced by encrypt_secret().

    A wrong master password and a corrupted or tampered blob both fail the
    GCM tag check and raise the same AuthenticationError.

    Args:
        blob: salt || nonce || ciphertext || tag
        master_password: Master password used at encryption time

    Returns:
        Plaintext bytes

    Raises:
        MalformedDataError: Blob shorter than 44 bytes
        AuthenticationError: Tag mismatch
    """
    if len(blob) < MIN_BLOB_SIZE:
        raise MalformedDataError(
            f"encrypted data is too short ({len(blob)} bytes, "
            f"minimum {MIN_BLOB_SIZE})"
        )

    salt = blob[:SALT_SIZE]
    nonce = blob[SALT_SIZE:SALT_SIZE + NONCE_SIZE]
    sealed = blob[SALT_SIZE + NONCE_SIZE:]

    key = None
    try:
        key = derive_key(master_password, salt)
        return AESGCM(key).decrypt(nonce, sealed, None)
    except InvalidTag:
        raise AuthenticationError() from None
    finally:
        wipe(key)


def encode_blob(blob: bytes) -> str:
    """Base64 text form of a blob, as stored in the vault file."""
    return base64.b64encode(blob).decode('ascii')


def decode_blob(text: str) -> bytes:
    """
    Inverse of encode_blob().

    Raises:
        MalformedDataError: If text is not valid base64
    """
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        raise MalformedDataError("stored value is not valid base64") from None


# =============================================================================
# Password Generation
# =============================================================================

def generate_password(length: int, include_special: bool) -> str:
    """
    Generate a random password with guaranteed character-class coverage.

    One character is drawn from each enabled class (lowercase, uppercase,
    digits, and special when requested), the remaining positions are drawn
    from the union of enabled classes, and the whole sequence is then
    Fisher-Yates shuffled so the guaranteed characters don't sit at fixed
    positions. All draws use the `secrets` CSPRNG.

    Args:
        length: Password length, strictly between 8 and 32 (9..31)
        include_special: Include characters from !@#$%^&*()-_=+[]{}|;:,.<>?

    Returns:
        Password string of exactly `length` characters

    Raises:
        InvalidArgumentError: If length is not an int in 9..31
    """
    if isinstance(length, bool) or not isinstance(length, int):
        raise InvalidArgumentError("password length must be an integer")
    if length <= MIN_LENGTH_EXCLUSIVE or length >= MAX_LENGTH_EXCLUSIVE:
        raise InvalidArgumentError(
            f"password length must be greater than {MIN_LENGTH_EXCLUSIVE} "
            f"and less than {MAX_LENGTH_EXCLUSIVE}"
        )

    classes = [LOWERCASE, UPPERCASE, DIGITS]
    if include_special:
        classes.append(SPECIAL)
    charset = "".join(classes)

    chars: List[str] = [secrets.choice(cls) for cls in classes]
    chars.extend(secrets.choice(charset) for _ in range(length - len(chars)))

    # Fisher-Yates
    for i in range(length - 1, 0, -1):
        j = secrets.randbelow(i + 1)
        chars[i], chars[j] = chars[j], chars[i]

    return "".join(chars)
