"""
Rockkeep - Local Password Vault

A small, local, single-user password vault.

Key Features:
- Local only: the vault is one JSON file in your config directory
- Strong crypto: PBKDF2-HMAC-SHA256 (600k iterations) + AES-256-GCM
- Per-secret salt and nonce: every stored password is encrypted independently
- Tamper detection: any modified byte fails decryption
- Password generator with guaranteed character classes

Components:
- crypto.py: Key derivation, encryption/decryption, password generation
- vault.py: The vault file and store/retrieve/delete/purge
- errors.py: Error kinds
- result.py: Ok/Err wrapper for front ends
- config.py: Constants and vault location

Usage:
    python rockkeep_main.py -s github          # Store a password
    python rockkeep_main.py -r github          # Retrieve it
    python rockkeep_main.py -d github          # Delete it
    python rockkeep_main.py -g 16 true         # Generate a password
    python rockkeep_main.py -p                 # Purge everything
"""

from .crypto import decrypt_secret, derive_key, encrypt_secret, generate_password
from .errors import (
    AuthenticationError,
    DuplicateEntryError,
    ErrorKind,
    InvalidArgumentError,
    MalformedDataError,
    NotFoundError,
    UnexpectedError,
    VaultError,
    VaultIOError,
)
from .vault import VaultStore

__version__ = "1.0.0"
__author__ = "Rockkeep Team"

__all__ = [
    "AuthenticationError",
    "DuplicateEntryError",
    "ErrorKind",
    "InvalidArgumentError",
    "MalformedDataError",
    "NotFoundError",
    "UnexpectedError",
    "VaultError",
    "VaultIOError",
    "VaultStore",
    "decrypt_secret",
    "derive_key",
    "encrypt_secret",
    "generate_password",
]
