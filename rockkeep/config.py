"""
Rockkeep - Configuration

Fixed crypto parameters, generator character sets and the per-user vault
location. Nothing here is user-tunable at runtime except the vault path.
"""

import os
from typing import Optional


# =============================================================================
# Crypto parameters (changing any of these breaks existing vaults)
# =============================================================================

KEY_SIZE = 32            # AES-256
SALT_SIZE = 16
NONCE_SIZE = 12          # 96-bit nonce for AES-GCM
TAG_SIZE = 16            # 128-bit authentication tag
PBKDF2_ITERATIONS = 600_000

# salt || nonce || ciphertext || tag, ciphertext may be empty
MIN_BLOB_SIZE = SALT_SIZE + NONCE_SIZE + TAG_SIZE


# =============================================================================
# Password generator
# =============================================================================

LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DIGITS = "0123456789"
SPECIAL = "!@#$%^&*()-_=+[]{}|;:,.<>?"

# Exclusive bounds: valid lengths are 9..31
MIN_LENGTH_EXCLUSIVE = 8
MAX_LENGTH_EXCLUSIVE = 32


# =============================================================================
# Vault location
# =============================================================================

APP_DIR_NAME = "Rockkeep"
VAULT_FILE_NAME = "passwords.json"
VAULT_PATH_ENV = "ROCKKEEP_VAULT"


def user_config_dir() -> str:
    """
    Platform per-user configuration directory.

    %APPDATA% on Windows, $XDG_CONFIG_HOME when set, otherwise ~/.config.
    """
    if os.name == "nt" and os.environ.get("APPDATA"):
        return os.environ["APPDATA"]
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return xdg
    return os.path.join(os.path.expanduser("~"), ".config")


def default_vault_path(override: Optional[str] = None) -> str:
    """
    Resolve the vault file path.

    Priority: explicit override, then $ROCKKEEP_VAULT, then
    <config dir>/Rockkeep/passwords.json.
    """
    if override:
        return os.path.abspath(os.path.expanduser(override))
    env_path = os.environ.get(VAULT_PATH_ENV)
    if env_path:
        return os.path.abspath(os.path.expanduser(env_path))
    return os.path.join(user_config_dir(), APP_DIR_NAME, VAULT_FILE_NAME)
