"""
Rockkeep - Vault Module

This file handles:
- The vault file (flat JSON object: service name -> base64 encrypted blob)
- Storing/retrieving/deleting passwords
- Purging the whole vault directory

File structure:
    {
        "github": "<base64 salt||nonce||ciphertext||tag>",
        "email": "..."
    }

The vault never holds plaintext. Writes go to a temporary file in the same
directory which then replaces the vault file, so a reader never sees a
half-written vault.

No locking: two processes doing read-modify-write on the same vault can
lose an update. Callers must serialize externally.
"""

import json
import os
import shutil
import tempfile
from typing import Dict, List, Optional

from . import crypto
from .config import APP_DIR_NAME, default_vault_path
from .errors import (
    DuplicateEntryError,
    InvalidArgumentError,
    NotFoundError,
    VaultIOError,
)


def _require(value: Optional[str], name: str) -> None:
    if value is None or not value.strip():
        raise InvalidArgumentError(f"{name} cannot be empty or whitespace")


# =============================================================================
# VAULT STORE
# =============================================================================

class VaultStore:
    """
    Password vault backed by a single JSON file.

    Usage:
        store = VaultStore("/home/me/.config/Rockkeep/passwords.json")

        store.store("master password", "s3cr3t!", "github")
        secret = store.retrieve("master password", "github")
        store.delete("github")

        store.purge()   # removes the whole Rockkeep directory
    """

    def __init__(self, vault_path: Optional[str] = None):
        """
        Args:
            vault_path: Path to the vault JSON file. Defaults to the per-user
                        location from config.default_vault_path().
        """
        self.vault_path = vault_path or default_vault_path()
        self.vault_dir = os.path.dirname(os.path.abspath(self.vault_path))

    @property
    def exists(self) -> bool:
        return os.path.isfile(self.vault_path)

    # =========================================================================
    # PUBLIC OPERATIONS
    # =========================================================================

    def store(self, master_password: str, secret: str, service: str) -> None:
        """
        Encrypt `secret` and add it under `service`.

        Insert-only: a service that already has a password is rejected, the
        existing entry is left untouched.

        Raises:
            InvalidArgumentError: Any argument empty or whitespace
            DuplicateEntryError: Service already stored
            VaultIOError: Directory creation or file write failed
        """
        _require(secret, "password")
        _require(master_password, "master password")
        _require(service, "service")

        self._ensure_directory()
        passwords = self.load()
        if service in passwords:
            raise DuplicateEntryError(
                f"a password for service '{service}' is already stored"
            )

        data = bytearray(secret.encode('utf-8'))
        try:
            blob = crypto.encrypt_secret(data, master_password)
        finally:
            crypto.wipe(data)

        passwords[service] = crypto.encode_blob(blob)
        self._save(passwords)

    def retrieve(self, master_password: str, service: str) -> str:
        """
        Decrypt and return the password stored for `service`.

        Raises:
            InvalidArgumentError: Empty master password or service
            NotFoundError: Service not in the vault
            MalformedDataError: Stored value is not a valid blob
            AuthenticationError: Wrong master password or tampered blob
        """
        _require(master_password, "master password")
        _require(service, "service")

        passwords = self.load()
        if service not in passwords:
            raise NotFoundError(f"service '{service}' not found in stored passwords")

        blob = crypto.decode_blob(passwords[service])
        plaintext = bytearray(crypto.decrypt_secret(blob, master_password))
        try:
            return plaintext.decode('utf-8')
        finally:
            crypto.wipe(plaintext)

    def delete(self, service: str) -> None:
        """
        Remove the entry for `service` and rewrite the vault.

        Raises:
            InvalidArgumentError: Empty service
            NotFoundError: Service not in the vault
            VaultIOError: File write failed
        """
        _require(service, "service")

        passwords = self.load()
        if service not in passwords:
            raise NotFoundError(f"service '{service}' not found in stored passwords")

        del passwords[service]
        self._save(passwords)

    def purge(self) -> bool:
        """
        Delete the vault directory with everything in it.

        Only a directory named `Rockkeep` (the per-user app directory) is
        removed wholesale. Any other directory, e.g. one picked with
        $ROCKKEEP_VAULT, only loses the vault's own files, and is left alone
        entirely if it holds anything else.

        Returns:
            True if something was removed, False if there was nothing to remove

        Raises:
            VaultIOError: Directory could not be removed, or it is not the
                          app directory and holds files that are not the vault's
        """
        if not os.path.lexists(self.vault_dir):
            return False
        if os.path.basename(self.vault_dir) != APP_DIR_NAME:
            return self._purge_vault_files()
        try:
            shutil.rmtree(self.vault_dir)
        except FileNotFoundError:
            # Vanished between the check and the removal
            return False
        except OSError as e:
            raise VaultIOError(f"could not purge {self.vault_dir}: {e.strerror or e}") from e
        return True

    def services(self) -> List[str]:
        """Sorted service names (nothing is decrypted)."""
        return sorted(self.load())

    def load(self) -> Dict[str, str]:
        """
        Read the vault file.

        Missing, empty, unparseable or wrongly shaped files all load as an
        empty vault. Only a file that exists but cannot be read raises.

        Returns:
            Dict of service name -> base64 blob

        Raises:
            VaultIOError: File exists but reading it failed
        """
        try:
            with open(self.vault_path, 'r', encoding='utf-8') as f:
                raw = f.read()
        except (FileNotFoundError, NotADirectoryError):
            return {}
        except IsADirectoryError as e:
            raise VaultIOError(f"vault path {self.vault_path} is a directory") from e
        except UnicodeDecodeError:
            return {}
        except OSError as e:
            raise VaultIOError(f"could not read vault: {e.strerror or e}") from e

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            return {}
        if not isinstance(data, dict):
            return {}
        if not all(isinstance(k, str) and isinstance(v, str) for k, v in data.items()):
            return {}
        return data

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _ensure_directory(self) -> None:
        try:
            os.makedirs(self.vault_dir, exist_ok=True)
        except OSError as e:
            raise VaultIOError(
                f"could not create directory {self.vault_dir}: {e.strerror or e}"
            ) from e

    def _owns(self, name: str) -> bool:
        """Whether a directory entry is the vault file or one of its temp files."""
        if name == os.path.basename(self.vault_path):
            return True
        return name.startswith(".passwords-") and name.endswith(".tmp")

    def _purge_vault_files(self) -> bool:
        try:
            names = os.listdir(self.vault_dir)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise VaultIOError(f"could not purge {self.vault_dir}: {e.strerror or e}") from e

        foreign = sorted(name for name in names if not self._owns(name))
        if foreign:
            raise VaultIOError(
                f"refusing to purge {self.vault_dir}: it also holds files that "
                f"are not part of the vault ({', '.join(foreign[:3])})"
            )

        for name in names:
            try:
                os.unlink(os.path.join(self.vault_dir, name))
            except FileNotFoundError:
                continue
            except OSError as e:
                raise VaultIOError(f"could not remove {name}: {e.strerror or e}") from e
        return bool(names)

    def _save(self, passwords: Dict[str, str]) -> None:
        """Write the vault atomically (temp file + os.replace)."""
        payload = json.dumps(passwords, indent=2, sort_keys=True)

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=".passwords-", suffix=".tmp", dir=self.vault_dir
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.vault_path)
            tmp_path = None
        except OSError as e:
            raise VaultIOError(f"could not write vault: {e.strerror or e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
