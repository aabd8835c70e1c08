"""
Rockkeep - Attack Demonstration

Run: python attack_demo.py

What it shows (and why attacks fail):
1) Wrong master password cannot decrypt a stored password.
2) Ciphertext tampering in the vault file is detected by AES-GCM.
3) Tag tampering is detected the same way (same error, no extra detail).
4) Truncated blobs are rejected before any decryption is attempted.
5) Re-storing a service cannot silently overwrite the original.
"""

import json
import os
import shutil
import tempfile

from rockkeep import crypto
from rockkeep.errors import VaultError
from rockkeep.vault import VaultStore


LINE = "=" * 70


def section(title: str):
    print(f"\n{LINE}\n{title}\n{LINE}")


def tamper(vault_path: str, service: str, index: int):
    """Flip one bit of the stored blob at byte `index`."""
    with open(vault_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    blob = bytearray(crypto.decode_blob(data[service]))
    blob[index] ^= 1
    data[service] = crypto.encode_blob(bytes(blob))
    with open(vault_path, 'w', encoding='utf-8') as f:
        json.dump(data, f)


def main():
    # Prepare a fresh vault
    workdir = tempfile.mkdtemp()
    vault_path = os.path.join(workdir, "Rockkeep", "passwords.json")
    master_password = "CorrectHorseBatteryStaple!"

    store = VaultStore(vault_path)
    store.store(master_password, "super_secret_password", "example.com")
    store.store(master_password, "another_secret", "mail")
    store.store(master_password, "third_secret", "bank")

    # 1) Wrong master password
    section("Attack 1: Wrong master password")
    try:
        store.retrieve("wrong_password", "example.com")
        print("Unexpected: decryption succeeded with wrong password")
    except VaultError as e:
        print(f"Expected failure: wrong password cannot decrypt ({e.kind.value}: {e})")

    # 2) Ciphertext tampering (salt 16 + nonce 12 = first ciphertext byte at 28)
    section("Attack 2: Ciphertext tampering (AES-GCM)")
    tamper(vault_path, "example.com", 28)
    try:
        store.retrieve(master_password, "example.com")
        print("Unexpected: tampered ciphertext still decrypted")
    except VaultError as e:
        print(f"Expected failure: AES-GCM detected tampering ({e.kind.value}: {e})")

    # 3) Tag tampering
    section("Attack 3: Authentication tag tampering")
    tamper(vault_path, "mail", -1)
    try:
        store.retrieve(master_password, "mail")
        print("Unexpected: tampered tag still verified")
    except VaultError as e:
        print(f"Expected failure: tag mismatch ({e.kind.value}: {e})")

    # 4) Truncated blob
    section("Attack 4: Truncated blob")
    with open(vault_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    data["bank"] = crypto.encode_blob(crypto.decode_blob(data["bank"])[:40])
    with open(vault_path, 'w', encoding='utf-8') as f:
        json.dump(data, f)
    try:
        store.retrieve(master_password, "bank")
        print("Unexpected: truncated blob accepted")
    except VaultError as e:
        print(f"Expected failure: blob rejected ({e.kind.value}: {e})")

    # 5) Overwrite via re-store
    section("Attack 5: Overwriting an existing entry")
    store.store(master_password, "original", "github")
    try:
        store.store("attacker_master", "attacker_choice", "github")
        print("Unexpected: existing entry was overwritten")
    except VaultError as e:
        print(f"Expected failure: store is insert-only ({e.kind.value}: {e})")
    print(f"Original still decrypts: {store.retrieve(master_password, 'github')!r}")

    # Cleanup
    store.purge()
    shutil.rmtree(workdir, ignore_errors=True)
    print("\nDemo complete. All showcased attacks failed as expected.")


if __name__ == "__main__":
    main()
