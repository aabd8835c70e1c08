"""
Rockkeep - Command Line

Thin front end over the vault core. All prompting, masking, clipboard and
printing happens here; rockkeep/ itself never talks to the user.

    python rockkeep_main.py -s SERVICE             Store a password
    python rockkeep_main.py -r SERVICE [--copy]    Retrieve a password
    python rockkeep_main.py -d SERVICE             Delete a password
    python rockkeep_main.py -l                     List stored services
    python rockkeep_main.py -p [--yes]             Purge all passwords
    python rockkeep_main.py -g LENGTH SPECIAL      Generate (SPECIAL: true/false)
"""

import argparse
import getpass
import logging
import sys

import pyperclip

from rockkeep import __version__, config
from rockkeep.crypto import generate_password
from rockkeep.errors import ErrorKind
from rockkeep.result import capture
from rockkeep.vault import VaultStore

logger = logging.getLogger("rockkeep")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


# =============================================================================
# Output helpers
# =============================================================================

def write_success(message):
    print(f"[OK] {message}")


def write_warning(message):
    print(f"[WARN] {message}")


def write_error(message):
    print(f"[FAIL] {message}", file=sys.stderr)


def report(result):
    """Print an Err and return the exit status for a Result."""
    if result.ok:
        return EXIT_OK
    if result.kind is ErrorKind.AUTHENTICATION_FAILURE:
        write_error("Error. Cause: invalid master password")
    else:
        write_error(f"Error. Cause: {result.detail.lower()}")
    logger.debug("command failed with %s", result.kind.value)
    return EXIT_ERROR


# =============================================================================
# Prompts
# =============================================================================

def read_password(prompt="Enter password: "):
    return getpass.getpass(prompt)


def read_password_confirmed(prompt="Enter password: ", reprompt="Re-enter password: "):
    """Ask twice until both entries match and are not blank."""
    while True:
        pw = read_password(prompt)
        if not pw.strip():
            write_warning("Password cannot be empty.\n")
            continue
        pw2 = read_password(reprompt)
        if pw != pw2:
            write_warning("Passwords don't match.\n")
            continue
        return pw


def copy_or_show(label, secret):
    try:
        pyperclip.copy(secret)
        write_success(f"{label} copied to clipboard!")
    except pyperclip.PyperclipException:
        write_warning("Clipboard not available on this system.")
        write_success(f"{label}: {secret}")


# =============================================================================
# Commands
# =============================================================================

def cmd_store(store, service):
    password = read_password_confirmed("Enter password: ", "Re-enter password: ")
    master = read_password_confirmed("Enter master password: ", "Re-enter master password: ")
    result = capture(store.store, master, password, service)
    if result.ok:
        write_success(f"Password for service '{service}' stored successfully!")
    return report(result)


def cmd_retrieve(store, service, copy=False):
    master = read_password("Enter master password: ")
    result = capture(store.retrieve, master, service)
    if result.ok:
        if copy:
            copy_or_show("Password", result.value)
        else:
            write_success(f"Password: {result.value}")
    return report(result)


def cmd_delete(store, service):
    result = capture(store.delete, service)
    if result.ok:
        write_success(f"Password for service '{service}' deleted successfully!")
    return report(result)


def cmd_list(store):
    result = capture(store.services)
    if result.ok:
        if not result.value:
            print("No stored passwords.")
        for name in result.value:
            print(f"  {name}")
    return report(result)


def cmd_purge(store, assume_yes=False):
    if not assume_yes:
        print(f"This deletes every stored password in {store.vault_dir}.")
        confirm = input("Type 'yes' to confirm: ").strip().lower()
        if confirm != 'yes':
            print("Cancelled.")
            return EXIT_OK
    result = capture(store.purge)
    if result.ok:
        if result.value:
            write_success("All stored passwords have been purged successfully!")
        else:
            write_warning("Nothing to purge.")
    return report(result)


def cmd_generate(length_arg, special_arg, copy=False):
    try:
        length = int(length_arg)
    except ValueError:
        write_error("Invalid arguments. Usage: -g [length:int] [includeSpecialChars:bool]")
        return EXIT_USAGE
    special = special_arg.strip().lower()
    if special not in ('true', 'false'):
        write_error("Invalid arguments. Usage: -g [length:int] [includeSpecialChars:bool]")
        return EXIT_USAGE

    result = capture(generate_password, length, special == 'true')
    if result.ok:
        if copy:
            copy_or_show("Generated password", result.value)
        else:
            write_success(f"Generated password: {result.value}")
    return report(result)


# =============================================================================
# Entry point
# =============================================================================

def build_parser():
    parser = argparse.ArgumentParser(
        prog="rockkeep",
        description="Local password vault. Passwords are encrypted with "
                    "AES-256-GCM and stay on your computer.",
        epilog=f"Passwords are saved in {config.default_vault_path()}",
    )
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("-s", metavar="SERVICE", dest="store",
                         help="store a password for the service")
    actions.add_argument("-r", metavar="SERVICE", dest="retrieve",
                         help="retrieve the password for the service")
    actions.add_argument("-d", metavar="SERVICE", dest="delete",
                         help="delete the password for the service")
    actions.add_argument("-l", action="store_true", dest="list",
                         help="list stored services")
    actions.add_argument("-p", action="store_true", dest="purge",
                         help="purge all stored passwords")
    actions.add_argument("-g", nargs=2, metavar=("LENGTH", "SPECIAL"), dest="generate",
                         help="generate a password; LENGTH between 8 and 32 "
                              "(exclusive), SPECIAL true/false")
    actions.add_argument("-v", action="version", version=f"Rockkeep version v{__version__}")
    parser.add_argument("--vault", metavar="PATH",
                        help=f"vault file (default: ${config.VAULT_PATH_ENV} or the config directory); "
                             "-p only removes the vault files there unless the directory is named Rockkeep")
    parser.add_argument("--copy", action="store_true",
                        help="copy retrieved/generated password to the clipboard")
    parser.add_argument("--yes", action="store_true", help="don't ask before purging")
    parser.add_argument("--verbose", action="store_true", help="debug logging")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        return dispatch(args)
    except KeyboardInterrupt:
        print("\nExiting...")
        return EXIT_INTERRUPTED


def dispatch(args):
    if args.generate:
        logger.debug("generating password")
        return cmd_generate(*args.generate, copy=args.copy)

    store = VaultStore(config.default_vault_path(args.vault))
    logger.debug("vault path: %s", store.vault_path)

    if args.store is not None:
        return cmd_store(store, args.store)
    if args.retrieve is not None:
        return cmd_retrieve(store, args.retrieve, copy=args.copy)
    if args.delete is not None:
        return cmd_delete(store, args.delete)
    if args.list:
        return cmd_list(store)
    if args.purge:
        return cmd_purge(store, assume_yes=args.yes)

    write_warning("Invalid argument. Run Rockkeep with '-h' for help")
    return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
