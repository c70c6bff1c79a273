# =============================================================================
# LJKit Command Line Interface
# =============================================================================
# A small front end over the library, mostly useful for checking that an
# account works and for looking at what a login downloads.
#
#   ljkit login alice               Log in and show the downloaded data
#   ljkit login alice --save        ...and keep a snapshot for next time
#   ljkit moods alice               List moods from the saved snapshot
#   ljkit moods alice --complete ha Complete a mood name
#   ljkit --paths                   Show where config and data live
#
# Passwords come from the system keyring (see ljkit.credentials) and fall
# back to an interactive prompt.
# =============================================================================

import argparse
import getpass
import logging
import sys

from ljkit import __app_name__, __version__
from ljkit.config import Config, ConfigError, print_paths
from ljkit.core.flags import LoginFlags
from ljkit.credentials import get_password, set_password
from ljkit.errors import AuthenticationError, LJError
from ljkit.protocol.account import Account
from ljkit.protocol.registry import AccountRegistry
from ljkit.protocol.transport import Transport

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="LJKit: A client for the LiveJournal flat protocol",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--paths",
        action="store_true",
        help="Print configuration paths and exit",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging)",
    )

    commands = parser.add_subparsers(dest="command")

    login = commands.add_parser("login", help="Log in and show account data")
    login.add_argument("username")
    login.add_argument("--no-moods", action="store_true", help="Don't download moods")
    login.add_argument("--no-menu", action="store_true", help="Don't download the web menu")
    login.add_argument("--no-userpics", action="store_true", help="Don't download userpic keywords")
    login.add_argument("--save", action="store_true", help="Save an account snapshot after login")
    login.add_argument(
        "--remember-password",
        action="store_true",
        help="Store the password in the system keyring",
    )

    moods = commands.add_parser("moods", help="List moods from the saved snapshot")
    moods.add_argument("username")
    moods.add_argument("--complete", metavar="PREFIX", help="Complete a mood name")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    return build_parser().parse_args(argv)


def login_flags(args: argparse.Namespace) -> LoginFlags:
    """Translate the --no-* options into LoginFlags."""
    flags = LoginFlags.DEFAULT
    if args.no_moods:
        flags &= ~LoginFlags.GET_MOODS
    if args.no_menu:
        flags &= ~LoginFlags.GET_MENU
    if args.no_userpics:
        flags &= ~LoginFlags.GET_USER_PICTURES
    return flags


def open_account(
    username: str,
    config: Config,
    registry: AccountRegistry,
    transport: Transport,
) -> Account:
    """
    Restore the account from its snapshot if there is one, else create it.

    Restoring first means the login only downloads moods we don't have.
    """
    host = getattr(transport, "host", None)
    port = getattr(transport, "port", None)
    account = Account(
        username,
        transport,
        host=host,
        port=port,
        client_version=config.client.version_string,
    )

    path = config.snapshot_path(account.identifier)
    if path.exists():
        logger.debug(f"Restoring {account.identifier} from {path}")
        return Account.from_file(
            path,
            transport,
            registry=registry,
            client_version=config.client.version_string,
        )

    account.registry = registry
    registry.register(account)
    return account


def run_login(args: argparse.Namespace, config: Config, transport: Transport) -> int:
    registry = AccountRegistry(default_identifier=config.default_account)
    account = open_account(args.username, config, registry, transport)

    password = get_password(account)
    prompted = password is None
    if prompted:
        password = getpass.getpass(f"Password for {account.username}: ")

    try:
        account.login(password, login_flags(args))
    except AuthenticationError as e:
        print(f"Login failed: {e}", file=sys.stderr)
        print(
            f"Set the password with: keyring set {account.keyring_service} {account.username}",
            file=sys.stderr,
        )
        return 1

    print(f"Logged in as {account.fullname} ({account.identifier})")
    if account.login_message:
        print(f"Server says: {account.login_message}")
    print(f"Journals: {', '.join(account.journals.names())}")
    print(f"Moods: {len(account.moods)} (highest id {account.moods.highest_mood_id})")
    if account.user_pictures:
        print(f"Userpics: {', '.join(account.user_picture_keywords)}")

    if args.remember_password and prompted:
        set_password(account, password)
    if args.save:
        path = config.snapshot_path(account.identifier)
        account.write_to_file(path)
        print(f"Saved snapshot to {path}")

    account.logout()
    return 0


def run_moods(args: argparse.Namespace, config: Config, transport: Transport) -> int:
    path = config.snapshot_path(Account(args.username, transport).identifier)
    account = Account.from_file(path, transport)

    if args.complete is not None:
        completion = account.moods.completion(args.complete)
        if completion is None:
            print(f"No mood starts with {args.complete!r}", file=sys.stderr)
            return 1
        print(completion)
        return 0

    for mood in account.moods:
        print(f"{mood.id:>5}  {mood.name}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for LJKit.

    This function:
        1. Parses command-line arguments
        2. Handles special commands (--paths, --version)
        3. Loads configuration
        4. Runs the requested command

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = parse_args(argv)

    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

    # Handle --paths flag
    if args.paths:
        print_paths()
        return 0

    if args.command is None:
        build_parser().print_help()
        return 2

    try:
        config = Config.load()
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    transport = config.server.make_transport()
    try:
        if args.command == "login":
            return run_login(args, config, transport)
        return run_moods(args, config, transport)
    except LJError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        transport.close()


if __name__ == "__main__":
    sys.exit(main())
