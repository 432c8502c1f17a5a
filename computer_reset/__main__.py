import sys
import logging
import argparse
from getpass import getpass

from pydantic import SecretStr

from computer_reset.reset import reset_computer_password, Credential
from computer_reset.systems.config import AppConfig
from computer_reset.systems.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="computer_reset",
        description="Reset the password of a directory-service computer account. "
                    "Passwords are always read from the terminal.")
    parser.add_argument("identity",
                        help="Computer sAMAccountName ($ is optional), distinguishedName, objectSid or objectGUID")
    parser.add_argument("-d", "--domain", default=None, help="DNS name of the domain (contoso.local)")
    parser.add_argument("-s", "--server", default=None, help="Domain controllers, comma separated")
    parser.add_argument("-p", "--port", type=int, choices=[389, 636], default=None)
    parser.add_argument("-b", "--base", default=None, help="Search base")
    parser.add_argument("-u", "--user", default=None,
                        help="Alternate account for the bind. Without it the current Kerberos ticket is used")
    parser.add_argument("--dry-run", action="store_true", default=None, help="Resolve the account only")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _read_secret(prompt: str) -> SecretStr:
    return SecretStr(getpass(prompt))


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if not (args.domain or args.server or AppConfig.DS_HOST):
        print("Error: --domain or --server is required ([ds] HOST is empty)", file=sys.stderr)
        return 2

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=False)

    new_password = _read_secret("New computer password : ")
    if new_password.get_secret_value() != getpass("Confirm new password : "):
        print("Passwords do not match", file=sys.stderr)
        return 2

    credential = None
    if args.user:
        credential = Credential(login=args.user, password=_read_secret(f"Password for {args.user} : "))

    result = reset_computer_password(identity=args.identity, new_password=new_password, domain=args.domain,
                                     credential=credential, host=args.server, port=args.port, base=args.base,
                                     dry_run=args.dry_run)

    return 0 if result is not None else 1


if __name__ == "__main__":
    sys.exit(main())
