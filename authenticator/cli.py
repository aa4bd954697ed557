#!/usr/bin/env python3
"""
cli.py — Offline command-line wrapper around the signature functions.

Subcommands:
- code    : print the login code for an account
- confkey : print a confirmation key for a given time/tag
- watch   : show the login code in real time
- info    : show which parts of the account file are present

Nothing here talks to the platform; pass --offset to correct the local clock
by a known server skew.
"""

import argparse
import time

from authenticator.mobile_authenticator import ACCOUNT_FILE, CONFIRMATION_TAG, load_account
from authenticator.signatures import TIME_STEP, generate_code, generate_confirmation_key


def _now(args) -> int:
    return int(time.time()) + args.offset


def _at(args) -> int:
    return args.time if args.time is not None else _now(args)


def _account(args) -> dict:
    data = load_account(args.account)
    for required in ("shared_secret", "identity_secret"):
        if not data.get(required):
            raise SystemExit(f"[!] {args.account} is missing {required}")
    return data


# --- CLI command handlers ---
def cmd_code(args):
    data = _account(args)
    try:
        print(generate_code(data["shared_secret"], _at(args)))
    except ValueError as e:
        raise SystemExit(f"[!] {e}")


def cmd_confkey(args):
    data = _account(args)
    try:
        print(generate_confirmation_key(data["identity_secret"], _at(args), args.tag))
    except ValueError as e:
        raise SystemExit(f"[!] {e}")


def cmd_watch(args):
    data = _account(args)
    print("Press Ctrl+C to quit. Generating login codes in real time...\n")
    last_code = None
    try:
        while True:
            now = _now(args)
            code = generate_code(data["shared_secret"], now)
            remaining = TIME_STEP - now % TIME_STEP
            if code != last_code:
                print(f"Code: {code}  (valid ~{remaining:2d}s)")
                last_code = code
            else:
                print(f".. {remaining:2d}s left", end='\r', flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")


def cmd_info(args):
    data = load_account(args.account)
    for name in ("shared_secret", "identity_secret", "device_id"):
        print(f"{name}: {'present' if data.get(name) else 'missing'}")


def cmd_help(args):
    print("'authenticator -h' for help.")


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Mobile authenticator codes and confirmation keys")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    pc = sub.add_parser("code", help="Print the login code")
    pc.add_argument("--account", default=ACCOUNT_FILE, help="Account JSON file")
    pc.add_argument("--time", type=int, help="Unix time to use instead of now")
    pc.add_argument("--offset", type=int, default=0, help="Seconds to add to the local clock")
    pc.set_defaults(func=cmd_code)

    pk = sub.add_parser("confkey", help="Print a confirmation key")
    pk.add_argument("--account", default=ACCOUNT_FILE, help="Account JSON file")
    pk.add_argument("--time", type=int, help="Unix time to use instead of now")
    pk.add_argument("--offset", type=int, default=0, help="Seconds to add to the local clock")
    pk.add_argument("--tag", default=CONFIRMATION_TAG, help="Tag mixed into the key")
    pk.set_defaults(func=cmd_confkey)

    pw = sub.add_parser("watch", help="Show the login code in real time")
    pw.add_argument("--account", default=ACCOUNT_FILE, help="Account JSON file")
    pw.add_argument("--offset", type=int, default=0, help="Seconds to add to the local clock")
    pw.set_defaults(func=cmd_watch)

    pi = sub.add_parser("info", help="Show which account fields are present")
    pi.add_argument("--account", default=ACCOUNT_FILE, help="Account JSON file")
    pi.set_defaults(func=cmd_info)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
