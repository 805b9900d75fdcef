#!/usr/bin/env python3
"""
Account, preferences and WordPress site management.

Usage:
    python account.py login --username jane --email jane@example.com
    python account.py whoami
    python account.py prefs
    python account.py prefs --set default_word_count=1500 --set theme=dark
    python account.py sites add myblog https://blog.example.com --auth application_password \\
        --username jane --password "abcd efgh ijkl"
    python account.py sites list
    python account.py sites remove myblog
"""

import argparse
import sys
from dataclasses import asdict, fields

from backends import NotSignedInError
from config import WORDPRESS, configure_logging
from library import open_workspace
from settings import (
    ConnectionNotFoundError,
    UserPreferences,
    WordPressConnection,
    add_connection,
    list_connections,
    load_preferences,
    remove_connection,
    update_preferences,
)


def parse_pref_updates(pairs: list[str]) -> dict:
    types = {f.name: f.type for f in fields(UserPreferences)}
    updates = {}
    for pair in pairs:
        name, _, value = pair.partition("=")
        if name not in types:
            raise ValueError(f"Unknown preference: {name}")
        updates[name] = int(value) if types[name] in (int, "int") else value
    return updates


def build_credentials(args) -> dict:
    if args.auth == "oauth2":
        return {"accessToken": args.token or ""}
    if args.auth == "jwt":
        return {"token": args.token or ""}
    return {"username": args.username or "", "password": args.password or ""}


def main():
    parser = argparse.ArgumentParser(description="Account, preferences and WordPress sites")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Sign in")
    login.add_argument("--username", required=True)
    login.add_argument("--email", default="")
    sub.add_parser("logout", help="Sign out")
    sub.add_parser("whoami", help="Show the signed-in user")

    prefs = sub.add_parser("prefs", help="Show or change preferences")
    prefs.add_argument("--set", action="append", default=[], metavar="NAME=VALUE")

    sites = sub.add_parser("sites", help="Manage WordPress connections")
    sites_sub = sites.add_subparsers(dest="sites_command", required=True)
    sites_sub.add_parser("list", help="List saved connections")
    add = sites_sub.add_parser("add", help="Save a connection")
    add.add_argument("name")
    add.add_argument("url")
    add.add_argument("--auth", required=True, choices=WORDPRESS["auth_types"])
    add.add_argument("--username")
    add.add_argument("--password")
    add.add_argument("--token", help="Access token (oauth2) or JWT")
    remove = sites_sub.add_parser("remove", help="Delete a connection")
    remove.add_argument("name")

    args = parser.parse_args()
    configure_logging()
    ws = open_workspace()

    try:
        if args.command == "login":
            user = ws.identity.sign_in(args.username, args.email)
            print(f"Signed in as {user.username}")
        elif args.command == "logout":
            ws.identity.sign_out()
            print("Signed out")
        elif args.command == "whoami":
            user = ws.identity.get_user()
            if user is None:
                raise NotSignedInError("Not signed in")
            print(f"{user.username} <{user.email}> ({user.id})")
        elif args.command == "prefs":
            current = update_preferences(ws.kv, **parse_pref_updates(args.set)) if args.set \
                else load_preferences(ws.kv)
            for name, value in asdict(current).items():
                print(f"  {name:<20} {value}")
        elif args.sites_command == "list":
            for conn in list_connections(ws.kv):
                tested = conn.last_test_at or "never"
                print(f"  {conn.name:<16} {conn.url:<40} {conn.auth_type:<22} tested: {tested}")
        elif args.sites_command == "add":
            conn = add_connection(ws.kv, WordPressConnection(
                name=args.name, url=args.url, auth_type=args.auth, credentials=build_credentials(args),
            ))
            print(f"Saved {conn.name} ({conn.url})")
        elif args.sites_command == "remove":
            remove_connection(ws.kv, args.name)
            print(f"Removed {args.name}")
    except (NotSignedInError, ConnectionNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
