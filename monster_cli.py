"""Command-line client for a running Monster Maker server.

Usage:
    python monster_cli.py register --owner alice --name "Alice"
    python monster_cli.py users
    python monster_cli.py rotate --owner alice
    python monster_cli.py road-maps
    python monster_cli.py preview --road-map brute --level 5
    python monster_cli.py monsters --key mm_...
    python monster_cli.py export --key mm_... --id <monster id> [--out DIR]

Environment variables:
    MONSTER_MAKER_URL  Server URL (default: http://127.0.0.1:8000)
    ADMIN_SECRET       Admin secret for user management commands
    MONSTER_MAKER_KEY  API key for monster commands
"""

import argparse
import os
import re
import sys
from pathlib import Path

import httpx

DEFAULT_URL = os.environ.get("MONSTER_MAKER_URL", "http://127.0.0.1:8000")
ADMIN_SECRET = os.environ.get("ADMIN_SECRET", "change-me-in-production")
DEFAULT_KEY = os.environ.get("MONSTER_MAKER_KEY")


def _request(method: str, url: str, **kwargs) -> httpx.Response:
    """Make an HTTP request, exiting cleanly if the server is unreachable."""
    kwargs.setdefault("timeout", 10.0)
    try:
        resp = httpx.request(method, url, **kwargs)
    except httpx.ConnectError:
        print(f"Error: Could not connect to server at {url}", file=sys.stderr)
        sys.exit(1)
    if resp.status_code >= 400:
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        print(f"Error {resp.status_code}: {detail}", file=sys.stderr)
        sys.exit(1)
    return resp


def _admin(method: str, url: str, **kwargs) -> httpx.Response:
    kwargs.setdefault("headers", {})["X-Admin-Secret"] = ADMIN_SECRET
    return _request(method, url, **kwargs)


def _user(method: str, url: str, key: str | None, **kwargs) -> httpx.Response:
    if not key:
        print("Error: pass --key or set MONSTER_MAKER_KEY", file=sys.stderr)
        sys.exit(1)
    kwargs.setdefault("headers", {})["Authorization"] = f"Bearer {key}"
    return _request(method, url, **kwargs)


def register(args: argparse.Namespace) -> None:
    data = _admin(
        "POST", f"{args.url}/admin/register", json={"owner_id": args.owner, "name": args.name}
    ).json()
    print(f"Registered: {data['owner_id']}")
    print(f"API Key:    {data['api_key']}")


def users(args: argparse.Namespace) -> None:
    listed = _admin("GET", f"{args.url}/admin/users").json()
    if not listed:
        print("No registered users.")
        return
    print(f"{'OWNER_ID':<20} {'NAME':<20}")
    print("-" * 40)
    for user in listed:
        print(f"{user['owner_id']:<20} {user['name']:<20}")


def rotate(args: argparse.Namespace) -> None:
    data = _admin("POST", f"{args.url}/admin/users/{args.owner}/rotate-token").json()
    print(f"Rotated:     {data['owner_id']}")
    print(f"New API Key: {data['api_key']}")


def delete(args: argparse.Namespace) -> None:
    data = _admin("DELETE", f"{args.url}/admin/users/{args.owner}").json()
    print(data["message"])
    print(f"Monsters removed: {data['monsters_removed']}")


def road_maps(args: argparse.Namespace) -> None:
    for road_map in _request("GET", f"{args.url}/api/road-maps").json():
        print(f"{road_map['key']:<16} {road_map['name']:<16} {road_map['description']}")


def preview(args: argparse.Namespace) -> None:
    data = _request(
        "GET",
        f"{args.url}/api/road-maps/{args.road_map}/stats",
        params={"level": args.level},
    ).json()
    if not data["stats"]:
        print(f"Unknown road map '{args.road_map}'; no stats derived.")
    for stat, value in data["stats"].items():
        print(f"{stat:<14} {value}")
    print(f"{'attack bonus':<14} {data['attack_bonus']:+d}")


def monsters(args: argparse.Namespace) -> None:
    listed = _user("GET", f"{args.url}/api/monsters", args.key).json()
    if not listed:
        print("No monsters.")
        return
    for monster in listed:
        print(f"{monster['id']}  L{monster['level']:<3} {monster['name']}")


def export(args: argparse.Namespace) -> None:
    resp = _user("GET", f"{args.url}/api/monsters/{args.id}/export", args.key)
    match = re.search(r'filename="([^"]+)"', resp.headers.get("content-disposition", ""))
    filename = match.group(1) if match else f"{args.id}.json"
    path = Path(args.out) / filename
    path.write_bytes(resp.content)
    print(f"Exported to {path}")


COMMANDS = {
    "register": register,
    "users": users,
    "rotate": rotate,
    "delete": delete,
    "road-maps": road_maps,
    "preview": preview,
    "monsters": monsters,
    "export": export,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Monster Maker command-line client")
    parser.add_argument(
        "--url",
        default=DEFAULT_URL,
        help=f"Server URL (default: {DEFAULT_URL}, or set MONSTER_MAKER_URL)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_parser = subparsers.add_parser("register", help="Register a new user")
    register_parser.add_argument("--owner", required=True, help="Unique owner_id")
    register_parser.add_argument("--name", required=True, help="Display name")

    subparsers.add_parser("users", help="List registered users")

    rotate_parser = subparsers.add_parser("rotate", help="Rotate a user's API key")
    rotate_parser.add_argument("--owner", required=True)

    delete_parser = subparsers.add_parser("delete", help="Delete a user and their monsters")
    delete_parser.add_argument("--owner", required=True)

    subparsers.add_parser("road-maps", help="List road map templates")

    preview_parser = subparsers.add_parser("preview", help="Preview road map stats")
    preview_parser.add_argument("--road-map", required=True)
    preview_parser.add_argument("--level", type=int, default=1)

    monsters_parser = subparsers.add_parser("monsters", help="List your monsters")
    monsters_parser.add_argument("--key", default=DEFAULT_KEY)

    export_parser = subparsers.add_parser("export", help="Download a FoundryVTT export")
    export_parser.add_argument("--key", default=DEFAULT_KEY)
    export_parser.add_argument("--id", required=True, help="Monster id")
    export_parser.add_argument("--out", default=".", help="Output directory")

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    COMMANDS[args.command](args)


if __name__ == "__main__":
    main()
