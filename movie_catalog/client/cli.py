"""
Command-line front end for the movie catalog. Run from project root:

  python -m movie_catalog.client login alice@example.com
  python -m movie_catalog.client sorted rating --order desc
  python -m movie_catalog.client add "Heat" --rating 8.3 --duration 170

The session (token) is stored in CATALOG_SESSION_FILE between runs.
"""

import argparse
import getpass
import json
import sys
from collections.abc import Callable
from typing import Any

from movie_catalog.client.api import CatalogClient
from movie_catalog.client.config import ClientSettings, get_client_settings
from movie_catalog.client.errors import ApiError, UnauthorizedError
from movie_catalog.client.session import AuthSession, FileTokenStore
from movie_catalog.core.logging_config import configure_logging

SORT_CHOICES = ("title", "rating", "releaseDate", "duration")
ADMIN_COMMANDS = frozenset({"add", "update", "delete"})


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _print_movies(movies: list[dict[str, Any]]) -> None:
    if not movies:
        print("No movies found.")
        return
    for m in movies:
        rating = m.get("rating")
        rating_s = f"{rating:.1f}" if rating is not None else "-"
        released = (m.get("releaseDate") or "")[:4] or "----"
        print(f"{m['id']:>5}  {rating_s:>4}  {released}  {m['title']}")


def _movie_fields(args: argparse.Namespace) -> dict[str, Any]:
    fields = {
        "title": args.title,
        "description": args.description,
        "rating": args.rating,
        "releaseDate": args.release_date,
        "duration": args.duration,
        "poster": args.poster,
    }
    return {k: v for k, v in fields.items() if v is not None}


def _cmd_register(client: CatalogClient, args: argparse.Namespace) -> None:
    password = args.password or getpass.getpass("Password: ")
    data = client.register(args.name, args.email, password)
    print(f"Registered and signed in as {data['user']['email']} ({data['user']['role']}).")


def _cmd_login(client: CatalogClient, args: argparse.Namespace) -> None:
    password = args.password or getpass.getpass("Password: ")
    data = client.login(args.email, password)
    print(f"Signed in as {data['user']['email']} ({data['user']['role']}).")


def _cmd_logout(client: CatalogClient, _args: argparse.Namespace) -> None:
    client.logout()
    print("Signed out.")


def _cmd_whoami(client: CatalogClient, _args: argparse.Namespace) -> None:
    session = client.session
    if not session.is_authenticated:
        print("Not signed in.")
        return
    user = session.user or {}
    print(f"{user.get('email', 'user ' + str(session.claims.get('sub')))} role={session.role}")


def _cmd_list(client: CatalogClient, args: argparse.Namespace) -> None:
    data = client.list_movies(page=args.page, limit=args.limit)
    if isinstance(data, dict):
        _print_movies(data["movies"])
        print(f"Page {data['page']} of {data['totalPages']} ({data['total']} movies)")
    else:
        _print_movies(data)


def _cmd_show(client: CatalogClient, args: argparse.Namespace) -> None:
    _print_json(client.get_movie(args.id))


def _cmd_search(client: CatalogClient, args: argparse.Namespace) -> None:
    _print_movies(client.search_movies(args.query))


def _cmd_sorted(client: CatalogClient, args: argparse.Namespace) -> None:
    _print_movies(client.sort_movies(args.by, args.order))


def _cmd_add(client: CatalogClient, args: argparse.Namespace) -> None:
    _print_json(client.create_movie(_movie_fields(args)))


def _cmd_update(client: CatalogClient, args: argparse.Namespace) -> None:
    _print_json(client.update_movie(args.id, _movie_fields(args)))


def _cmd_delete(client: CatalogClient, args: argparse.Namespace) -> None:
    data = client.delete_movie(args.id)
    print(f"{data['message']}: {data['movie']['title']}")


def _add_movie_options(p: argparse.ArgumentParser, title_required: bool) -> None:
    if title_required:
        p.add_argument("title")
    else:
        p.add_argument("--title")
    p.add_argument("--description")
    p.add_argument("--rating", type=float)
    p.add_argument("--release-date", help="YYYY-MM-DD")
    p.add_argument("--duration", type=int, help="Minutes")
    p.add_argument("--poster", help="Poster image URL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="movie_catalog.client", description="Movie catalog client.")
    parser.add_argument("--api-url", help="Override CATALOG_API_URL")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register", help="Create an account and sign in")
    p.add_argument("name")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(func=_cmd_register)

    p = sub.add_parser("login", help="Sign in")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(func=_cmd_login)

    sub.add_parser("logout", help="Forget the stored token").set_defaults(func=_cmd_logout)
    sub.add_parser("whoami", help="Show the signed-in user").set_defaults(func=_cmd_whoami)

    p = sub.add_parser("list", help="List movies")
    p.add_argument("--page", type=int)
    p.add_argument("--limit", type=int)
    p.set_defaults(func=_cmd_list)

    p = sub.add_parser("show", help="Show one movie")
    p.add_argument("id", type=int)
    p.set_defaults(func=_cmd_show)

    p = sub.add_parser("search", help="Search title and description")
    p.add_argument("query")
    p.set_defaults(func=_cmd_search)

    p = sub.add_parser("sorted", help="List movies sorted by a field")
    p.add_argument("by", choices=SORT_CHOICES)
    p.add_argument("--order", choices=("asc", "desc"), default="asc")
    p.set_defaults(func=_cmd_sorted)

    p = sub.add_parser("add", help="Add a movie (admin)")
    _add_movie_options(p, title_required=True)
    p.set_defaults(func=_cmd_add)

    p = sub.add_parser("update", help="Update a movie (admin)")
    p.add_argument("id", type=int)
    _add_movie_options(p, title_required=False)
    p.set_defaults(func=_cmd_update)

    p = sub.add_parser("delete", help="Delete a movie (admin)")
    p.add_argument("id", type=int)
    p.set_defaults(func=_cmd_delete)

    return parser


def run(
    argv: list[str] | None = None,
    settings: ClientSettings | None = None,
    session: AuthSession | None = None,
    client_factory: Callable[[str, AuthSession, float], CatalogClient] = CatalogClient,
) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or get_client_settings()
    if session is None:
        session = AuthSession(FileTokenStore(settings.CATALOG_SESSION_FILE))
    session.initialize()

    if args.command in ADMIN_COMMANDS and not session.is_admin:
        print("Admin access required. Sign in with an admin account first.", file=sys.stderr)
        return 1

    base_url = args.api_url or settings.CATALOG_API_URL
    with client_factory(base_url, session, settings.CATALOG_REQUEST_TIMEOUT_SEC) as client:
        try:
            args.func(client, args)
        except UnauthorizedError as e:
            print(f"{e.message} (session ended; please sign in again)", file=sys.stderr)
            return 1
        except ApiError as e:
            print(e.message, file=sys.stderr)
            return 1
    return 0


def main() -> int:
    configure_logging("WARNING")
    return run()
