import argparse
import logging
import sys

import uvicorn

from gentlytold.adapters.clock import SystemClock
from gentlytold.adapters.fs.filestore import FileSystemStore
from gentlytold.adapters.notify.dev import DevNotifier
from gentlytold.adapters.sqlite.kv_store import SQLiteKVStore
from gentlytold.api.deps import Settings
from gentlytold.components.moderation import ModerationConfig, ModerationQueue, ProvisionAdminInput
from gentlytold.domain.errors import GentlyToldError
from gentlytold.rules.loader import load_rules

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("cli")


def handle_serve(settings: Settings, args: argparse.Namespace) -> None:
    uvicorn.run("gentlytold.api.main:app", host=args.host, port=args.port, reload=args.reload)


def handle_check_rules(settings: Settings, args: argparse.Namespace) -> None:
    try:
        load_rules(settings.rules_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)
    print(f"Rules OK: {settings.rules_path}")


def handle_issue_token(settings: Settings, args: argparse.Namespace) -> None:
    rules = load_rules(settings.rules_path)
    queue = ModerationQueue(
        store=SQLiteKVStore(settings.db_path),
        blobs=FileSystemStore(str(settings.photos_dir)),
        notifier=DevNotifier(),
        clock=SystemClock(),
        config=ModerationConfig(
            master_key=settings.master_key,
            base_url=settings.base_url,
            admin_token_bytes=rules.tokens.admin_token_bytes,
        ),
        slug_pattern=rules.slugs.pattern,
    )
    try:
        result = queue.provision_admin(
            ProvisionAdminInput(
                slug=args.slug,
                master_key=settings.master_key,
                contact_email=args.email,
                contact_name=args.name,
            )
        )
    except GentlyToldError as e:
        logger.error("Could not issue token for %s: %s", args.slug, e.message)
        sys.exit(1)

    token = result.record.token
    print(f"Admin token for '{args.slug}': {token}")
    print(f"Review: {settings.base_url.rstrip('/')}/api/review/{args.slug}?token={token}")


def main() -> None:
    parser = argparse.ArgumentParser(description="GentlyTold CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    # check-rules
    subparsers.add_parser("check-rules", help="Validate the rules file")

    # issue-token
    token_parser = subparsers.add_parser(
        "issue-token", help="Issue a memorial admin token (uses GENTLYTOLD_MASTER_KEY)"
    )
    token_parser.add_argument("slug", help="Memorial slug")
    token_parser.add_argument("--email", help="Family contact email")
    token_parser.add_argument("--name", help="Family contact name")

    args = parser.parse_args()
    settings = Settings()

    if args.command == "serve":
        handle_serve(settings, args)
    elif args.command == "check-rules":
        handle_check_rules(settings, args)
    elif args.command == "issue-token":
        handle_issue_token(settings, args)


if __name__ == "__main__":
    main()
