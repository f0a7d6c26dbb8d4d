"""
CLI for running weekly generation outside the API.

Usage examples:
    # Create tables and import users and the variation catalog
    python -m scripts.generate_week import --file seed.json

    # Generate next week's sessions for a user and print the result
    python -m scripts.generate_week generate user-123

    # Show stored weekly records for a user
    python -m scripts.generate_week history user-123 --limit 5
"""
import argparse
import asyncio
import json
import sys

from regain.core.exceptions import DomainError
from regain.core.logging import configure_logging
from regain.db.database import async_session_maker, engine, init_db
from regain.llm import cleanup_llm_provider, get_llm_provider
from regain.models import User, Variation
from regain.repositories.profile_repository import ProfileRepository
from regain.repositories.session_record_repository import SessionRecordRepository
from regain.repositories.variation_repository import VariationRepository
from regain.schemas.generation import WeeklySessionRecordResponse
from regain.services.weekly_generator import WeeklyGenerationService


async def import_command(args):
    """Handle import command."""
    with open(args.file, "r") as f:
        data = json.load(f)

    await init_db()
    async with async_session_maker() as session:
        async with session.begin():
            profiles = ProfileRepository(session)
            for user in data.get("users", []):
                await profiles.create(User(
                    id=user["id"],
                    baseline_metrics=user.get("baseline_metrics"),
                    discomforts=user.get("discomforts", []),
                    objectives=user.get("objectives", []),
                    preferred_discipline=user.get("preferred_discipline"),
                    blacklisted_variation_ids=user.get("blacklisted_variation_ids", []),
                ))
            await VariationRepository(session).create_many([
                Variation(
                    id=v["id"],
                    name=v.get("name", ""),
                    disciplines=v.get("disciplines", []),
                    tags=v.get("tags", []),
                    phase=v.get("phase"),
                )
                for v in data.get("variations", [])
            ])

    print(f"Imported {len(data.get('users', []))} users and {len(data.get('variations', []))} variations")


async def generate_command(args):
    """Handle generate command."""
    service = WeeklyGenerationService(async_session_maker, get_llm_provider())
    try:
        result = await service.run(args.user_id)
    except DomainError as e:
        print(json.dumps({"code": e.code, "message": e.message, "details": e.details}, indent=2), file=sys.stderr)
        sys.exit(2)
    finally:
        await cleanup_llm_provider()

    print(result.model_dump_json(indent=2))


async def history_command(args):
    """Handle history command."""
    async with async_session_maker() as session:
        records = await SessionRecordRepository(session).list_for_user(args.user_id, limit=args.limit)

    print(f"\n=== Weekly records for {args.user_id} ({len(records)}) ===")
    for record in records:
        r = WeeklySessionRecordResponse.model_validate(record)
        print(f"  #{r.id} week_timestamp={r.week_timestamp} sessions={len(r.final_sessions)}")


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Weekly generation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    import_parser = subparsers.add_parser(
        "import",
        help="Import users and variations from JSON"
    )
    import_parser.add_argument(
        "--file", "-f",
        required=True,
        help="JSON file with 'users' and 'variations' lists"
    )
    import_parser.set_defaults(func=import_command)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate next week's sessions for a user"
    )
    generate_parser.add_argument("user_id", help="User id")
    generate_parser.set_defaults(func=generate_command)

    history_parser = subparsers.add_parser(
        "history",
        help="List stored weekly records for a user"
    )
    history_parser.add_argument("user_id", help="User id")
    history_parser.add_argument("--limit", "-n", type=int, default=20, help="Maximum records to show")
    history_parser.set_defaults(func=history_command)

    return parser


async def _run(args):
    try:
        await args.func(args)
    finally:
        await engine.dispose()


def main():
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging()
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
