"""
Seed repair teams into Firestore (or the mock DB).

Usage:
  - Dry run (default): python scripts/seed_db.py T1 T2 T3
  - Apply to configured DB: python scripts/seed_db.py T1 T2 T3 --apply
  - No names given: falls back to SEED_TEAMS from .env

Existing teams are never reset; only missing ones are created as available.
"""

import argparse
import sys

from app.config.firebase import get_db
from app.core.settings import settings
from app.services.team_store import TeamStore
from app.utils.firestore_helpers import is_valid_document_id


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("teams", nargs="*", help="Team names to create")
    parser.add_argument("--apply", action="store_true", help="Write teams to the DB instead of dry-run")
    args = parser.parse_args()

    names = args.teams or settings.seed_teams
    if not names:
        print("No team names given and SEED_TEAMS is empty.")
        return

    invalid = [name for name in names if not is_valid_document_id(name)]
    if invalid:
        print(f"Unusable team names: {', '.join(invalid)}")
        sys.exit(1)

    for name in names:
        print(f"Preparing: teams/{name}")

    if not args.apply:
        print("Dry run complete. Re-run with --apply to write to DB.")
        return

    created = TeamStore(get_db()).ensure(names)
    print(f"Seeding completed. Created: {', '.join(created) or 'none (all existed)'}")


if __name__ == "__main__":
    main()
