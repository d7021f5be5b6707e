#!/usr/bin/env python3
"""Storage reset script for the Projects Tracker.

Replaces the local project slot with the six-project sample dataset.
Useful for resetting to a known state during development and testing.

Usage:
    python scripts/reset_db.py

WARNING: This will delete ALL locally stored project data!
"""
import json
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from project_tracker import create_app, db
from project_tracker.services.sample_data import build_sample_projects
from project_tracker.services.storage_service import LocalStore


def _count_stored(raw) -> int:
    """Number of records in the raw slot contents; 0 if absent or unreadable."""
    if not raw:
        return 0
    try:
        records = json.loads(raw)
    except ValueError:
        return 0
    return len(records) if isinstance(records, list) else 0


def main():
    """Main entry point for reset script."""
    app = create_app()

    with app.app_context():
        db.create_all()
        store = LocalStore(app.config['STORAGE_KEY'])

        # Count existing projects without triggering the seed fallback
        existing_count = _count_stored(store.read_raw())
        print(f"Current storage has {existing_count} projects.")

        # Confirm reset
        if existing_count > 0:
            response = input("This will delete all projects. Continue? [y/N]: ")
            if response.lower() != 'y':
                print("Aborted.")
                return

        print("Clearing local storage...")
        store.clear()

        print("\nSeeding storage with sample projects...")
        projects = build_sample_projects()
        store.save_all(projects)
        print(f"Created {len(projects)} projects.")

        print("\nReset complete!")


if __name__ == "__main__":
    main()
