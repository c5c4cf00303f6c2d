#!/usr/bin/env python3
"""
Database management script for the time tracking service.
Creates tables, repairs duplicate daily entries and installs the
(user, task, date) unique index.
"""

import asyncio
import logging
import sys

from timetrack.application.use_cases.consolidation_use_cases import ConsolidateTimeEntriesUseCase
from timetrack.infrastructure.db.database import engine
from timetrack.infrastructure.db.models import create_all_tables
from timetrack.infrastructure.db.unit_of_work import SQLAlchemyUnitOfWork

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def create_tables():
    """Create all tables that do not exist yet."""
    print("Creating tables...")
    create_all_tables(engine)
    print("Done.")


def consolidate(install_constraint: bool = True):
    """Merge duplicate entries, then (optionally) install the unique index."""
    print("Consolidating duplicate time entries...")
    use_case = ConsolidateTimeEntriesUseCase(SQLAlchemyUnitOfWork())
    result = asyncio.run(use_case.execute(install_constraint=install_constraint))
    print(f"  groups merged:        {result.groups_merged}")
    print(f"  entries removed:      {result.entries_removed}")
    print(f"  sessions moved:       {result.sessions_moved}")
    print(f"  constraint installed: {result.constraint_installed}")


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  create-tables       - Create missing tables")
        print("  consolidate         - Merge duplicate entries and install the unique index")
        print("  consolidate-only    - Merge duplicate entries without touching the index")
        print("  install-constraint  - Same as consolidate; the index needs clean data first")
        return

    command_name = sys.argv[1]

    if command_name == "create-tables":
        create_tables()
    elif command_name in ("consolidate", "install-constraint"):
        consolidate(install_constraint=True)
    elif command_name == "consolidate-only":
        consolidate(install_constraint=False)
    else:
        print(f"Unknown command: {command_name}")
        sys.exit(1)


if __name__ == "__main__":
    main()
