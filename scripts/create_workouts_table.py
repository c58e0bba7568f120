#!/usr/bin/env python3
"""
Create the workouts table and id sequence in Snowflake.

Usage:
    python scripts/create_workouts_table.py [--dry-run]

Requires:
    - .env file with Snowflake credentials (same variables as the API)
"""

import argparse
import sys

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from workout_scheduler.config.settings import get_settings
from workout_scheduler.core.workouts.errors import PersistenceError
from workout_scheduler.infrastructure.snowflake.client import get_snowflake_connection
from workout_scheduler.infrastructure.snowflake.repositories.workouts import (
    WORKOUTS_SCHEMA_DDL,
    SnowflakeConfig,
    SnowflakeWorkoutRepository,
)


def main():
    parser = argparse.ArgumentParser(description='Create the workouts table in Snowflake')
    parser.add_argument('--dry-run', action='store_true', help='Print the DDL, don\'t execute it')
    args = parser.parse_args()

    if args.dry_run:
        for statement in WORKOUTS_SCHEMA_DDL:
            print(statement.strip() + ";\n")
        sys.exit(0)

    settings = get_settings()
    config = SnowflakeConfig(
        account=settings.snowflake_account,
        user=settings.snowflake_user,
        password=settings.snowflake_password or None,
        private_key_path=settings.snowflake_private_key_path,
        database=settings.snowflake_database,
        schema=settings.snowflake_schema,
        warehouse=settings.snowflake_warehouse,
        role=settings.snowflake_role,
    )

    print(f"Creating workouts schema in {config.database}.{config.schema}")

    try:
        with get_snowflake_connection(config) as conn:
            SnowflakeWorkoutRepository(conn).create_schema()
    except PersistenceError as e:
        print(f"ERROR creating workouts schema: {e}")
        sys.exit(1)

    print("Done")


if __name__ == '__main__':
    main()
