from __future__ import annotations

"""Create the schedule configuration and availability tables (Postgres).

Safe to run multiple times (uses IF NOT EXISTS).

Run:
  python -m migrations.001_create_availability_tables --yes

Or:
  python backend/migrations/001_create_availability_tables.py --yes
"""

import argparse
import sys
from pathlib import Path

# Allow running this script from any working directory.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import text


STATEMENTS = [
    "CREATE EXTENSION IF NOT EXISTS pgcrypto;",
    """
    CREATE TABLE IF NOT EXISTS schedule_configurations (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        tenant_id UUID NULL,
        lesson_duration_minutes INTEGER NOT NULL
            CONSTRAINT ck_schedule_configurations_duration CHECK (lesson_duration_minutes BETWEEN 1 AND 120),
        lessons_per_shift INTEGER NOT NULL
            CONSTRAINT ck_schedule_configurations_count CHECK (lessons_per_shift BETWEEN 1 AND 20),
        morning_start TIME NOT NULL,
        afternoon_start TIME NOT NULL,
        evening_start TIME NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        CONSTRAINT ck_schedule_configurations_span CHECK (lesson_duration_minutes * lessons_per_shift <= 360)
    );
    """,
    # One configuration per institution, including the shared (NULL tenant) deployment.
    "CREATE UNIQUE INDEX IF NOT EXISTS ux_schedule_configurations_tenant ON schedule_configurations (tenant_id) WHERE tenant_id IS NOT NULL;",
    "CREATE UNIQUE INDEX IF NOT EXISTS ux_schedule_configurations_shared ON schedule_configurations ((tenant_id IS NULL)) WHERE tenant_id IS NULL;",
    """
    CREATE TABLE IF NOT EXISTS availability_intervals (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        tenant_id UUID NULL,
        professor_id UUID NOT NULL,
        period_id UUID NOT NULL,
        weekday VARCHAR(16) NOT NULL
            CONSTRAINT ck_availability_intervals_weekday
            CHECK (weekday IN ('MONDAY','TUESDAY','WEDNESDAY','THURSDAY','FRIDAY','SATURDAY')),
        start_time TIME NOT NULL,
        end_time TIME NOT NULL,
        status VARCHAR(16) NOT NULL DEFAULT 'AVAILABLE'
            CONSTRAINT ck_availability_intervals_status CHECK (status IN ('AVAILABLE','UNAVAILABLE')),
        created_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        CONSTRAINT ck_availability_intervals_order CHECK (end_time > start_time)
    );
    """,
    "CREATE INDEX IF NOT EXISTS ix_availability_intervals_tenant_id ON availability_intervals (tenant_id);",
    "CREATE INDEX IF NOT EXISTS ix_availability_intervals_professor_period ON availability_intervals (professor_id, period_id);",
]


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--yes", action="store_true", help="Actually apply changes")
    args = parser.parse_args(argv)

    if not args.yes:
        print("Dry run. Re-run with --yes to apply.")
        for s in STATEMENTS:
            print("---")
            print(s.strip())
        return

    from core.database import ENGINE

    with ENGINE.begin() as conn:
        for s in STATEMENTS:
            conn.execute(text(s))

    print(f"OK: created/verified {len(STATEMENTS)} statements.")


if __name__ == "__main__":
    main()
