"""
Checks that the roster in the configured database can be paid out:
every active student and every transfer in their history must point
at a known coach, and no package may end before it starts.

Usage:
    python scripts/check_integrity.py
"""
import asyncio
import sys
from pathlib import Path

from sqlalchemy import select, func

# This file is assumed to be in <project_root>/scripts/check_integrity.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT / "src"))

from coach_payroll.common.config import settings
from coach_payroll.common.exceptions import DataIntegrityError
from coach_payroll.core.payroll import check_roster_integrity
from coach_payroll.database import models as db_models
from coach_payroll.database.engine import build_engine, build_session_factory
from coach_payroll.services.providers import DatabaseRosterProvider, DatabaseTransferHistoryProvider


async def check_integrity() -> bool:
    print(f"Connecting to database ({'test' if settings.TEST_MODE else 'production'})...")
    engine = build_engine(settings.database_url)
    session_factory = build_session_factory(engine)

    try:
        async with session_factory() as session:
            print("--- Checking package dates ---")
            inverted = await session.execute(
                select(func.count()).select_from(db_models.Students).filter(
                    db_models.Students.package_end_date < db_models.Students.package_start_date
                )
            )
            inverted_count = inverted.scalar()
            print(f"Students with inverted packages: {inverted_count}")

            print("--- Checking coach references ---")
            roster = DatabaseRosterProvider(session)
            transfers = DatabaseTransferHistoryProvider(session)
            await transfers.load()

            coaches = await roster.list_coaches()
            students = await roster.list_active_students()
            histories = {s.id: await transfers.for_student(s.id) for s in students}
            print(f"Coaches: {len(coaches)}, active students: {len(students)}, "
                  f"transfers: {sum(len(h) for h in histories.values())}")

            try:
                check_roster_integrity(coaches, students, histories)
            except DataIntegrityError as e:
                print(f"FAILED: {e}")
                return False

            if inverted_count:
                print("FAILED: fix the package dates above before running payroll.")
                return False

            print("SUCCESS: roster is consistent.")
            return True
    finally:
        await engine.dispose()


if __name__ == "__main__":
    ok = asyncio.run(check_integrity())
    sys.exit(0 if ok else 1)
