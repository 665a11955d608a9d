"""
Скрипт для пересчёта кэша прогресса (level, streak) всех профилей.

Использование:
    python -m src.scripts.recalc_progress [--user EXTERNAL_ID] [--dry-run]

Кэш пересчитывается из XP и событий завершения. Профили с расхождением
выводятся в консоль.
"""

import argparse
import asyncio

from src.core.use_cases.sync_profile_cache import SyncProfileCacheUseCase
from src.database.config import close_db, init_db
from src.storage import profile_repo


async def recalculate_profiles(external_id: str | None = None, dry_run: bool = False) -> int:
    """
    Пересчитывает кэш профилей.

    Returns:
        Количество профилей с расхождением
    """
    await init_db()

    try:
        if external_id:
            profile = await profile_repo.get_profile(external_id)
            if not profile:
                print(f"❌ Profil {external_id} nu a fost găsit.")
                return 0
            profiles = [profile]
        else:
            profiles = await profile_repo.list_profiles()

        print(f"Found {len(profiles)} profiles to recalculate")

        use_case = SyncProfileCacheUseCase()
        drifted = 0
        for profile in profiles:
            result = await use_case.execute(profile, dry_run=dry_run)
            if not result.drifted:
                continue
            drifted += 1
            print(
                f"  {result.external_id}: level {result.old_level} -> {result.new_level}, "
                f"streak {result.old_streak} -> {result.new_streak}, "
                f"highest {result.old_highest_streak} -> {result.new_highest_streak}"
            )

        suffix = " (dry run, nothing written)" if dry_run else ""
        print(f"\nDone! {drifted} profiles drifted{suffix}")
        return drifted
    finally:
        await close_db()


def main() -> None:
    parser = argparse.ArgumentParser(description="Recalculate cached level/streak")
    parser.add_argument("--user", dest="external_id", help="Only this external user id")
    parser.add_argument("--dry-run", action="store_true", help="Report drift without writing")
    args = parser.parse_args()

    asyncio.run(recalculate_profiles(args.external_id, args.dry_run))


if __name__ == "__main__":
    main()
