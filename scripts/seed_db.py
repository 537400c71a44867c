from __future__ import annotations

import importlib

from config import get_settings_module

from school_attendance.database.bootstrap import DEMO_ADMIN, DEMO_TEACHER_PASSWORD, apply_seed_sql, ensure_demo_data
from school_attendance.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config)
    ensure_demo_data(db_config)

    print(f"OK: Seeded database -> {DBConfig.from_mapping(db_config).describe()}")
    print(f"Admin: {DEMO_ADMIN[1]} / {DEMO_ADMIN[3]}")
    print(f"Teachers: sarah@school.edu, james@school.edu, emily@school.edu / {DEMO_TEACHER_PASSWORD}")


if __name__ == "__main__":
    main()
