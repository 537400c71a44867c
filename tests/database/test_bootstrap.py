from school_attendance.database.bootstrap import SCHEMA_PATH, SEED_PATH, _iter_sql_statements


def test_sql_files_ship_with_the_package():
    assert SCHEMA_PATH.is_file()
    assert SEED_PATH.is_file()


def test_schema_declares_the_attendance_unique_key():
    statements = list(_iter_sql_statements(SCHEMA_PATH.read_text(encoding="utf-8")))
    attendance = next(s for s in statements if "attendance_records" in s and "CREATE TABLE" in s)
    assert "uq_attendance_session_date" in attendance
