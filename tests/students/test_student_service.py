import pytest

from school_attendance.core.exceptions import NotFoundError, ValidationError


def test_create_requires_name_and_grade(container):
    with pytest.raises(ValidationError):
        container.student_service.create(name="  ", grade="10th")
    with pytest.raises(ValidationError):
        container.student_service.create(name="Dana", grade="")


def test_update_partial(container, world):
    student = container.student_service.update(world.s3.student_id, {"grade": "12th"})
    assert (student.name, student.grade) == ("Charlie Brown", "12th")


def test_delete_unenrolls_everywhere_and_is_idempotent(container, world):
    s1 = world.s1.student_id

    assert container.student_service.delete(s1) is True

    for session in container.sessions_repo.list_all():
        assert s1 not in session.student_ids
    assert container.session_service.get(world.algebra.session_id).student_ids == (world.s2.student_id,)

    assert container.student_service.delete(s1) is False
    with pytest.raises(NotFoundError):
        container.student_service.get(s1)
