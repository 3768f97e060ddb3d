from __future__ import annotations

import pytest

from src.faculty_system.faculty_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.faculty_system.faculty_system.grades.service import parse_grade


def _submit(world, entries, *, caller=None, course_id=None):
    return world.container.grade_service.submit_grades(
        caller_id=caller or world.PROFESSOR_ID,
        course_id=course_id or world.course_id,
        entries=entries,
    )


@pytest.mark.parametrize(
    "raw, expected",
    [(85, 85.0), ("92.5", 92.5), (0, 0.0), ("A+", None), (True, None), (None, None), ("nan", None)],
)
def test_parse_grade(raw, expected):
    assert parse_grade(raw) == expected


def test_enrolled_students_are_graded_and_strangers_are_reported(world):
    outcome = _submit(
        world,
        [
            {"studentId": world.ALICE_ID, "grade": 85},
            {"studentId": world.CAROL_ID, "grade": 90},
        ],
    )

    assert outcome.submitted_count == 1
    assert [r.to_dict() for r in outcome.invalid] == [
        {"studentId": world.CAROL_ID, "name": None, "reason": "not enrolled or name mismatch"}
    ]
    assert outcome.missing == []

    (course_entry,) = world.grades.list_for_course(world.course_id)
    assert (course_entry.student_id, course_entry.grade, course_entry.submitted_by) == (
        world.ALICE_ID, 85.0, world.PROFESSOR_ID
    )
    (history_entry,) = world.grades.list_for_student(world.ALICE_ID)
    assert history_entry.grade == 85.0


def test_every_entry_lands_in_exactly_one_bucket(world):
    entries = [
        {"studentId": world.ALICE_ID, "grade": 70},
        {"studentId": world.BOB_ID, "name": "bob jones", "grade": "88"},
        {"studentId": world.BOB_ID, "name": "Robert Jones", "grade": 60},
        {"studentId": world.ALICE_ID, "grade": "excellent"},
        {"studentId": world.ALICE_ID},
        {"grade": 50},
        {"studentId": world.BOB_ID, "grade": ""},
    ]

    outcome = _submit(world, entries)

    assert outcome.submitted_count + len(outcome.invalid) + len(outcome.missing) == len(entries)
    assert outcome.submitted_count == 2
    assert [r.reason for r in outcome.invalid] == ["not enrolled or name mismatch", "invalid grade"]
    assert [r.index for r in outcome.missing] == [4, 5, 6]
    assert all(r.reason == "missing field" for r in outcome.missing)


def test_resubmission_is_additive(world):
    _submit(world, [{"studentId": world.ALICE_ID, "grade": 85}])
    _submit(world, [{"studentId": world.ALICE_ID, "grade": 91}])

    assert [g.grade for g in world.grades.list_for_course(world.course_id)] == [85.0, 91.0]
    assert [g.grade for g in world.grades.list_for_student(world.ALICE_ID)] == [85.0, 91.0]


def test_graded_students_are_notified(world):
    _submit(world, [{"studentId": world.ALICE_ID, "grade": 85}, {"studentId": world.CAROL_ID, "grade": 90}])

    assert [n.title for n in world.notifications.for_user(world.ALICE_ID)] == ["New grade posted"]
    assert world.notifications.for_user(world.CAROL_ID) == []


def test_failing_notifications_do_not_break_grading(broken_world):
    outcome = _submit(broken_world, [{"studentId": broken_world.ALICE_ID, "grade": 85}])

    assert outcome.submitted_count == 1
    assert len(broken_world.grades.list_for_course(broken_world.course_id)) == 1


def test_request_level_failures(world):
    with pytest.raises(AuthorizationError):
        _submit(world, [{"studentId": world.ALICE_ID, "grade": 85}], caller=world.OTHER_PROFESSOR_ID)
    with pytest.raises(NotFoundError):
        _submit(world, [{"studentId": world.ALICE_ID, "grade": 85}], course_id=999)
    with pytest.raises(ValidationError):
        _submit(world, [])
    with pytest.raises(ValidationError):
        _submit(world, {"studentId": world.ALICE_ID, "grade": 85})

    assert world.grades.list_for_course(world.course_id) == []


def test_single_grade_submission(world):
    svc = world.container.grade_service

    entry = svc.submit_grade(caller_id=world.PROFESSOR_ID, course_id=world.course_id, student_id=world.BOB_ID, grade="77")
    assert entry.to_dict()["grade"] == 77.0
    assert [g.student_id for g in world.grades.list_for_course(world.course_id)] == [world.BOB_ID]

    with pytest.raises(ValidationError):
        svc.submit_grade(caller_id=world.PROFESSOR_ID, course_id=world.course_id, student_id=world.CAROL_ID, grade=80)
    with pytest.raises(ValidationError):
        svc.submit_grade(caller_id=world.PROFESSOR_ID, course_id=world.course_id, student_id=world.BOB_ID, grade="B")


def test_student_sees_grades_grouped_by_enrolled_course(world):
    _submit(world, [{"studentId": world.ALICE_ID, "grade": 85}, {"studentId": world.BOB_ID, "grade": 60}])

    (course,) = world.container.grade_service.get_student_grades(world.ALICE_ID)
    assert course["courseCode"] == "CS101"
    assert course["credits"] == 3
    assert [g["grade"] for g in course["grades"]] == [85.0]


def test_course_grades_require_teaching_the_course(world):
    _submit(world, [{"studentId": world.ALICE_ID, "grade": 85}])
    svc = world.container.grade_service

    assert len(svc.get_course_grades(caller_id=world.PROFESSOR_ID, course_id=world.course_id)) == 1
    with pytest.raises(AuthorizationError):
        svc.get_course_grades(caller_id=world.OTHER_PROFESSOR_ID, course_id=world.course_id)


def test_non_ascii_digit_ids_are_reported_not_raised(world):
    outcome = _submit(
        world,
        [
            {"studentId": "²", "grade": 80},
            {"studentId": world.ALICE_ID, "grade": 90},
        ],
    )

    assert outcome.submitted_count == 1
    assert [r.to_dict() for r in outcome.invalid] == [
        {"studentId": "²", "name": None, "reason": "not enrolled or name mismatch"}
    ]
    with pytest.raises(ValidationError):
        world.container.grade_service.submit_grade(
            caller_id=world.PROFESSOR_ID, course_id=world.course_id, student_id="²", grade=80
        )
    with pytest.raises(ValidationError, match="courseId is not valid"):
        _submit(world, [{"studentId": world.ALICE_ID, "grade": 90}], course_id="²")


def test_unenrolled_student_keeps_grades_but_cannot_be_graded_again(world):
    _submit(world, [{"studentId": world.BOB_ID, "grade": 60}])

    world.container.course_service.unenroll_students(course_id=world.course_id, student_ids=[world.BOB_ID])

    outcome = _submit(world, [{"studentId": world.BOB_ID, "grade": 75}, {"studentId": world.ALICE_ID, "grade": 88}])
    assert outcome.submitted_count == 1
    assert [(r.student_id, r.reason) for r in outcome.invalid] == [(world.BOB_ID, "not enrolled or name mismatch")]
    with pytest.raises(ValidationError):
        world.container.grade_service.submit_grade(
            caller_id=world.PROFESSOR_ID, course_id=world.course_id, student_id=world.BOB_ID, grade=75
        )
    assert [g.grade for g in world.grades.list_for_student(world.BOB_ID)] == [60.0]
    assert [g.student_id for g in world.grades.list_for_course(world.course_id)] == [world.BOB_ID, world.ALICE_ID]
