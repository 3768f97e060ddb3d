from __future__ import annotations

from datetime import date

import pytest

from src.faculty_system.faculty_system.attendance.aggregate import AttendanceStats
from src.faculty_system.faculty_system.core.enums import AttendanceStatus
from src.faculty_system.faculty_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def _mark(world, entries, *, on="2026-03-02", caller=None):
    return world.container.attendance_service.mark_attendance(
        caller_id=caller or world.PROFESSOR_ID,
        course_id=world.course_id,
        attendance_date=on,
        entries=entries,
    )


def _lectures(world) -> int:
    return world.courses.get_by_id(world.course_id).total_lectures


def test_mixed_batch_records_valid_entries_and_reports_the_rest(world):
    outcome = _mark(
        world,
        [
            {"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Present"},
            {"studentId": world.BOB_ID, "name": "Bob Jones", "status": "Absent"},
            {"studentId": world.CAROL_ID, "name": "Carol White", "status": "Present"},
        ],
    )

    assert outcome.processed_count == 2
    assert [r.to_dict() for r in outcome.invalid] == [
        {"studentId": world.CAROL_ID, "name": "Carol White", "reason": "not enrolled or name mismatch"}
    ]
    assert _lectures(world) == 1

    stats = world.attendance.get_course_stats(world.course_id)
    assert stats[world.ALICE_ID] == AttendanceStats(present=1, absent=0)
    assert stats[world.ALICE_ID].percentage == 100.0
    assert stats[world.BOB_ID] == AttendanceStats(present=0, absent=1)
    assert stats[world.BOB_ID].percentage == 0.0
    assert world.CAROL_ID not in stats


def test_processed_plus_invalid_covers_every_entry(world):
    entries = [
        {"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "present"},
        {"studentId": world.BOB_ID, "name": "Bob Jones", "status": "Sick"},
        {"studentId": world.BOB_ID, "name": "Bob Jones"},
        {"name": "Alice Smith", "status": "Absent"},
        "garbage",
    ]

    outcome = _mark(world, entries)

    assert outcome.processed_count + len(outcome.invalid) == len(entries)
    assert outcome.processed_count == 1
    assert [r.reason for r in outcome.invalid] == [
        "invalid status",
        "missing field",
        "missing field",
        "missing field",
    ]


def test_empty_batch_still_counts_as_a_lecture(world):
    outcome = _mark(world, [])

    assert outcome.to_dict() == {"processedCount": 0, "invalid": []}
    assert _lectures(world) == 1


def test_each_call_bumps_the_lecture_counter_once(world):
    entry = {"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Present"}
    _mark(world, [entry], on="2026-03-02")
    _mark(world, [entry], on="2026-03-09")
    _mark(world, [{"studentId": 99, "name": "Nobody", "status": "Present"}], on="2026-03-16")

    assert _lectures(world) == 3


def test_remark_with_same_status_does_not_double_count(world):
    entry = {"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Present"}
    _mark(world, [entry])
    _mark(world, [entry])

    assert world.attendance.get_course_stats(world.course_id)[world.ALICE_ID] == AttendanceStats(present=1, absent=0)
    assert len(world.attendance.list_for_course(world.course_id)) == 1


def test_remark_with_different_status_moves_one_unit(world):
    _mark(world, [{"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Present"}])
    _mark(world, [{"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Absent"}])

    stats = world.attendance.get_course_stats(world.course_id)[world.ALICE_ID]
    assert stats == AttendanceStats(present=0, absent=1)

    records = world.attendance.list_for_course(world.course_id)
    assert [r.status for r in records] == [AttendanceStatus.ABSENT]


def test_late_and_excused_fold_into_absent(world):
    _mark(world, [{"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Present"}], on="2026-03-02")
    _mark(world, [{"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Late"}], on="2026-03-09")
    _mark(world, [{"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Excused"}], on="2026-03-16")
    _mark(world, [{"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Present"}], on="2026-03-23")

    stats = world.attendance.get_course_stats(world.course_id)[world.ALICE_ID]
    assert (stats.present, stats.absent) == (2, 2)
    assert stats.percentage == pytest.approx(50.0)


def test_outsider_professor_is_rejected_before_anything_changes(world):
    with pytest.raises(AuthorizationError):
        _mark(
            world,
            [{"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Present"}],
            caller=world.OTHER_PROFESSOR_ID,
        )

    assert _lectures(world) == 0
    assert world.attendance.list_for_course(world.course_id) == []


def test_unknown_course_is_not_found(world):
    with pytest.raises(NotFoundError):
        world.container.attendance_service.mark_attendance(
            caller_id=world.PROFESSOR_ID, course_id=999, attendance_date="2026-03-02", entries=[]
        )


@pytest.mark.parametrize("bad_date", ["", None, "02/03/2026", "2026-13-01", "2026-03-02garbage", "2026-03-02T10:00"])
def test_bad_date_is_a_validation_error(world, bad_date):
    with pytest.raises(ValidationError):
        _mark(world, [], on=bad_date)
    assert _lectures(world) == 0


def test_entries_must_be_a_list(world):
    with pytest.raises(ValidationError):
        _mark(world, {"studentId": world.ALICE_ID})


def test_records_are_keyed_by_course_student_and_date(world):
    _mark(world, [{"studentId": world.BOB_ID, "name": "Bob Jones", "status": "Late"}], on="2026-03-02")

    (record,) = world.attendance.list_for_course(world.course_id)
    assert record.attendance_date == date(2026, 3, 2)
    assert record.status == AttendanceStatus.LATE
    assert record.marked_by == world.PROFESSOR_ID


def test_low_attendance_triggers_a_warning_notification(world):
    _mark(
        world,
        [
            {"studentId": world.ALICE_ID, "name": "Alice Smith", "status": "Present"},
            {"studentId": world.BOB_ID, "name": "Bob Jones", "status": "Absent"},
        ],
    )

    assert world.notifications.for_user(world.ALICE_ID) == []
    (warning,) = world.notifications.for_user(world.BOB_ID)
    assert warning.title == "Attendance warning"
    assert "CS101" in warning.message


def test_failing_notifications_do_not_break_marking(broken_world):
    outcome = _mark(broken_world, [{"studentId": broken_world.BOB_ID, "name": "Bob Jones", "status": "Absent"}])

    assert outcome.processed_count == 1
    assert broken_world.attendance.get_course_stats(broken_world.course_id)[broken_world.BOB_ID].absent == 1


def test_non_ascii_digit_ids_are_rejected_per_entry(world):
    entries = [
        {"studentId": "²", "name": "Alice Smith", "status": "Present"},
        {"studentId": "١٠", "name": "Alice Smith", "status": "Present"},
        {"studentId": world.BOB_ID, "name": "Bob Jones", "status": "Present"},
    ]

    outcome = _mark(world, entries)

    assert outcome.processed_count + len(outcome.invalid) == len(entries)
    assert outcome.processed_count == 1
    assert [(r.student_id, r.reason) for r in outcome.invalid] == [
        ("²", "not enrolled or name mismatch"),
        ("١٠", "not enrolled or name mismatch"),
    ]


def test_malformed_course_id_is_reported_as_invalid(world):
    svc = world.container.attendance_service

    with pytest.raises(ValidationError, match="courseId is not valid"):
        svc.mark_attendance(caller_id=world.PROFESSOR_ID, course_id="²", attendance_date="2026-03-02", entries=[])
    with pytest.raises(ValidationError, match="courseId is not valid"):
        svc.mark_attendance(caller_id=world.PROFESSOR_ID, course_id="abc", attendance_date="2026-03-02", entries=[])
    with pytest.raises(ValidationError, match="courseId is required"):
        svc.mark_attendance(caller_id=world.PROFESSOR_ID, course_id="  ", attendance_date="2026-03-02", entries=[])
    assert _lectures(world) == 0


def test_unenrolled_student_keeps_history_but_cannot_be_marked(world):
    _mark(world, [{"studentId": world.BOB_ID, "name": "Bob Jones", "status": "Present"}], on="2026-03-02")

    assert world.container.course_service.unenroll_students(course_id=world.course_id, student_ids=[world.BOB_ID]) == 1
    outcome = _mark(world, [{"studentId": world.BOB_ID, "name": "Bob Jones", "status": "Absent"}], on="2026-03-03")

    assert outcome.processed_count == 0
    assert [r.reason for r in outcome.invalid] == ["not enrolled or name mismatch"]
    (record,) = world.attendance.list_for_student(world.BOB_ID)
    assert (record.attendance_date, record.status) == (date(2026, 3, 2), AttendanceStatus.PRESENT)
    assert world.attendance.get_student_stats(world.BOB_ID)[world.course_id].present == 1
