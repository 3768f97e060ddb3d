from __future__ import annotations

import logging

from ..common.validators import coerce_id, is_blank
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Course
from .repository import CourseRepository

logger = logging.getLogger(__name__)


def load_course(courses: CourseRepository, course_id) -> Course:
    cid = coerce_id(course_id)
    if cid is None:
        if is_blank(course_id):
            raise ValidationError("courseId is required")
        raise ValidationError("courseId is not valid")
    course = courses.get_by_id(cid)
    if not course:
        raise NotFoundError("Course not found")
    return course


def ensure_teaches(courses: CourseRepository, course: Course, caller_id: int) -> None:
    """Caller must be in the course's instructor set."""
    if int(caller_id) not in courses.get_professor_ids(course.course_id):
        logger.info("User %s is not assigned to course %s", caller_id, course.course_id)
        raise AuthorizationError("You are not assigned to this course")
