"""Enrollment module.

Enrolls a student into a course. Validation runs four gates in a fixed
order and stops at the first failure:

1. the student exists
2. the course exists
3. the course has a free seat
4. the student is not already enrolled in the course

Once validated, a take row is inserted and the course loses one seat. Both
writes happen in a single transaction.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

import structlog

from registrar.db import repository
from registrar.db.database import transaction

logger = structlog.get_logger(__name__)

ENROLL_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# =============================================================================
# ERRORS
# =============================================================================


class EnrollmentValidationError(Exception):
    """An enrollment request failed one of the validation gates."""

    reason = "invalid"


class StudentNotFoundError(EnrollmentValidationError):
    reason = "student_not_found"

    def __init__(self, student_id: int):
        self.student_id = student_id
        super().__init__(f"student {student_id} not found.")


class CourseNotFoundError(EnrollmentValidationError):
    reason = "course_not_found"

    def __init__(self, course_id: int):
        self.course_id = course_id
        super().__init__(f"course {course_id} not found.")


class CourseFullError(EnrollmentValidationError):
    reason = "course_full"

    def __init__(self, course_id: int):
        self.course_id = course_id
        super().__init__(f"course {course_id} is full.")


class AlreadyEnrolledError(EnrollmentValidationError):
    reason = "already_enrolled"

    def __init__(self, student_id: int, course_id: int):
        self.student_id = student_id
        self.course_id = course_id
        super().__init__(
            f"student {student_id} already enrolled in course {course_id}."
        )


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class EnrollmentResult:
    """Result of an enrollment request."""

    success: bool
    student_id: int
    course_id: int
    message: str
    reason: str | None = None
    enroll_date: str | None = None
    seats_left: int | None = None


# =============================================================================
# OPERATIONS
# =============================================================================


def validate_enrollment(
    conn: sqlite3.Connection, student_id: int, course_id: int
) -> None:
    """Run the four validation gates in order.

    Raises:
        StudentNotFoundError: No student with this id
        CourseNotFoundError: No course with this id
        CourseFullError: Course has no seats left
        AlreadyEnrolledError: Student already takes this course
        sqlite3.Error: If a lookup fails
        OverflowError: If an id does not fit in an SQLite INTEGER
    """
    if not repository.student_exists(conn, student_id):
        raise StudentNotFoundError(student_id)

    if not repository.course_exists(conn, course_id):
        raise CourseNotFoundError(course_id)

    if not repository.is_seats_available(conn, course_id):
        raise CourseFullError(course_id)

    if repository.is_currently_enrolled(conn, student_id, course_id):
        raise AlreadyEnrolledError(student_id, course_id)


def enroll(
    conn: sqlite3.Connection,
    student_id: int,
    course_id: int,
    *,
    clock: Callable[[], datetime] | None = None,
) -> EnrollmentResult:
    """Enroll a student into a course.

    Validation failures and store errors are logged and returned as a
    failed result; this function does not raise for them.

    Args:
        conn: Open connection
        student_id: Student to enroll
        course_id: Target course
        clock: Returns the enrollment timestamp (defaults to datetime.now)

    Returns:
        EnrollmentResult describing the outcome
    """
    clock = clock or datetime.now

    try:
        validate_enrollment(conn, student_id, course_id)
    except EnrollmentValidationError as e:
        logger.info(
            "enrollment.rejected",
            student_id=student_id,
            course_id=course_id,
            reason=e.reason,
        )
        return EnrollmentResult(
            success=False,
            student_id=student_id,
            course_id=course_id,
            message=str(e),
            reason=e.reason,
        )
    except (sqlite3.Error, OverflowError) as e:
        return _store_failure(student_id, course_id, e)

    enroll_date = clock().strftime(ENROLL_DATE_FORMAT)

    try:
        with transaction(conn):
            repository.insert_take(conn, student_id, course_id, enroll_date)
            repository.decrement_seats(conn, course_id)
            course = repository.get_course(conn, course_id)
    except (sqlite3.Error, OverflowError) as e:
        return _store_failure(student_id, course_id, e)

    logger.info(
        "enrollment.completed",
        student_id=student_id,
        course_id=course_id,
        enroll_date=enroll_date,
        seats_left=course.seats_available,
    )
    return EnrollmentResult(
        success=True,
        student_id=student_id,
        course_id=course_id,
        message=f"Student {student_id} successfully enrolled in course {course_id}",
        enroll_date=enroll_date,
        seats_left=course.seats_available,
    )


def _store_failure(
    student_id: int, course_id: int, error: Exception
) -> EnrollmentResult:
    logger.error(
        "enrollment.store_error",
        student_id=student_id,
        course_id=course_id,
        error=str(error),
    )
    return EnrollmentResult(
        success=False,
        student_id=student_id,
        course_id=course_id,
        message=str(error),
        reason="store_error",
    )
