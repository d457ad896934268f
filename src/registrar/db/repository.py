"""Repository functions for the course, student and take tables.

Every function takes the connection explicitly and uses parameterized
statements. Nothing here commits; callers own the transaction.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class CourseRecord:
    """Course record from database."""

    course_id: int
    title: str
    seats_available: int


@dataclass
class StudentRecord:
    """Student record from database."""

    student_id: int
    name: str


@dataclass
class TakeRecord:
    """Enrollment record from database."""

    student_id: int
    course_id: int
    enroll_date: str


# =============================================================================
# VALIDATION QUERIES
# =============================================================================


def student_exists(conn: sqlite3.Connection, student_id: int) -> bool:
    row = conn.execute(
        "SELECT student_id FROM student WHERE student_id = ?", (student_id,)
    ).fetchone()
    return row is not None


def course_exists(conn: sqlite3.Connection, course_id: int) -> bool:
    row = conn.execute(
        "SELECT course_id FROM course WHERE course_id = ?", (course_id,)
    ).fetchone()
    return row is not None


def is_seats_available(conn: sqlite3.Connection, course_id: int) -> bool:
    """True if the course has at least one free seat."""
    row = conn.execute(
        "SELECT course_id FROM course WHERE course_id = ? AND seats_available > 0",
        (course_id,),
    ).fetchone()
    return row is not None


def is_currently_enrolled(
    conn: sqlite3.Connection, student_id: int, course_id: int
) -> bool:
    """True if a take row exists for this (student, course) pair."""
    row = conn.execute(
        "SELECT 1 FROM take WHERE course_id = ? AND student_id = ?",
        (course_id, student_id),
    ).fetchone()
    return row is not None


# =============================================================================
# WRITES
# =============================================================================


def insert_take(
    conn: sqlite3.Connection, student_id: int, course_id: int, enroll_date: str
) -> TakeRecord:
    """Insert one enrollment row.

    Returns:
        The inserted TakeRecord

    Raises:
        sqlite3.IntegrityError: On a duplicate pair or a dangling reference
    """
    conn.execute(
        "INSERT INTO take (course_id, student_id, enroll_date) VALUES (?, ?, ?)",
        (course_id, student_id, enroll_date),
    )
    logger.debug("take.inserted", student_id=student_id, course_id=course_id)
    return TakeRecord(student_id=student_id, course_id=course_id, enroll_date=enroll_date)


def decrement_seats(conn: sqlite3.Connection, course_id: int) -> int:
    """Take one seat from a course.

    Returns:
        Number of rows updated (0 if the course does not exist)
    """
    cursor = conn.execute(
        "UPDATE course SET seats_available = seats_available - 1 WHERE course_id = ?",
        (course_id,),
    )
    logger.debug("course.seat_taken", course_id=course_id, rows=cursor.rowcount)
    return cursor.rowcount


# =============================================================================
# READS
# =============================================================================


def get_course(conn: sqlite3.Connection, course_id: int) -> CourseRecord | None:
    """Get course by ID.

    Returns:
        CourseRecord if found, None otherwise
    """
    row = conn.execute(
        "SELECT course_id, title, seats_available FROM course WHERE course_id = ?",
        (course_id,),
    ).fetchone()

    if row is None:
        return None

    return CourseRecord(
        course_id=row["course_id"],
        title=row["title"],
        seats_available=row["seats_available"],
    )


def fetch_students_after(
    conn: sqlite3.Connection, last_id: int, limit: int
) -> list[StudentRecord]:
    """Get the next slice of students with student_id > last_id.

    Args:
        conn: Open connection
        last_id: Highest student_id already seen (0 for the first page)
        limit: Maximum number of rows to return

    Returns:
        Up to `limit` students in ascending student_id order
    """
    rows = conn.execute(
        "SELECT student_id, name FROM student WHERE student_id > ? "
        "ORDER BY student_id ASC LIMIT ?",
        (last_id, limit),
    ).fetchall()
    return [StudentRecord(student_id=row["student_id"], name=row["name"]) for row in rows]


def count_rows(conn: sqlite3.Connection, table: str) -> int:
    """Count rows in one of the known tables."""
    if table not in ("course", "student", "take"):
        raise ValueError(f"Unknown table: {table}")
    return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

