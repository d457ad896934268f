"""Student pagination module.

Lists students page by page with keyset pagination: each page is the next
`page_size` students whose id is greater than the last id already shown,

    SELECT * FROM student WHERE student_id > :last_id
    ORDER BY student_id LIMIT :page_size

The loop ends on the first empty page. Since last_id strictly increases on
every non-empty page and student_id is the primary key, no row is skipped
or shown twice.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Iterator

import structlog

from registrar.db.repository import StudentRecord, fetch_students_after

logger = structlog.get_logger(__name__)

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 5

# Below every valid student_id
START_ID = 0

ID_WIDTH = 3
NAME_WIDTH = 8
BORDER = f"+{'-' * ID_WIDTH}|{'-' * NAME_WIDTH}+"


class PageSizeError(ValueError):
    """Page size outside the accepted bounds."""

    def __init__(self, page_size: int, minimum: int, maximum: int):
        self.page_size = page_size
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"page size must be in range [{minimum},{maximum}]")


@dataclass
class StudentPage:
    """One page of students."""

    number: int
    students: list[StudentRecord]

    @property
    def last_id(self) -> int:
        return self.students[-1].student_id


@dataclass
class PaginationResult:
    """Result of a full pagination run."""

    success: bool
    page_size: int
    pages: list[StudentPage] = field(default_factory=list)
    message: str = ""

    @property
    def total_students(self) -> int:
        return sum(len(p.students) for p in self.pages)


def validate_page_size(
    page_size: int,
    minimum: int = MIN_PAGE_SIZE,
    maximum: int = MAX_PAGE_SIZE,
) -> None:
    """Check that page_size is within [minimum, maximum].

    Raises:
        PageSizeError: If it is not
    """
    if page_size < minimum or page_size > maximum:
        raise PageSizeError(page_size, minimum, maximum)


def iter_pages(conn: sqlite3.Connection, page_size: int) -> Iterator[StudentPage]:
    """Yield non-empty pages of students in ascending id order.

    Args:
        conn: Open connection
        page_size: Maximum students per page (assumed already validated)

    Raises:
        sqlite3.Error: If a page query fails
    """
    last_id = START_ID
    number = 1

    while True:
        students = fetch_students_after(conn, last_id, page_size)
        if not students:
            return

        page = StudentPage(number=number, students=students)
        logger.debug("pagination.page", page=number, size=len(students), last_id=page.last_id)
        yield page

        last_id = page.last_id
        number += 1


def paginate(
    conn: sqlite3.Connection,
    page_size: int,
    minimum: int = MIN_PAGE_SIZE,
    maximum: int = MAX_PAGE_SIZE,
) -> PaginationResult:
    """Collect every page of students.

    Page size violations and store errors are logged and returned as a
    failed result.
    """
    try:
        validate_page_size(page_size, minimum, maximum)
    except PageSizeError as e:
        logger.info("pagination.rejected", page_size=page_size)
        return PaginationResult(success=False, page_size=page_size, message=str(e))

    try:
        pages = list(iter_pages(conn, page_size))
    except sqlite3.Error as e:
        logger.error("pagination.store_error", page_size=page_size, error=str(e))
        return PaginationResult(success=False, page_size=page_size, message=str(e))

    result = PaginationResult(success=True, page_size=page_size, pages=pages)
    logger.info(
        "pagination.completed",
        page_size=page_size,
        pages=len(pages),
        students=result.total_students,
    )
    return result


def render_page(page: StudentPage) -> list[str]:
    """Render a page as a bordered table, one string per line.

    The last line is empty to separate consecutive pages.
    """
    lines = [
        f"Page {page.number}",
        BORDER,
        f"|{'id':<{ID_WIDTH}}|{'name':<{NAME_WIDTH}}|",
        BORDER,
    ]
    for student in page.students:
        lines.append(f"|{student.student_id:<{ID_WIDTH}}|{student.name:<{NAME_WIDTH}}|")
    lines.append(BORDER)
    lines.append("")
    return lines
