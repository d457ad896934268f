"""Schema creation and sample data loading.

Tables:
- course (course_id, title, seats_available)
- student (student_id, name)
- take (student_id, course_id, enroll_date)

Seed data is a fixed literal dataset: 3 courses, 10 students (4 in the
"short" variant) and 5 enrollments.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field

import structlog

from registrar.db.repository import count_rows

logger = structlog.get_logger(__name__)

TABLES = ("course", "student", "take")

SEED_COURSES: list[tuple[int, str, int]] = [
    (1, "CMPUT291", 200),
    (2, "CMPUT274", 70),
    (3, "CMPUT301", 80),
]

SEED_STUDENTS: list[tuple[int, str]] = [
    (11, "John"),
    (12, "Mary"),
    (13, "Steve"),
    (14, "Bob"),
    (15, "Seth"),
    (16, "Samantha"),
    (17, "Emily"),
    (18, "Paul"),
    (19, "Emma"),
    (20, "Ross"),
]

# (course_id, student_id, enroll_date)
SEED_TAKES: list[tuple[int, int, str]] = [
    (1, 11, "2017-08-01"),
    (2, 13, "2017-09-01"),
    (2, 14, "2017-08-15"),
    (3, 11, "2017-09-01"),
    (3, 12, "2017-08-15"),
]

SEED_VARIANTS = {
    "full": SEED_STUDENTS,
    "short": SEED_STUDENTS[:4],
}


class BootstrapError(Exception):
    """A bootstrap step failed against the store."""

    def __init__(self, step: str, message: str):
        self.step = step
        self.message = message
        super().__init__(f"{step} : {message}")


@dataclass
class BootstrapReport:
    """Outcome of schema creation and seeding."""

    tables: list[str] = field(default_factory=list)
    inserted: dict[str, int] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)
    errors: list[BootstrapError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def create_schema(conn: sqlite3.Connection, report: BootstrapReport | None = None) -> BootstrapReport:
    """Create the three tables if they don't exist.

    Idempotent. A store error is logged and recorded in the report; tables
    created before the failure are kept.
    """
    report = report or BootstrapReport()

    try:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS course (
                course_id INTEGER,
                title TEXT,
                seats_available INTEGER CHECK(seats_available >= 0),
                PRIMARY KEY(course_id)
            );

            CREATE TABLE IF NOT EXISTS student (
                student_id INTEGER,
                name TEXT,
                PRIMARY KEY(student_id)
            );

            CREATE TABLE IF NOT EXISTS take (
                course_id INTEGER REFERENCES course(course_id),
                student_id INTEGER REFERENCES student(student_id),
                enroll_date TEXT,
                PRIMARY KEY(student_id, course_id)
            );
            """
        )
    except sqlite3.Error as e:
        logger.error("schema.create_failed", error=str(e))
        report.errors.append(BootstrapError("createSchema", str(e)))
        return report

    report.tables = list(TABLES)
    logger.info("schema.created", tables=report.tables)
    return report


def init_schema(
    conn: sqlite3.Connection,
    variant: str = "full",
    skip_existing: bool = True,
    report: BootstrapReport | None = None,
) -> BootstrapReport:
    """Load the sample rows, one parameterized insert per row.

    Batches (course, student, take) are committed one by one. If a row
    fails, rows already inserted in that batch stay, the error is recorded
    and seeding moves on to the next batch.

    Args:
        conn: Open connection with the schema in place
        variant: "full" (10 students) or "short" (4 students)
        skip_existing: Leave tables that already hold rows untouched
        report: Report to extend (a new one is created if omitted)

    Raises:
        ValueError: If variant is unknown
    """
    if variant not in SEED_VARIANTS:
        raise ValueError(
            f"Unknown seed variant '{variant}' (expected one of: {', '.join(SEED_VARIANTS)})"
        )

    report = report or BootstrapReport()
    batches = [
        ("course", "INSERT INTO course (course_id, title, seats_available) VALUES (?, ?, ?)", SEED_COURSES),
        ("student", "INSERT INTO student (student_id, name) VALUES (?, ?)", SEED_VARIANTS[variant]),
        ("take", "INSERT INTO take (course_id, student_id, enroll_date) VALUES (?, ?, ?)", SEED_TAKES),
    ]

    for table, sql, rows in batches:
        inserted = 0
        try:
            if skip_existing and count_rows(conn, table) > 0:
                report.skipped.append(table)
                logger.info("schema.seed_skipped", table=table)
                continue

            for row in rows:
                conn.execute(sql, row)
                inserted += 1
        except sqlite3.Error as e:
            logger.error("schema.seed_failed", table=table, inserted=inserted, error=str(e))
            report.errors.append(BootstrapError("initSchema", str(e)))
        finally:
            conn.commit()

        report.inserted[table] = inserted

    logger.info("schema.seeded", variant=variant, inserted=report.inserted)
    return report


def bootstrap(
    conn: sqlite3.Connection,
    variant: str = "full",
    skip_existing: bool = True,
) -> BootstrapReport:
    """Create the schema and load the sample data."""
    report = create_schema(conn)
    if report.ok:
        init_schema(conn, variant=variant, skip_existing=skip_existing, report=report)
    return report
