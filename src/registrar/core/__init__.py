"""Core business operations: enrollment and pagination."""

from registrar.core.enrollment import (
    AlreadyEnrolledError,
    CourseFullError,
    CourseNotFoundError,
    EnrollmentResult,
    EnrollmentValidationError,
    StudentNotFoundError,
    enroll,
)
from registrar.core.pagination import (
    PageSizeError,
    PaginationResult,
    StudentPage,
    paginate,
    render_page,
)

__all__ = [
    "AlreadyEnrolledError",
    "CourseFullError",
    "CourseNotFoundError",
    "EnrollmentResult",
    "EnrollmentValidationError",
    "StudentNotFoundError",
    "enroll",
    "PageSizeError",
    "PaginationResult",
    "StudentPage",
    "paginate",
    "render_page",
]
