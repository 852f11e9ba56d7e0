"""Application-level contracts for the remote catalog service."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

from catalog_client.domain.catalog import CourseId, CourseSummary

TResult = TypeVar("TResult")


class CatalogClientError(RuntimeError):
    """Base error for failed catalog service calls."""


class CatalogRequestError(CatalogClientError):
    """Raised on non-2xx responses. The message is the raw response body text."""

    def __init__(self, body_text: str, *, status_code: int) -> None:
        super().__init__(body_text)
        self.body_text = body_text
        self.status_code = status_code


class CatalogTransportError(CatalogClientError):
    """Raised when the service cannot be reached at all."""


class CatalogResponseError(CatalogClientError):
    """Raised when a 2xx response body does not have the expected shape."""


@dataclass(frozen=True)
class RegisterCommand:
    """Registration payload sent to the auth endpoint."""

    email: str
    name: str
    password: str
    is_admin: bool


@dataclass(frozen=True)
class CreateCourseCommand:
    """Parsed new-course payload."""

    title: str
    description: str
    price: float
    tags: tuple[str, ...]


@dataclass(frozen=True)
class RegisteredUser:
    """Subset of the registration response the client shows."""

    name: str


class CatalogGateway(Protocol):
    """Port for the remote catalog service, one method per endpoint."""

    def register(self, command: RegisterCommand) -> RegisteredUser:
        """Create an account."""
        ...

    def list_courses(
        self,
        *,
        search_text: str | None = None,
        tag: str | None = None,
    ) -> list[CourseSummary]:
        """Return courses, optionally filtered by free text and tag."""
        ...

    def create_course(self, command: CreateCourseCommand) -> None:
        """Create a course. The response body is not used."""
        ...

    def enroll(self, course_id: CourseId, user_email: str) -> None:
        """Enroll a user in a course."""
        ...

    def init_payment(self, course_id: CourseId, user_email: str) -> str:
        """Start a mock payment and return the checkout URL."""
        ...

    def recommend(self, interests: Sequence[str]) -> list[CourseSummary]:
        """Return courses recommended for the given interest tags."""
        ...

    def my_courses(self, user_email: str) -> list[CourseSummary]:
        """Return courses the user is enrolled in."""
        ...


class RequestDispatcher(Protocol):
    """Runs a blocking gateway call and reports its outcome back to the caller."""

    def submit(
        self,
        call: Callable[[], TResult],
        on_success: Callable[[TResult], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        """Schedule call; exactly one of the callbacks is invoked once it completes."""
        ...


class ImmediateDispatcher(RequestDispatcher):
    """Run calls inline on the caller thread."""

    def submit(
        self,
        call: Callable[[], TResult],
        on_success: Callable[[TResult], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        try:
            result = call()
        except Exception as exc:
            on_failure(exc)
            return
        on_success(result)
