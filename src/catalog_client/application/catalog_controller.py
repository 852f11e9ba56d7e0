"""State container mediating between user intents and the catalog service."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from enum import StrEnum
from typing import TypeVar
from uuid import uuid4

from catalog_client.application.catalog import (
    CatalogClientError,
    CatalogGateway,
    CreateCourseCommand,
    ImmediateDispatcher,
    RegisterCommand,
    RegisteredUser,
    RequestDispatcher,
)
from catalog_client.application.input_parsing import parse_price, split_comma_list
from catalog_client.domain.catalog import (
    CatalogViewState,
    CourseDraft,
    CourseSummary,
)

LOGGER = logging.getLogger(__name__)

# Known security gap: every account is registered with this password until the
# backend grows real credential handling.
PLACEHOLDER_PASSWORD = "pass1234"

ERROR_PREFIX = "Error: "
COURSE_CREATED_MESSAGE = "Course created"

TResult = TypeVar("TResult")
StateListener = Callable[[CatalogViewState], None]
UrlOpener = Callable[[str], object]


class ResultSlot(StrEnum):
    """View-state fields replaced wholesale by background refreshes."""

    COURSES = "courses"
    RESULTS = "results"


class CatalogController:
    """Own the view state and expose every mutation as a named action.

    Primary actions (register, create course, enroll, buy) report failures in the
    status banner. Background refreshes (course list, recommendations, my courses)
    only log failures and leave the state untouched.
    """

    def __init__(
        self,
        gateway: CatalogGateway,
        *,
        open_url: UrlOpener,
        dispatcher: RequestDispatcher | None = None,
        initial_state: CatalogViewState | None = None,
        discard_stale: bool = False,
    ) -> None:
        self._gateway = gateway
        self._open_url = open_url
        self._dispatcher = dispatcher or ImmediateDispatcher()
        self._state = initial_state or CatalogViewState()
        self._discard_stale = discard_stale
        self._listeners: list[StateListener] = []
        self._latest_sequence: dict[ResultSlot, int] = {slot: 0 for slot in ResultSlot}
        self._disposed = False

    @property
    def state(self) -> CatalogViewState:
        """Return current state snapshot."""
        return self._state

    @property
    def is_disposed(self) -> bool:
        """Return whether the owning view has been torn down."""
        return self._disposed

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispose(self) -> None:
        """Detach from the view; responses arriving later are dropped."""
        self._disposed = True
        self._listeners.clear()

    # Input edits

    def update_profile(
        self,
        *,
        email: str | None = None,
        name: str | None = None,
        is_admin: bool | None = None,
    ) -> None:
        """Apply profile field edits."""
        profile = self._state.profile
        self._replace(
            profile=dataclasses.replace(
                profile,
                email=profile.email if email is None else email,
                name=profile.name if name is None else name,
                is_admin=profile.is_admin if is_admin is None else is_admin,
            )
        )

    def update_filters(
        self,
        *,
        search_text: str | None = None,
        tag_text: str | None = None,
    ) -> None:
        """Apply search/tag filter edits without reloading."""
        filters = self._state.filters
        self._replace(
            filters=dataclasses.replace(
                filters,
                search_text=filters.search_text if search_text is None else search_text,
                tag_text=filters.tag_text if tag_text is None else tag_text,
            )
        )

    def update_course_draft(
        self,
        *,
        title: str | None = None,
        description: str | None = None,
        price_text: str | None = None,
        tags_text: str | None = None,
    ) -> None:
        """Apply new-course form edits."""
        draft = self._state.draft
        self._replace(
            draft=dataclasses.replace(
                draft,
                title=draft.title if title is None else title,
                description=draft.description if description is None else description,
                price_text=draft.price_text if price_text is None else price_text,
                tags_text=draft.tags_text if tags_text is None else tags_text,
            )
        )

    def update_interests(self, interests_text: str) -> None:
        """Apply recommendation input edits."""
        self._replace(interests_text=interests_text)

    # Primary actions

    def register(self) -> None:
        """Register the profile draft as a new account."""
        self._set_status(None)
        profile = self._state.profile
        command = RegisterCommand(
            email=profile.email,
            name=profile.name,
            password=PLACEHOLDER_PASSWORD,
            is_admin=profile.is_admin,
        )
        LOGGER.warning(
            "event=register_placeholder_password email=%s is_admin=%s",
            profile.email,
            profile.is_admin,
        )

        def on_registered(user: RegisteredUser) -> None:
            self._set_status(f"Welcome {user.name}! Account created.")

        self._run_primary("register", lambda: self._gateway.register(command), on_registered)

    def create_course(self) -> None:
        """Submit the course draft, then reload the list and clear the draft."""
        self._set_status(None)
        draft = self._state.draft
        command = CreateCourseCommand(
            title=draft.title,
            description=draft.description,
            price=parse_price(draft.price_text),
            tags=tuple(split_comma_list(draft.tags_text)),
        )
        self._run_primary(
            "create_course",
            lambda: self._gateway.create_course(command),
            lambda _: self.load_courses(on_settled=self._finish_course_creation),
        )

    def enroll(self, course: CourseSummary) -> None:
        """Enroll the current profile email in course."""
        self._set_status(None)
        user_email = self._state.profile.email

        def on_enrolled(_: None) -> None:
            self._set_status(f"Enrolled in {course.title}")

        self._run_primary(
            "enroll",
            lambda: self._gateway.enroll(course.course_id, user_email),
            on_enrolled,
        )

    def buy(self, course: CourseSummary) -> None:
        """Start a payment for course and open the returned checkout page."""
        self._set_status(None)
        user_email = self._state.profile.email
        self._run_primary(
            "buy",
            lambda: self._gateway.init_payment(course.course_id, user_email),
            self._open_checkout,
        )

    # Background refreshes

    def load_courses(self, on_settled: Callable[[], None] | None = None) -> None:
        """Reload the course list using the current filters."""
        filters = self._state.filters
        search_text = filters.search_text or None
        tag = filters.tag_text or None
        self._run_background(
            "load_courses",
            ResultSlot.COURSES,
            lambda: self._gateway.list_courses(search_text=search_text, tag=tag),
            on_settled=on_settled,
        )

    def get_recommendations(self) -> None:
        """Fetch recommendations for the current interests text."""
        interests = split_comma_list(self._state.interests_text)
        self._run_background(
            "get_recommendations",
            ResultSlot.RESULTS,
            lambda: self._gateway.recommend(interests),
        )

    def load_my_courses(self) -> None:
        """Show courses of the current profile email in the results panel."""
        user_email = self._state.profile.email
        self._run_background(
            "load_my_courses",
            ResultSlot.RESULTS,
            lambda: self._gateway.my_courses(user_email),
        )

    # Internals

    def _run_primary(
        self,
        action: str,
        call: Callable[[], TResult],
        on_success: Callable[[TResult], object],
    ) -> None:
        correlation_id = str(uuid4())
        LOGGER.info(
            "event=catalog_request_started correlation_id=%s action=%s",
            correlation_id,
            action,
        )

        def handle_success(result: TResult) -> None:
            if self._drop_if_disposed(action, correlation_id):
                return
            LOGGER.info(
                "event=catalog_request_succeeded correlation_id=%s action=%s",
                correlation_id,
                action,
            )
            on_success(result)

        def handle_failure(error: Exception) -> None:
            if self._drop_if_disposed(action, correlation_id):
                return
            if isinstance(error, CatalogClientError):
                LOGGER.warning(
                    "event=catalog_request_failed correlation_id=%s action=%s error_type=%s",
                    correlation_id,
                    action,
                    error.__class__.__name__,
                )
            else:
                LOGGER.exception(
                    "event=catalog_request_crashed correlation_id=%s action=%s error_type=%s",
                    correlation_id,
                    action,
                    error.__class__.__name__,
                    exc_info=error,
                )
            self._set_status(f"{ERROR_PREFIX}{error}")

        self._dispatcher.submit(call, handle_success, handle_failure)

    def _run_background(
        self,
        action: str,
        slot: ResultSlot,
        call: Callable[[], list[CourseSummary]],
        on_settled: Callable[[], None] | None = None,
    ) -> None:
        correlation_id = str(uuid4())
        self._latest_sequence[slot] += 1
        sequence = self._latest_sequence[slot]
        LOGGER.info(
            "event=catalog_refresh_started correlation_id=%s action=%s sequence=%s",
            correlation_id,
            action,
            sequence,
        )

        def handle_success(courses: list[CourseSummary]) -> None:
            if self._drop_if_disposed(action, correlation_id):
                return
            if self._discard_stale and sequence != self._latest_sequence[slot]:
                LOGGER.info(
                    (
                        "event=response_discarded correlation_id=%s action=%s "
                        "reason=stale sequence=%s latest=%s"
                    ),
                    correlation_id,
                    action,
                    sequence,
                    self._latest_sequence[slot],
                )
            else:
                self._replace(**{slot.value: tuple(courses)})
                LOGGER.info(
                    "event=catalog_refresh_succeeded correlation_id=%s action=%s items_count=%s",
                    correlation_id,
                    action,
                    len(courses),
                )
            if on_settled is not None:
                on_settled()

        def handle_failure(error: Exception) -> None:
            if self._drop_if_disposed(action, correlation_id):
                return
            LOGGER.warning(
                "event=catalog_refresh_failed correlation_id=%s action=%s error_type=%s detail=%s",
                correlation_id,
                action,
                error.__class__.__name__,
                error,
            )
            if on_settled is not None:
                on_settled()

        self._dispatcher.submit(call, handle_success, handle_failure)

    def _finish_course_creation(self) -> None:
        self._replace(draft=CourseDraft(), status_message=COURSE_CREATED_MESSAGE)

    def _open_checkout(self, checkout_url: str) -> None:
        try:
            self._open_url(checkout_url)
        except Exception as exc:
            LOGGER.exception(
                "event=checkout_open_failed error_type=%s",
                exc.__class__.__name__,
            )
            self._set_status(f"{ERROR_PREFIX}{exc}")

    def _drop_if_disposed(self, action: str, correlation_id: str) -> bool:
        if not self._disposed:
            return False
        LOGGER.info(
            "event=response_discarded correlation_id=%s action=%s reason=disposed",
            correlation_id,
            action,
        )
        return True

    def _set_status(self, message: str | None) -> None:
        self._replace(status_message=message)

    def _replace(self, **changes: object) -> None:
        self._state = dataclasses.replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)
