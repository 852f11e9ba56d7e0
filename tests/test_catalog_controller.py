"""Tests for catalog controller actions, error tiers and response ordering."""

from __future__ import annotations

import logging

import pytest

from catalog_client.application.catalog import (
    CatalogRequestError,
    CatalogTransportError,
    CreateCourseCommand,
    RegisterCommand,
)
from catalog_client.application.catalog_controller import (
    PLACEHOLDER_PASSWORD,
    CatalogController,
)
from catalog_client.domain.catalog import CatalogViewState, CourseDraft
from tests.catalog_fakes import (
    DeferredDispatcher,
    FakeCatalogGateway,
    RecordingUrlOpener,
    make_course,
)


def _controller(
    gateway: FakeCatalogGateway,
    *,
    dispatcher: DeferredDispatcher | None = None,
    opener: RecordingUrlOpener | None = None,
    discard_stale: bool = False,
) -> CatalogController:
    return CatalogController(
        gateway,
        open_url=opener or RecordingUrlOpener(),
        dispatcher=dispatcher,
        discard_stale=discard_stale,
    )


def test_register_shows_welcome_message_with_returned_name() -> None:
    gateway = FakeCatalogGateway()
    controller = _controller(gateway)
    controller.update_profile(email="a@x.com", name="A", is_admin=False)

    controller.register()

    assert controller.state.status_message == "Welcome A! Account created."
    assert gateway.calls_named("register") == [
        RegisterCommand(email="a@x.com", name="A", password=PLACEHOLDER_PASSWORD, is_admin=False)
    ]


def test_register_logs_placeholder_password_warning(caplog: pytest.LogCaptureFixture) -> None:
    controller = _controller(FakeCatalogGateway())

    with caplog.at_level(logging.WARNING):
        controller.register()

    assert "event=register_placeholder_password" in caplog.text


@pytest.mark.parametrize("action", ["register", "create_course", "enroll", "buy"])
def test_primary_action_failure_shows_error_with_body_text(action: str) -> None:
    gateway = FakeCatalogGateway()
    method_name = {
        "register": "register",
        "create_course": "create_course",
        "enroll": "enroll",
        "buy": "init_payment",
    }[action]
    gateway.failures[method_name] = CatalogRequestError('{"detail":"nope"}', status_code=400)
    opener = RecordingUrlOpener()
    controller = _controller(gateway, opener=opener)
    course = make_course("c1", "Intro")

    if action in ("enroll", "buy"):
        getattr(controller, action)(course)
    else:
        getattr(controller, action)()

    assert controller.state.status_message == 'Error: {"detail":"nope"}'
    assert opener.opened == []


def test_primary_action_transport_failure_is_reported() -> None:
    gateway = FakeCatalogGateway()
    gateway.failures["enroll"] = CatalogTransportError("connection refused")
    controller = _controller(gateway)

    controller.enroll(make_course("c1", "Intro"))

    assert controller.state.status_message == "Error: connection refused"


def test_primary_action_unexpected_error_is_not_fatal(
    caplog: pytest.LogCaptureFixture,
) -> None:
    gateway = FakeCatalogGateway()
    gateway.failures["register"] = KeyError("name")
    controller = _controller(gateway)

    with caplog.at_level(logging.ERROR):
        controller.register()

    assert controller.state.status_message is not None
    assert controller.state.status_message.startswith("Error: ")
    crashed = [
        record
        for record in caplog.records
        if "event=catalog_request_crashed" in record.getMessage()
    ]
    assert len(crashed) == 1
    assert crashed[0].exc_info is not None
    assert crashed[0].exc_info[0] is KeyError


def test_primary_actions_clear_status_before_result_is_known() -> None:
    dispatcher = DeferredDispatcher()
    controller = CatalogController(
        FakeCatalogGateway(),
        open_url=RecordingUrlOpener(),
        dispatcher=dispatcher,
        initial_state=CatalogViewState(status_message="Welcome A! Account created."),
    )

    controller.enroll(make_course("c1", "Intro"))

    assert controller.state.status_message is None
    dispatcher.run_all()
    assert controller.state.status_message == "Enrolled in Intro"


def test_create_course_submits_parsed_payload_and_clears_draft() -> None:
    gateway = FakeCatalogGateway()
    gateway.courses = [make_course("c1", "Fresh")]
    controller = _controller(gateway)
    controller.update_course_draft(title="T", description="D", price_text="", tags_text="x, ,y")

    controller.create_course()

    assert gateway.calls_named("create_course") == [
        CreateCourseCommand(title="T", description="D", price=0.0, tags=("x", "y"))
    ]
    assert controller.state.draft == CourseDraft()
    assert controller.state.status_message == "Course created"
    assert [course.title for course in controller.state.courses] == ["Fresh"]


def test_create_course_clears_draft_only_after_reload_completes() -> None:
    gateway = FakeCatalogGateway()
    gateway.courses = [make_course("c1", "Fresh")]
    dispatcher = DeferredDispatcher()
    controller = _controller(gateway, dispatcher=dispatcher)
    controller.update_course_draft(title="T", price_text="12.5")

    controller.create_course()
    dispatcher.complete(0)

    assert len(dispatcher.pending) == 1
    assert controller.state.draft.title == "T"
    assert controller.state.status_message is None

    dispatcher.complete(0)

    assert controller.state.draft == CourseDraft()
    assert controller.state.status_message == "Course created"
    assert controller.state.courses == (make_course("c1", "Fresh"),)


def test_create_course_still_finishes_when_reload_fails() -> None:
    gateway = FakeCatalogGateway()
    gateway.failures["list_courses"] = CatalogTransportError("down")
    controller = _controller(gateway)
    controller.update_course_draft(title="T")

    controller.create_course()

    assert controller.state.draft == CourseDraft()
    assert controller.state.status_message == "Course created"


def test_create_course_failure_keeps_draft() -> None:
    gateway = FakeCatalogGateway()
    gateway.failures["create_course"] = CatalogRequestError("Forbidden", status_code=403)
    controller = _controller(gateway)
    controller.update_course_draft(title="T", description="D", price_text="5", tags_text="a")

    controller.create_course()

    assert controller.state.draft == CourseDraft(
        title="T", description="D", price_text="5", tags_text="a"
    )
    assert controller.state.status_message == "Error: Forbidden"
    assert gateway.calls_named("list_courses") == []


def test_enroll_uses_current_profile_email() -> None:
    gateway = FakeCatalogGateway()
    controller = _controller(gateway)
    controller.update_profile(email="b@y.com")

    controller.enroll(make_course(7, "Algorithms"))

    assert gateway.calls_named("enroll") == [(7, "b@y.com")]
    assert controller.state.status_message == "Enrolled in Algorithms"


def test_buy_opens_checkout_url_exactly_once() -> None:
    gateway = FakeCatalogGateway()
    gateway.checkout_url = "https://pay/abc"
    opener = RecordingUrlOpener()
    controller = _controller(gateway, opener=opener)
    controller.update_profile(email="b@y.com")

    controller.buy(make_course(7, "Algorithms"))

    assert gateway.calls_named("init_payment") == [(7, "b@y.com")]
    assert opener.opened == ["https://pay/abc"]
    assert controller.state.status_message is None


def test_buy_reports_browser_failure_without_raising(
    caplog: pytest.LogCaptureFixture,
) -> None:
    def broken_opener(url: str) -> bool:
        raise OSError(f"no browser for {url}")

    gateway = FakeCatalogGateway()
    gateway.checkout_url = "https://pay/abc"
    controller = CatalogController(gateway, open_url=broken_opener)

    with caplog.at_level(logging.ERROR):
        controller.buy(make_course(7, "Algorithms"))

    assert controller.state.status_message == "Error: no browser for https://pay/abc"
    assert "event=checkout_open_failed" in caplog.text


def test_load_courses_passes_filters() -> None:
    gateway = FakeCatalogGateway()
    controller = _controller(gateway)

    controller.load_courses()
    controller.update_filters(search_text="python", tag_text="beginner")
    controller.load_courses()

    assert gateway.calls_named("list_courses") == [
        {"search_text": None, "tag": None},
        {"search_text": "python", "tag": "beginner"},
    ]


def test_background_failures_are_logged_and_keep_state(
    caplog: pytest.LogCaptureFixture,
) -> None:
    gateway = FakeCatalogGateway()
    gateway.courses = [make_course("c1", "Kept")]
    gateway.recommended = [make_course("r1", "Pick")]
    controller = _controller(gateway)
    controller.load_courses()
    controller.get_recommendations()
    before = controller.state

    gateway.failures["list_courses"] = CatalogRequestError("boom", status_code=500)
    gateway.failures["recommend"] = CatalogTransportError("down")
    gateway.failures["my_courses"] = CatalogTransportError("down")
    with caplog.at_level(logging.WARNING):
        controller.load_courses()
        controller.get_recommendations()
        controller.load_my_courses()

    assert controller.state == before
    assert controller.state.status_message is None
    assert caplog.text.count("event=catalog_refresh_failed") == 3


def test_recommendations_and_my_courses_share_results_panel() -> None:
    gateway = FakeCatalogGateway()
    gateway.recommended = [make_course("r1", "Pick")]
    gateway.enrolled = [make_course("m1", "Mine")]
    controller = _controller(gateway)
    controller.update_profile(email="a@x.com")
    controller.update_interests(" javascript, ,data ")

    controller.get_recommendations()
    assert gateway.calls_named("recommend") == [["javascript", "data"]]
    assert [course.title for course in controller.state.results] == ["Pick"]

    controller.load_my_courses()
    assert gateway.calls_named("my_courses") == ["a@x.com"]
    assert [course.title for course in controller.state.results] == ["Mine"]


def test_last_arriving_list_response_wins() -> None:
    dispatcher = DeferredDispatcher()
    controller = _controller(FakeCatalogGateway(), dispatcher=dispatcher)
    first = [make_course("a", "First")]
    second = [make_course("b", "Second")]

    controller.load_courses()
    controller.load_courses()
    dispatcher.complete(1, result=second, use_result=True)
    dispatcher.complete(0, result=first, use_result=True)

    assert controller.state.courses == tuple(first)


def test_discard_stale_keeps_latest_issued_response() -> None:
    dispatcher = DeferredDispatcher()
    controller = _controller(FakeCatalogGateway(), dispatcher=dispatcher, discard_stale=True)
    first = [make_course("a", "First")]
    second = [make_course("b", "Second")]

    controller.load_courses()
    controller.load_courses()
    dispatcher.complete(1, result=second, use_result=True)
    dispatcher.complete(0, result=first, use_result=True)

    assert controller.state.courses == tuple(second)


def test_responses_after_dispose_are_discarded() -> None:
    gateway = FakeCatalogGateway()
    gateway.courses = [make_course("c1", "Late")]
    dispatcher = DeferredDispatcher()
    opener = RecordingUrlOpener()
    controller = _controller(gateway, dispatcher=dispatcher, opener=opener)
    seen: list[CatalogViewState] = []
    controller.subscribe(seen.append)

    controller.load_courses()
    controller.register()
    controller.buy(make_course("c1", "Late"))
    seen.clear()
    controller.dispose()
    dispatcher.run_all()

    assert controller.is_disposed
    assert controller.state.courses == ()
    assert controller.state.status_message is None
    assert opener.opened == []
    assert seen == []


def test_subscribers_receive_each_new_state_until_unsubscribed() -> None:
    controller = _controller(FakeCatalogGateway())
    seen: list[CatalogViewState] = []
    unsubscribe = controller.subscribe(seen.append)

    controller.update_profile(email="a@x.com")
    controller.update_filters(search_text="py")
    unsubscribe()
    controller.update_interests("data")

    assert [state.profile.email for state in seen] == ["a@x.com", "a@x.com"]
    assert seen[-1].filters.search_text == "py"
    assert controller.state.interests_text == "data"


def test_view_state_is_serializable() -> None:
    gateway = FakeCatalogGateway()
    gateway.courses = [make_course("c1", "Intro", tags=("python",))]
    controller = _controller(gateway)
    controller.update_profile(email="a@x.com", name="A")
    controller.load_courses()

    snapshot = controller.state.to_dict()

    assert snapshot["profile"] == {"email": "a@x.com", "name": "A", "is_admin": False}
    assert snapshot["courses"] == (
        {
            "course_id": "c1",
            "title": "Intro",
            "description": "About Intro",
            "price": 10.0,
            "tags": ("python",),
        },
    )
