"""HTTP adapter for the remote catalog service."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from catalog_client.application.catalog import (
    CatalogGateway,
    CatalogRequestError,
    CatalogResponseError,
    CatalogTransportError,
    CreateCourseCommand,
    RegisterCommand,
    RegisteredUser,
)
from catalog_client.domain.catalog import CourseId, CourseSummary

LOGGER = logging.getLogger(__name__)

TPayload = TypeVar("TPayload")


class CoursePayload(BaseModel):
    """Course record as returned by listing and recommendation endpoints."""

    model_config = ConfigDict(extra="ignore")

    id: str | int
    title: str | None = None
    description: str | None = None
    price: float | None = None
    tags: list[str | int | float | bool] | None = None

    def to_summary(self) -> CourseSummary:
        return CourseSummary(
            course_id=self.id,
            title=self.title or "",
            description=self.description or "",
            price=self.price if self.price is not None else 0.0,
            tags=tuple(str(tag) for tag in self.tags or ()),
        )


class RegisteredUserPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class CheckoutPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    checkout_url: str


_RECORD_LIST_ADAPTER = TypeAdapter(list[Any])
_REGISTERED_USER_ADAPTER = TypeAdapter(RegisteredUserPayload)
_CHECKOUT_ADAPTER = TypeAdapter(CheckoutPayload)


class HttpCatalogGateway(CatalogGateway):
    """Catalog service client over JSON/HTTP."""

    def __init__(
        self,
        *,
        http_client: httpx.Client | None = None,
        base_url: str = "http://localhost:8000",
    ) -> None:
        self._http_client = http_client or httpx.Client(base_url=base_url)
        self._owns_client = http_client is None

    def close(self) -> None:
        """Close owned HTTP client."""
        if self._owns_client:
            self._http_client.close()

    def register(self, command: RegisterCommand) -> RegisteredUser:
        response = self._send(
            "POST",
            "/auth/register",
            json={
                "email": command.email,
                "name": command.name,
                "password": command.password,
                "is_admin": command.is_admin,
            },
        )
        payload = _parse(response, _REGISTERED_USER_ADAPTER, endpoint="/auth/register")
        return RegisteredUser(name=payload.name)

    def list_courses(
        self,
        *,
        search_text: str | None = None,
        tag: str | None = None,
    ) -> list[CourseSummary]:
        params: dict[str, str] = {}
        if search_text:
            params["q"] = search_text
        if tag:
            params["tag"] = tag
        response = self._send("GET", "/courses", params=params)
        return _parse_courses(response, endpoint="/courses")

    def create_course(self, command: CreateCourseCommand) -> None:
        self._send(
            "POST",
            "/courses",
            json={
                "title": command.title,
                "description": command.description,
                "price": command.price,
                "tags": list(command.tags),
            },
        )

    def enroll(self, course_id: CourseId, user_email: str) -> None:
        self._send(
            "POST",
            f"/enroll/{quote(str(course_id), safe='')}",
            params={"user_email": user_email},
        )

    def init_payment(self, course_id: CourseId, user_email: str) -> str:
        response = self._send(
            "POST",
            "/payments/init",
            json={"course_id": course_id, "user_email": user_email},
        )
        return _parse(response, _CHECKOUT_ADAPTER, endpoint="/payments/init").checkout_url

    def recommend(self, interests: Sequence[str]) -> list[CourseSummary]:
        response = self._send("POST", "/recommend", json={"interests": list(interests)})
        return _parse_courses(response, endpoint="/recommend")

    def my_courses(self, user_email: str) -> list[CourseSummary]:
        response = self._send("GET", "/my-courses", params={"user_email": user_email})
        return _parse_courses(response, endpoint="/my-courses")

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: object | None = None,
    ) -> httpx.Response:
        try:
            response = self._http_client.request(method, path, params=params, json=json)
        except httpx.TransportError as exc:
            LOGGER.warning(
                "event=catalog_http_transport_failed method=%s path=%s error_type=%s",
                method,
                path,
                exc.__class__.__name__,
            )
            raise CatalogTransportError(str(exc) or exc.__class__.__name__) from exc

        LOGGER.debug(
            "event=catalog_http_response method=%s path=%s status=%s",
            method,
            path,
            response.status_code,
        )
        if not response.is_success:
            raise CatalogRequestError(response.text, status_code=response.status_code)
        return response


def _parse_courses(response: httpx.Response, *, endpoint: str) -> list[CourseSummary]:
    records = _parse(response, _RECORD_LIST_ADAPTER, endpoint=endpoint)
    courses: list[CourseSummary] = []
    for index, record in enumerate(records):
        try:
            payload = CoursePayload.model_validate(record)
        except ValidationError as exc:
            LOGGER.warning(
                (
                    "event=catalog_record_skipped endpoint=%s index=%s "
                    "error_count=%s"
                ),
                endpoint,
                index,
                exc.error_count(),
            )
            continue
        courses.append(payload.to_summary())
    return courses


def _parse(
    response: httpx.Response,
    adapter: TypeAdapter[TPayload],
    *,
    endpoint: str,
) -> TPayload:
    try:
        return adapter.validate_json(response.content)
    except ValidationError as exc:
        raise CatalogResponseError(
            f"{endpoint} returned unexpected payload: {exc.error_count()} validation error(s)."
        ) from exc
