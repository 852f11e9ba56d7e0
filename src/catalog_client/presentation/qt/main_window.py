"""Main window: profile, course creation, recommendations and course browser."""

from __future__ import annotations

import logging

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QCheckBox,
    QFormLayout,
    QFrame,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLayout,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from catalog_client.application.catalog_controller import CatalogController
from catalog_client.domain.catalog import CatalogViewState, CourseSummary
from catalog_client.infrastructure.catalog_http import HttpCatalogGateway
from catalog_client.infrastructure.config import CatalogClientConfig, default_client_config
from catalog_client.presentation.qt.browser import open_in_browser
from catalog_client.presentation.qt.course_card import CourseCard, ResultRow
from catalog_client.presentation.qt.dispatch import QtRequestDispatcher

LOGGER = logging.getLogger(__name__)

WINDOW_TITLE = "AI Recommend E-Learning"
FOOTER_TEXT = "Demo build · No real payments · Data stored in MongoDB"
_CARD_COLUMNS = 3


class MainWindow(QMainWindow):
    """Catalog shell bound to a CatalogController."""

    def __init__(
        self,
        controller: CatalogController | None = None,
        *,
        config: CatalogClientConfig | None = None,
        load_on_start: bool = True,
    ) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(1180, 820)

        self._config = config or default_client_config()
        self._owned_gateway: HttpCatalogGateway | None = None
        if controller is None:
            self._owned_gateway = HttpCatalogGateway(base_url=self._config.base_url)
            controller = CatalogController(
                self._owned_gateway,
                open_url=open_in_browser,
                dispatcher=QtRequestDispatcher(),
            )
        self._controller = controller
        self._rendered_courses: tuple[CourseSummary, ...] | None = None
        self._rendered_results: tuple[CourseSummary, ...] | None = None

        self._status_banner = QLabel()
        self._email_input = QLineEdit()
        self._name_input = QLineEdit()
        self._admin_checkbox = QCheckBox("Admin account")
        self._register_button = QPushButton("Register")
        self._title_input = QLineEdit()
        self._description_input = QLineEdit()
        self._price_input = QLineEdit()
        self._tags_input = QLineEdit()
        self._create_course_button = QPushButton("Create course")
        self._interests_input = QLineEdit()
        self._recommend_button = QPushButton("Get")
        self._results_container = QWidget()
        self._results_layout = QVBoxLayout(self._results_container)
        self._load_my_courses_button = QPushButton("Load my courses")
        self._search_input = QLineEdit()
        self._tag_filter_input = QLineEdit()
        self._filter_button = QPushButton("Filter")
        self._courses_container = QWidget()
        self._courses_layout = QGridLayout(self._courses_container)

        self._build_ui()
        self._unsubscribe = self._controller.subscribe(self._render)
        self._render(self._controller.state)

        if load_on_start:
            self._controller.load_courses()

    @property
    def controller(self) -> CatalogController:
        return self._controller

    def closeEvent(self, event: QCloseEvent) -> None:
        LOGGER.info("event=main_window_closed")
        self._unsubscribe()
        self._controller.dispose()
        if self._owned_gateway is not None:
            self._owned_gateway.close()
            self._owned_gateway = None
        super().closeEvent(event)

    def _build_ui(self) -> None:
        root = QWidget(self)
        layout = QVBoxLayout(root)
        layout.setContentsMargins(28, 24, 28, 20)
        layout.setSpacing(16)

        layout.addLayout(self._build_header(root))

        self._status_banner.setObjectName("statusBanner")
        self._status_banner.setWordWrap(True)
        layout.addWidget(self._status_banner)

        panels_layout = QHBoxLayout()
        panels_layout.setSpacing(18)
        panels_layout.addWidget(self._build_profile_panel(root), stretch=1)
        panels_layout.addWidget(self._build_create_course_panel(root), stretch=1)
        panels_layout.addWidget(self._build_recommendations_panel(root), stretch=1)
        layout.addLayout(panels_layout)

        layout.addWidget(self._build_browse_panel(root), stretch=1)

        footer_label = QLabel(FOOTER_TEXT, root)
        footer_label.setObjectName("footerLabel")
        layout.addWidget(footer_label)

        self._connect_inputs()
        self.setCentralWidget(root)

    def _build_header(self, parent: QWidget) -> QHBoxLayout:
        header_layout = QHBoxLayout()
        titles_layout = QVBoxLayout()
        title_label = QLabel(WINDOW_TITLE, parent)
        title_label.setObjectName("mainTitleLabel")
        subtitle_label = QLabel(
            "Create courses, get AI-like recommendations, enroll and mock-payments.",
            parent,
        )
        subtitle_label.setObjectName("mainSubtitleLabel")
        titles_layout.addWidget(title_label)
        titles_layout.addWidget(subtitle_label)

        backend_label = QLabel(f"Backend: {self._config.base_url}", parent)
        backend_label.setObjectName("backendUrlLabel")

        header_layout.addLayout(titles_layout, stretch=1)
        header_layout.addWidget(backend_label)
        return header_layout

    def _build_profile_panel(self, parent: QWidget) -> QGroupBox:
        panel = QGroupBox("Your Profile", parent)
        panel.setObjectName("profilePanel")
        form = QFormLayout(panel)

        self._email_input.setObjectName("profileEmailInput")
        self._email_input.setPlaceholderText("you@example.com")
        self._name_input.setObjectName("profileNameInput")
        self._name_input.setPlaceholderText("Jane Doe")
        self._admin_checkbox.setObjectName("profileAdminCheckBox")
        self._register_button.setObjectName("registerButton")

        form.addRow("Email", self._email_input)
        form.addRow("Name", self._name_input)
        form.addRow(self._admin_checkbox)
        form.addRow(self._register_button)
        return panel

    def _build_create_course_panel(self, parent: QWidget) -> QGroupBox:
        panel = QGroupBox("Create Course (Admin)", parent)
        panel.setObjectName("createCoursePanel")
        form = QFormLayout(panel)

        self._title_input.setObjectName("courseDraftTitleInput")
        self._title_input.setPlaceholderText("Intro to Python")
        self._description_input.setObjectName("courseDraftDescriptionInput")
        self._description_input.setPlaceholderText("What students will learn")
        self._price_input.setObjectName("courseDraftPriceInput")
        self._price_input.setPlaceholderText("49.00")
        self._tags_input.setObjectName("courseDraftTagsInput")
        self._tags_input.setPlaceholderText("python, beginner")
        self._create_course_button.setObjectName("createCourseButton")

        form.addRow("Title", self._title_input)
        form.addRow("Description", self._description_input)
        form.addRow("Price", self._price_input)
        form.addRow("Tags (comma separated)", self._tags_input)
        form.addRow(self._create_course_button)
        return panel

    def _build_recommendations_panel(self, parent: QWidget) -> QGroupBox:
        panel = QGroupBox("Personalized Picks", parent)
        panel.setObjectName("recommendationsPanel")
        layout = QVBoxLayout(panel)

        input_row = QHBoxLayout()
        self._interests_input.setObjectName("interestsInput")
        self._interests_input.setPlaceholderText("javascript, data")
        self._recommend_button.setObjectName("getRecommendationsButton")
        input_row.addWidget(self._interests_input, stretch=1)
        input_row.addWidget(self._recommend_button)
        layout.addWidget(QLabel("Your interests (comma separated)", panel))
        layout.addLayout(input_row)

        self._results_container.setObjectName("resultsContainer")
        self._results_layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._results_container)
        layout.addStretch(1)

        self._load_my_courses_button.setObjectName("loadMyCoursesButton")
        layout.addWidget(self._load_my_courses_button)
        return panel

    def _build_browse_panel(self, parent: QWidget) -> QGroupBox:
        panel = QGroupBox("Browse Courses", parent)
        panel.setObjectName("browsePanel")
        layout = QVBoxLayout(panel)

        filter_row = QHBoxLayout()
        self._search_input.setObjectName("searchInput")
        self._search_input.setPlaceholderText("Search")
        self._tag_filter_input.setObjectName("tagFilterInput")
        self._tag_filter_input.setPlaceholderText("Tag")
        self._filter_button.setObjectName("filterCoursesButton")
        filter_row.addStretch(1)
        filter_row.addWidget(self._search_input)
        filter_row.addWidget(self._tag_filter_input)
        filter_row.addWidget(self._filter_button)
        layout.addLayout(filter_row)

        self._courses_container.setObjectName("coursesContainer")
        scroll_area = QScrollArea(panel)
        scroll_area.setFrameShape(QFrame.Shape.NoFrame)
        scroll_area.setWidgetResizable(True)
        scroll_area.setWidget(self._courses_container)
        layout.addWidget(scroll_area, stretch=1)
        return panel

    def _connect_inputs(self) -> None:
        controller = self._controller
        self._email_input.textEdited.connect(lambda text: controller.update_profile(email=text))
        self._name_input.textEdited.connect(lambda text: controller.update_profile(name=text))
        self._admin_checkbox.toggled.connect(
            lambda checked: controller.update_profile(is_admin=checked)
        )
        self._title_input.textEdited.connect(
            lambda text: controller.update_course_draft(title=text)
        )
        self._description_input.textEdited.connect(
            lambda text: controller.update_course_draft(description=text)
        )
        self._price_input.textEdited.connect(
            lambda text: controller.update_course_draft(price_text=text)
        )
        self._tags_input.textEdited.connect(
            lambda text: controller.update_course_draft(tags_text=text)
        )
        self._interests_input.textEdited.connect(controller.update_interests)
        self._search_input.textEdited.connect(
            lambda text: controller.update_filters(search_text=text)
        )
        self._tag_filter_input.textEdited.connect(
            lambda text: controller.update_filters(tag_text=text)
        )

        self._register_button.clicked.connect(controller.register)
        self._create_course_button.clicked.connect(controller.create_course)
        self._recommend_button.clicked.connect(controller.get_recommendations)
        self._load_my_courses_button.clicked.connect(controller.load_my_courses)
        self._filter_button.clicked.connect(lambda: controller.load_courses())

    def _render(self, state: CatalogViewState) -> None:
        status = state.status_message or ""
        self._status_banner.setText(status)
        self._status_banner.setVisible(bool(status))

        _sync_text(self._email_input, state.profile.email)
        _sync_text(self._name_input, state.profile.name)
        if self._admin_checkbox.isChecked() != state.profile.is_admin:
            self._admin_checkbox.setChecked(state.profile.is_admin)
        _sync_text(self._title_input, state.draft.title)
        _sync_text(self._description_input, state.draft.description)
        _sync_text(self._price_input, state.draft.price_text)
        _sync_text(self._tags_input, state.draft.tags_text)
        _sync_text(self._interests_input, state.interests_text)
        _sync_text(self._search_input, state.filters.search_text)
        _sync_text(self._tag_filter_input, state.filters.tag_text)

        if state.courses != self._rendered_courses:
            self._render_courses(state.courses)
        if state.results != self._rendered_results:
            self._render_results(state.results)

    def _render_courses(self, courses: tuple[CourseSummary, ...]) -> None:
        self._rendered_courses = courses
        _clear_layout(self._courses_layout)
        for index, course in enumerate(courses):
            card = CourseCard(
                course,
                on_enroll=self._controller.enroll,
                on_buy=self._controller.buy,
                parent=self._courses_container,
            )
            self._courses_layout.addWidget(card, index // _CARD_COLUMNS, index % _CARD_COLUMNS)
        LOGGER.debug("event=courses_rendered items_count=%s", len(courses))

    def _render_results(self, results: tuple[CourseSummary, ...]) -> None:
        self._rendered_results = results
        _clear_layout(self._results_layout)
        for course in results:
            row = ResultRow(
                course,
                on_enroll=self._controller.enroll,
                parent=self._results_container,
            )
            self._results_layout.addWidget(row)
        LOGGER.debug("event=results_rendered items_count=%s", len(results))


def _sync_text(line_edit: QLineEdit, value: str) -> None:
    if line_edit.text() != value:
        line_edit.setText(value)


def _clear_layout(layout: QLayout) -> None:
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.setParent(None)
            widget.deleteLater()
