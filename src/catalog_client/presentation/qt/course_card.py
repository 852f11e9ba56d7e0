"""Widgets rendering a single course summary."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from catalog_client.domain.catalog import CourseSummary

CourseAction = Callable[[CourseSummary], None]


class CourseCard(QFrame):
    """Card with title, description, tag chips, price and Enroll/Buy buttons."""

    def __init__(
        self,
        course: CourseSummary,
        *,
        on_enroll: CourseAction,
        on_buy: CourseAction,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("courseCard")
        self._course = course

        layout = QVBoxLayout(self)
        layout.setContentsMargins(14, 12, 14, 12)
        layout.setSpacing(8)

        title_label = QLabel(course.title, self)
        title_label.setObjectName("courseTitleLabel")
        title_label.setWordWrap(True)
        layout.addWidget(title_label)

        description_label = QLabel(course.description, self)
        description_label.setObjectName("courseDescriptionLabel")
        description_label.setWordWrap(True)
        layout.addWidget(description_label)

        tags_layout = QHBoxLayout()
        tags_layout.setSpacing(6)
        for tag in course.tags:
            chip = QLabel(tag, self)
            chip.setObjectName("courseTagChip")
            tags_layout.addWidget(chip)
        tags_layout.addStretch(1)
        layout.addLayout(tags_layout)

        footer_layout = QHBoxLayout()
        price_label = QLabel(format_price(course.price), self)
        price_label.setObjectName("coursePriceLabel")
        self.enroll_button = QPushButton("Enroll", self)
        self.enroll_button.setObjectName("courseEnrollButton")
        self.buy_button = QPushButton("Buy", self)
        self.buy_button.setObjectName("courseBuyButton")
        footer_layout.addWidget(price_label)
        footer_layout.addStretch(1)
        footer_layout.addWidget(self.enroll_button)
        footer_layout.addWidget(self.buy_button)
        layout.addLayout(footer_layout)

        self.enroll_button.clicked.connect(lambda: on_enroll(self._course))
        self.buy_button.clicked.connect(lambda: on_buy(self._course))

    @property
    def course(self) -> CourseSummary:
        return self._course


class ResultRow(QWidget):
    """Compact row for the recommendations panel."""

    def __init__(
        self,
        course: CourseSummary,
        *,
        on_enroll: CourseAction,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("resultRow")
        self._course = course

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        title_label = QLabel(course.title, self)
        title_label.setObjectName("resultTitleLabel")
        self.enroll_button = QPushButton("Enroll", self)
        self.enroll_button.setObjectName("resultEnrollButton")
        layout.addWidget(title_label, stretch=1)
        layout.addWidget(self.enroll_button)

        self.enroll_button.clicked.connect(lambda: on_enroll(self._course))

    @property
    def course(self) -> CourseSummary:
        return self._course


def format_price(price: float) -> str:
    """Render price with two decimals."""
    return f"${price:.2f}"
