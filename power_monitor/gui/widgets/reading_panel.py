"""Cards showing the most recent live reading."""

from __future__ import annotations

from typing import Dict, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QFrame, QLabel, QStackedWidget, QVBoxLayout, QWidget

from power_monitor.gui.model import ReadingView

WAITING_TEXT = "Waiting for data..."
CARD_WIDTH = 240

# (key, title, background, text colour)
CARDS = (
    ("time", "Time", "#dbeafe", "#1e3a8a"),
    ("current", "Current", "#dcfce7", "#14532d"),
    ("voltage", "Voltage", "#fef9c3", "#713f12"),
    ("power", "Power", "#fee2e2", "#7f1d1d"),
)


class ReadingCard(QFrame):
    def __init__(self, title: str, background: str, foreground: str) -> None:
        super().__init__()
        self.foreground = foreground
        self.setStyleSheet(f"ReadingCard {{ background: {background}; border-radius: 8px; }}")
        self.title_label = QLabel(title)
        self.title_label.setStyleSheet("color: #374151; font-size: 11px;")
        self.value_label = QLabel("--")
        self.set_hidden_value(False)

        layout = QVBoxLayout()
        layout.addWidget(self.title_label)
        layout.addWidget(self.value_label)
        self.setLayout(layout)

    def set_value(self, text: str) -> None:
        self.value_label.setText(text)

    def set_hidden_value(self, hidden: bool) -> None:
        colour = "transparent" if hidden else self.foreground
        self.value_label.setStyleSheet(f"color: {colour}; font-weight: 600;")


class ReadingPanel(QStackedWidget):
    """Shows a placeholder until the first sample, then the four reading cards."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.waiting_label = QLabel(WAITING_TEXT)
        self.waiting_label.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.waiting_label.setStyleSheet("color: #6b7280;")

        self.cards: Dict[str, ReadingCard] = {}
        cards_widget = QWidget()
        cards_layout = QVBoxLayout()
        for key, title, background, foreground in CARDS:
            card = ReadingCard(title, background, foreground)
            self.cards[key] = card
            cards_layout.addWidget(card)
        cards_layout.addStretch()
        cards_widget.setLayout(cards_layout)
        cards_widget.setFixedWidth(CARD_WIDTH)

        self.addWidget(self.waiting_label)
        self.addWidget(cards_widget)
        self.setCurrentIndex(0)

    def update_reading(self, view: ReadingView) -> None:
        if not view.has_data:
            self.setCurrentIndex(0)
            return
        self.cards["time"].set_value(view.time_text)
        self.cards["current"].set_value(f"{view.current_ma:g} mA")
        self.cards["voltage"].set_value(f"{view.voltage_v:g} V")
        self.cards["power"].set_value(f"{view.power_w:g} W")
        self.set_highlighted(view.highlighted)
        self.setCurrentIndex(1)

    def set_highlighted(self, highlighted: bool) -> None:
        self.cards["time"].set_hidden_value(highlighted)
