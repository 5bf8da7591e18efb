from __future__ import annotations

from PyQt6.QtWidgets import QApplication


THEME_QSS = """
QWidget {
    background: #f4f1ee;
    color: #2f2a26;
    font-size: 13px;
}

QLabel, QCheckBox {
    background: transparent;
}

QLabel#Heading {
    font-size: 20px;
    font-weight: 700;
    color: #2a2521;
}

QLabel#SubtleTitle {
    font-size: 14px;
    font-weight: 600;
    color: #6f645b;
}

QLabel#StatValue {
    font-size: 24px;
    font-weight: 700;
    color: #2d2824;
}

QLabel#MutedText {
    color: #867b71;
}

QLabel#ErrorText {
    color: #c0392b;
}

QPushButton {
    border: none;
    background: #f7eee6;
    border-radius: 16px;
    padding: 8px 14px;
    font-weight: 600;
}

QPushButton:hover {
    background: #f2e6dc;
}

QPushButton:disabled {
    color: #b3a79b;
    background: #f5efea;
}

QPushButton#PrimaryButton {
    background: #eb8f60;
    color: #ffffff;
    border-radius: 22px;
    padding: 10px 24px;
    min-height: 24px;
    font-size: 14px;
}

QPushButton#PrimaryButton:hover {
    background: #de8050;
}

QPushButton#SecondaryButton {
    border-radius: 22px;
    padding: 10px 18px;
    min-height: 24px;
    font-size: 14px;
}

QSpinBox {
    background: #fff7f1;
    border: none;
    border-radius: 16px;
    padding: 7px 10px;
    min-height: 22px;
}

QSpinBox:disabled {
    color: #b3a79b;
}

QCheckBox::indicator {
    width: 18px;
    height: 18px;
    border-radius: 9px;
    background: #fff1e7;
}

QCheckBox::indicator:checked {
    background: #eb8f60;
}

QStatusBar {
    color: #6f645b;
}
"""


def apply_theme(app: QApplication) -> None:
    app.setStyleSheet(THEME_QSS)
