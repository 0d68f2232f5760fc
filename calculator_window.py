# calculator_window.py
# Python 3.x, PyQt5
# PEP 8 준수, 문자열은 기본적으로 ' ' 사용

import os
import sys
import argparse
import logging

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QApplication,
    QWidget,
    QGridLayout,
    QVBoxLayout,
    QPushButton,
    QLineEdit,
    QSizePolicy,
)

from calculator import Calculator, CalculatorError, MAX_DIGITS

logger = logging.getLogger('calculator.window')

# 버튼 라벨 -> 엔진 토큰
BUTTON_TOKENS = {
    '%': 'percent',
    'CE': 'clearEntry',
    'C': 'clear',
    '⌫': 'backspace',
    '¹/x': 'reciprocal',
    'x²': 'square',
    '√x': 'squareRoot',
    '÷': 'divide',
    '×': 'multiply',
    '−': 'subtract',
    '+': 'add',
    '=': 'equals',
    '+/-': 'negate',
    '.': 'dot',
}
for _d in '0123456789':
    BUTTON_TOKENS[_d] = _d

BUTTON_ROWS = [
    ['%',   'CE', 'C',   '⌫'],
    ['¹/x', 'x²', '√x',  '÷'],
    ['7',   '8',  '9',   '×'],
    ['4',   '5',  '6',   '−'],
    ['1',   '2',  '3',   '+'],
    ['+/-', '0',  '.',   '='],
]

# 키보드 입력 -> 버튼 라벨
KEY_LABELS = {
    Qt.Key_Plus: '+',
    Qt.Key_Minus: '−',
    Qt.Key_Asterisk: '×',
    Qt.Key_Slash: '÷',
    Qt.Key_Equal: '=',
    Qt.Key_Return: '=',
    Qt.Key_Enter: '=',
    Qt.Key_Period: '.',
    Qt.Key_Backspace: '⌫',
    Qt.Key_Escape: 'C',
    Qt.Key_Delete: 'CE',
    Qt.Key_Percent: '%',
}


def _has_file_handler(logger, log_path):
    path = os.path.abspath(log_path)
    return any(isinstance(h, logging.FileHandler) and h.baseFilename == path
               for h in logger.handlers)


def setup_logger(log_path=None, level=logging.INFO):
    """콘솔(및 지정 시 UTF-8 파일)로 로그를 남기는 로거를 설정한다.

    다시 호출하면 레벨을 바꾸고, 아직 붙지 않은 log_path의 파일 핸들러만 추가한다.
    """
    root = logging.getLogger('calculator')
    root.setLevel(level)

    formatter = logging.Formatter(
        fmt='%(asctime)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 콘솔
    if not root.handlers:
        sh = logging.StreamHandler(sys.stdout)
        sh.setFormatter(formatter)
        root.addHandler(sh)

    # 파일(UTF-8)
    if log_path and not _has_file_handler(root, log_path):
        fh = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        fh.setFormatter(formatter)
        root.addHandler(fh)

    return root


class CalculatorWindow(QWidget):
    """PyQt5 UI: 버튼/키보드 → Calculator 토큰, 엔진 → 두 줄 표시부"""

    def __init__(self, max_digits: int = MAX_DIGITS) -> None:
        super().__init__()
        self._build_ui()
        # 표시부가 만들어진 뒤에 엔진을 연결해야 reset()의 투영이 반영된다
        self.engine = Calculator(display=self, max_digits=max_digits)

    def _build_ui(self) -> None:
        self.setWindowTitle('Calculator')
        root = QVBoxLayout()
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(8)
        self.setLayout(root)

        # 보조 표시부(히스토리): 숨겨도 자리는 유지
        self.history = QLineEdit()
        self.history.setReadOnly(True)
        self.history.setAlignment(Qt.AlignRight)
        policy = self.history.sizePolicy()
        policy.setRetainSizeWhenHidden(True)
        self.history.setSizePolicy(policy)
        root.addWidget(self.history)

        self.display = QLineEdit()
        self.display.setReadOnly(True)
        self.display.setAlignment(Qt.AlignRight)
        font = QFont(self.display.font())
        font.setPointSize(28)
        self.display.setFont(font)
        root.addWidget(self.display)

        grid = QGridLayout()
        grid.setSpacing(6)
        root.addLayout(grid)

        for r, row in enumerate(BUTTON_ROWS):
            for c, label in enumerate(row):
                btn = QPushButton(label)
                btn.setMinimumHeight(56)
                btn.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
                btn.setCursor(Qt.PointingHandCursor)
                btn.setFocusPolicy(Qt.NoFocus)
                # clicked는 checked(bool) 인자를 내보내므로 첫 인자를 흡수하도록 작성
                btn.clicked.connect(lambda checked=False, ch=label: self.on_button(ch))
                grid.addWidget(btn, r, c)

        self.resize(360, 560)

    # 표시부 인터페이스 (엔진이 호출)
    def set_primary(self, text: str) -> None:
        self.display.setText(text)

    def set_secondary(self, text: str) -> None:
        self.history.setText(text)

    def set_secondary_visible(self, visible: bool) -> None:
        self.history.setVisible(visible)

    # 입력
    def on_button(self, ch: str) -> None:
        token = BUTTON_TOKENS.get(ch, ch)
        try:
            self.engine.press(token)
        except CalculatorError as e:
            logger.warning('[무시] 처리할 수 없는 입력 %r: %s', ch, e)

    def keyPressEvent(self, event) -> None:
        label = KEY_LABELS.get(event.key())
        if label is None and event.text().isdigit():
            label = event.text()
        if label is None:
            super().keyPressEvent(event)
            return
        self.on_button(label)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='PyQt5 사칙연산 계산기'
    )
    parser.add_argument('--log', default=None,
                        help='로그 파일 경로(기본값: 콘솔만 사용)')
    parser.add_argument('--max-digits', type=int, default=MAX_DIGITS,
                        help=f'입력 자릿수 제한(기본값: {MAX_DIGITS})')
    parser.add_argument('--debug', action='store_true',
                        help='연산 과정을 DEBUG 로그로 출력')
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logger(args.log, logging.DEBUG if args.debug else logging.INFO)
    logger.info('[시작] 계산기 초기화 (자릿수 제한=%d)', args.max_digits)

    app = QApplication(sys.argv[:1])
    w = CalculatorWindow(max_digits=args.max_digits)
    w.show()
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
