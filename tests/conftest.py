import os

import pytest

# 화면 없는 환경에서도 위젯 테스트가 돌도록
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

from calculator import Calculator


class RecordingDisplay:
    """엔진이 보낸 표시 호출을 기록하는 표시부"""

    def __init__(self):
        self.primary = None
        self.secondary = None
        self.secondary_visible = None
        self.calls = 0

    def set_primary(self, text):
        self.primary = text
        self.calls += 1

    def set_secondary(self, text):
        self.secondary = text

    def set_secondary_visible(self, visible):
        self.secondary_visible = visible


@pytest.fixture
def calc():
    return Calculator()


@pytest.fixture
def display():
    return RecordingDisplay()
