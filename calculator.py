# calculator.py
# Python 3.x, 표준 라이브러리만 사용 (UI는 calculator_window.py)
# PEP 8 준수, 문자열은 기본적으로 ' ' 사용

from decimal import Decimal
from enum import Enum
from typing import NamedTuple, Optional, Union
import logging
import math

logger = logging.getLogger('calculator')

PRECISION = 14  # 유효숫자 자릿수 (부동소수점 잡음 제거)
MAX_DIGITS = 16  # 입력 자릿수 제한

DIGITS = '0123456789'


class CalculatorError(Exception):
    """계산기 입력 오류의 기본 클래스"""


class InvalidOperator(CalculatorError, ValueError):
    """알 수 없는 연산자/토큰 이름"""

    def __init__(self, name) -> None:
        super().__init__(f'unknown operator: {name!r}')
        self.name = name


class InvalidDigit(CalculatorError, ValueError):
    """0-9가 아닌 숫자 입력"""

    def __init__(self, digit) -> None:
        super().__init__(f'not a digit: {digit!r}')
        self.digit = digit


class BinaryOperator(Enum):
    ADD = 'add'
    SUBTRACT = 'subtract'
    MULTIPLY = 'multiply'
    DIVIDE = 'divide'
    EQUALS = 'equals'

    @property
    def symbol(self) -> str:
        if self is BinaryOperator.ADD:
            return '+'
        if self is BinaryOperator.SUBTRACT:
            return '−'
        if self is BinaryOperator.MULTIPLY:
            return '×'
        if self is BinaryOperator.DIVIDE:
            return '÷'
        return '='

    def apply(self, a: float, b: float) -> float:
        if self is BinaryOperator.ADD:
            return a + b
        if self is BinaryOperator.SUBTRACT:
            return a - b
        if self is BinaryOperator.MULTIPLY:
            return a * b
        if self is BinaryOperator.DIVIDE:
            return divide(a, b)
        # '='는 피연산자를 그대로 통과
        return b


class UnaryOperator(Enum):
    SQUARE = 'square'
    SQUARE_ROOT = 'squareRoot'
    RECIPROCAL = 'reciprocal'
    PERCENT = 'percent'


class Display(NamedTuple):
    primary: str
    secondary: str
    secondary_visible: bool


def divide(a: float, b: float) -> float:
    """IEEE-754 나눗셈: 0으로 나누면 ±Infinity, 0/0은 NaN"""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def square_root(x: float) -> float:
    if x < 0:
        return math.nan
    return math.sqrt(x)


def round_significant(x: float, digits: int = PRECISION) -> float:
    if not math.isfinite(x):
        return x
    return float('{:.{}g}'.format(x, digits))


def format_number(x: float) -> str:
    """숫자를 표시 문자열로 변환한다.

    정수 값은 소수부 없이('10'), 1e-7 <= |x| < 1e21 은 고정소수점('0.00001'),
    그 밖의 값은 가장 짧은 왕복 표현(repr, 지수 표기)을 쓴다.
    -0은 '0'으로, 비유한 값은 'Infinity' / '-Infinity' / 'NaN'으로 표시한다.
    """
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return 'Infinity' if x > 0 else '-Infinity'
    if x == 0:
        return '0'
    if x.is_integer() and abs(x) < 1e21:
        return str(int(x))
    if 1e-7 <= abs(x) < 1e21:
        # repr의 최소 자릿수를 유지한 채 지수 표기만 풀어 쓴다
        return format(Decimal(repr(x)), 'f')
    return repr(x)


def parse_number(s: str) -> float:
    # 'Infinity', 'NaN', '5.' 모두 float()가 해석한다
    return float(s)


def is_finite_text(s: str) -> bool:
    try:
        return math.isfinite(parse_number(s))
    except ValueError:
        return False


def is_editable_text(s: str) -> bool:
    # 지수 표기('1e-08')나 비유한 값은 이어서 편집하지 않고 새로 입력한다
    return 'e' not in s and is_finite_text(s)


class CalculatorState:
    """엔진이 소유하는 계산기 상태. reset()으로 제자리 초기화"""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.current_value = '0'  # 현재 입력/결과 (문자열)
        self.previous_value: Optional[str] = None  # 이항 연산의 왼쪽 피연산자
        self.pending_operator: Optional[BinaryOperator] = None  # 대기 연산자
        self.history = ''  # 보조 표시부 문자열, 빈 문자열이면 숨김
        self.is_new_entry = True  # 다음 숫자가 새 입력을 시작하는지 여부


class Calculator:
    """연산 엔진: 숫자/연산자 토큰을 받아 상태를 갱신하고 표시부에 투영한다.

    display는 set_primary / set_secondary / set_secondary_visible 을 가진
    객체면 무엇이든 된다. None이면 project_display()로 직접 읽는다.
    """

    def __init__(self, display=None, max_digits: int = MAX_DIGITS) -> None:
        self.display = display
        self.max_digits = max_digits
        self.state = CalculatorState()
        self.reset()

    # 편집 명령
    def reset(self) -> None:
        self.state.reset()
        self._refresh()

    def clear_entry(self) -> None:
        self.state.current_value = '0'
        self.state.is_new_entry = True
        self._refresh()

    def input_digit(self, d: str) -> None:
        if not isinstance(d, str) or len(d) != 1 or d not in DIGITS:
            raise InvalidDigit(d)
        st = self.state
        if st.is_new_entry or not is_editable_text(st.current_value):
            st.current_value = d
            st.is_new_entry = False
        elif st.current_value == '0':
            st.current_value = d
        else:
            if self._too_long_next(st.current_value + d):
                return
            st.current_value += d
        self._refresh()

    def input_decimal_point(self) -> None:
        st = self.state
        if not is_editable_text(st.current_value):
            st.current_value = '0.'
        elif '.' in st.current_value:
            return
        else:
            st.current_value += '.'
        st.is_new_entry = False
        self._refresh()

    def backspace(self) -> None:
        st = self.state
        cur = st.current_value
        if len(cur) > 1 and is_editable_text(cur):
            cur = cur[:-1]
            # '-5' -> '-' 처럼 숫자가 아니게 되면 0
            if not is_finite_text(cur):
                cur = '0'
        else:
            cur = '0'
        st.current_value = cur
        self._refresh()

    def negate(self) -> None:
        st = self.state
        st.current_value = format_number(parse_number(st.current_value) * -1)
        self._refresh()

    # 연산자
    def apply_binary_operator(self, op: Union[BinaryOperator, str]) -> None:
        op = self._to_binary(op)
        st = self.state
        if op is BinaryOperator.EQUALS:
            st.history += f' {st.current_value} ='
            self._resolve()
        else:
            # 대기 중인 연산이 있으면 중간 결과를 먼저 계산 (5 + 3 + ...)
            if st.pending_operator is not None:
                self._resolve()
            st.previous_value = st.current_value
            st.pending_operator = op
            st.history = f'{st.current_value} {op.symbol}'
        st.is_new_entry = True
        self._refresh()

    def apply_unary_operator(self, op: Union[UnaryOperator, str]) -> None:
        op = self._to_unary(op)
        st = self.state
        value = parse_number(st.current_value)
        shown = format_number(value)

        if op is UnaryOperator.SQUARE:
            st.history = f'sqr({shown})'
            result = value * value
        elif op is UnaryOperator.SQUARE_ROOT:
            st.history = f'√({shown})'
            result = square_root(value)
        elif op is UnaryOperator.RECIPROCAL:
            st.history = f'1/({shown})'
            result = divide(1.0, value)
        else:
            # 퍼센트는 이항 문맥이면 이전 값을 기준으로, 아니면 1을 기준으로 한다
            base = 1.0
            if st.previous_value is not None:
                base = parse_number(st.previous_value)
            result = (base * value) / 100

        st.current_value = format_number(round_significant(result))
        st.is_new_entry = True
        logger.debug('unary %s(%s) = %s', op.value, shown, st.current_value)
        self._refresh()

    # 토큰 디스패치
    def press(self, token) -> None:
        """입력 계층이 만든 토큰 하나를 해당 연산으로 전달한다."""
        if isinstance(token, BinaryOperator):
            self.apply_binary_operator(token)
            return
        if isinstance(token, UnaryOperator):
            self.apply_unary_operator(token)
            return
        if not isinstance(token, str):
            raise InvalidOperator(token)

        if len(token) == 1 and token in DIGITS:
            self.input_digit(token)
        elif token == 'dot':
            self.input_decimal_point()
        elif token == 'backspace':
            self.backspace()
        elif token == 'negate':
            self.negate()
        elif token == 'clearEntry':
            self.clear_entry()
        elif token == 'clear':
            self.reset()
        elif token in _BINARY_NAMES:
            self.apply_binary_operator(token)
        elif token in _UNARY_NAMES:
            self.apply_unary_operator(token)
        else:
            raise InvalidOperator(token)

    # 표시
    def project_display(self) -> Display:
        history = self.state.history
        return Display(self.state.current_value, history, bool(history))

    def display_text(self) -> str:
        return self.state.current_value

    # 내부 유틸
    def _resolve(self) -> None:
        st = self.state
        if st.previous_value is None or st.pending_operator is None:
            return
        prev = parse_number(st.previous_value)
        curr = parse_number(st.current_value)
        result = round_significant(st.pending_operator.apply(prev, curr))
        logger.debug('resolve %s %s %s = %s', st.previous_value,
                     st.pending_operator.symbol, st.current_value, result)
        st.current_value = format_number(result)
        st.previous_value = None
        st.pending_operator = None

    def _refresh(self) -> None:
        if self.display is None:
            return
        primary, secondary, visible = self.project_display()
        self.display.set_primary(primary)
        self.display.set_secondary(secondary)
        self.display.set_secondary_visible(visible)

    def _too_long_next(self, s: str) -> bool:
        # 다음 입력이 자릿수 제한을 넘기는지 검사
        digits = s.replace('-', '').replace('.', '')
        return len(digits) > self.max_digits

    @staticmethod
    def _to_binary(op) -> BinaryOperator:
        if isinstance(op, BinaryOperator):
            return op
        try:
            return BinaryOperator(op)
        except ValueError:
            raise InvalidOperator(op) from None

    @staticmethod
    def _to_unary(op) -> UnaryOperator:
        if isinstance(op, UnaryOperator):
            return op
        try:
            return UnaryOperator(op)
        except ValueError:
            raise InvalidOperator(op) from None


_BINARY_NAMES = frozenset(op.value for op in BinaryOperator)
_UNARY_NAMES = frozenset(op.value for op in UnaryOperator)
