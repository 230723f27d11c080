"""Variable store, #name templating and arithmetic folding."""

import ast
import getpass
import math
import operator
import os
import platform
import socket
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

import structlog

from ..core.errors import StatementError
from ..core.symbols import RESERVED_PREFIX, SUBSTITUTION_MARKER


logger = structlog.get_logger()


# Reserved entries recomputed before every dispatch
CLOCK_VARIABLES = ("date_dmy", "date_ymd", "time", "zone")

# Reserved entries computed once per store
CACHED_VARIABLES = (
    "arch", "cpu", "home", "hostname", "ipv4", "os", "tempdir", "user", "wd",
)

UNAVAILABLE = "n/a"


def _integer_division(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _integer_modulo(a: int, b: int) -> int:
    """Remainder taking the sign of the dividend."""
    return a - b * _integer_division(a, b)


class VariableStore:
    """
    Name -> value bindings for one interpreter run.

    Values are always text; numeric results are rendered before storing.
    Names starting with the reserved prefix are computed by the runtime
    and cannot be assigned by scripts.
    """

    def __init__(self, values: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = {}
        self.build_reserved()
        if values:
            self._values.update(values)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a variable's value."""
        return self._values.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Set a variable's value (no reserved-prefix check)."""
        self._values[name] = str(value)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def items(self):
        return self._values.items()

    def reserved_names(self) -> list[str]:
        """Sorted names of all reserved variables."""
        return sorted(
            name for name in self._values if name.startswith(RESERVED_PREFIX)
        )

    def check_reserved_prefix(self, name: str) -> None:
        """
        Reject an assignment to a reserved name.

        Raises:
            StatementError: If name starts with the reserved prefix
        """
        if not name.startswith(RESERVED_PREFIX):
            return

        listing = "".join(f"\n\t- {n}" for n in self.reserved_names())
        raise StatementError(
            f"You've named a variable {name} which starts with "
            f"{RESERVED_PREFIX} (this is not allowed). If you were trying to "
            f"use a reserved variable, consult the following list: {listing}",
            context={"variable": name},
        )

    def build_reserved(self) -> None:
        """Compute every reserved variable."""
        lookups: dict[str, Callable[[], str]] = {
            "arch": lambda: platform.machine().lower() or UNAVAILABLE,
            "cpu": lambda: str(os.cpu_count() or 1),
            "home": lambda: str(Path.home()),
            "hostname": socket.gethostname,
            "ipv4": first_ipv4_address,
            "os": lambda: platform.system().lower(),
            "tempdir": tempfile.gettempdir,
            "user": getpass.getuser,
            "wd": os.getcwd,
        }

        for name in CACHED_VARIABLES:
            try:
                value = lookups[name]()
            except (OSError, KeyError, RuntimeError) as e:
                logger.warning(
                    "reserved_variable_unavailable", variable=name, error=str(e),
                )
                value = ""
            self._values[RESERVED_PREFIX + name] = value

        self.refresh_clock()

    def refresh_clock(self) -> None:
        """Recompute the date and time reserved variables."""
        now = time.localtime()
        clock = {
            "date_dmy": f"{now.tm_mday}-{now.tm_mon}-{now.tm_year}",
            "date_ymd": f"{now.tm_year}-{now.tm_mon}-{now.tm_mday}",
            "time": f"{now.tm_hour}-{now.tm_min}-{now.tm_sec}",
            "zone": time.strftime("%Z", now),
        }
        for name in CLOCK_VARIABLES:
            self._values[RESERVED_PREFIX + name] = clock[name]

    def substitute(self, text: str) -> str:
        """
        Replace every #name in text with the variable's value.

        Names are applied longest first so that a name which is a prefix of
        another (e.g. #name and #names) never shadows the longer one.
        """
        if SUBSTITUTION_MARKER not in text:
            return text

        for name in sorted(self._values, key=len, reverse=True):
            text = text.replace(SUBSTITUTION_MARKER + name, self._values[name])
        return text


def first_ipv4_address() -> str:
    """First non-loopback IPv4 address of this host, or n/a."""
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        infos = []

    for info in infos:
        address = info[4][0]
        if not address.startswith("127."):
            return address

    # Fall back to the address used for outbound traffic; nothing is sent
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("10.255.255.255", 1))
            address = sock.getsockname()[0]
    except OSError:
        return UNAVAILABLE
    return UNAVAILABLE if address.startswith("127.") else address


class ArithmeticEvaluator:
    """
    Evaluates constant arithmetic expressions.

    Supports:
    - Integer and float literals
    - Unary + and -
    - Binary +, -, *, / and %
    - Parentheses

    Integer / truncates toward zero and % follows the sign of the dividend;
    % on floats is rejected.
    """

    BINARY_OPERATORS: dict[type, Callable[[Any, Any], Any]] = {
        ast.Add: operator.add,
        ast.Sub: operator.sub,
        ast.Mult: operator.mul,
        ast.Div: operator.truediv,
        ast.Mod: operator.mod,
    }

    UNARY_OPERATORS: dict[type, Callable[[Any], Any]] = {
        ast.UAdd: operator.pos,
        ast.USub: operator.neg,
    }

    def evaluate(self, expression: str) -> str:
        """
        Evaluate expression and render the result.

        Raises:
            ValueError: If the expression is not constant arithmetic
            ZeroDivisionError: On division by zero
        """
        tree = ast.parse(expression.strip(), mode="eval")
        result = self._evaluate_node(tree.body)
        return self.render(result)

    def render(self, value: Any) -> str:
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    def _evaluate_node(self, node: ast.AST) -> Any:
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(
                node.value, (int, float)
            ):
                raise ValueError(f"Unsupported constant: {node.value!r}")
            return _finite(node.value)

        if isinstance(node, ast.UnaryOp):
            op = self.UNARY_OPERATORS.get(type(node.op))
            if op is None:
                raise ValueError(f"Unsupported operator: {type(node.op).__name__}")
            return op(self._evaluate_node(node.operand))

        if isinstance(node, ast.BinOp):
            op = self.BINARY_OPERATORS.get(type(node.op))
            if op is None:
                raise ValueError(f"Unsupported operator: {type(node.op).__name__}")
            left = self._evaluate_node(node.left)
            right = self._evaluate_node(node.right)
            if isinstance(left, int) and isinstance(right, int):
                if isinstance(node.op, ast.Div):
                    return _integer_division(left, right)
                if isinstance(node.op, ast.Mod):
                    return _integer_modulo(left, right)
            if isinstance(node.op, ast.Mod):
                raise ValueError("% is only defined for integers")
            return _finite(op(left, right))

        raise ValueError(f"Unsupported expression: {type(node).__name__}")


def _finite(value: Any) -> Any:
    """Reject inf and nan, e.g. from 1e999 or a float overflow."""
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Non-finite result: {value}")
    return value


_evaluator = ArithmeticEvaluator()


def evaluate(value: str) -> str:
    """
    Fold value as an arithmetic expression when it is one.

    Returns the rendered result, or value unchanged when it cannot be
    evaluated.
    """
    try:
        return _evaluator.evaluate(value)
    except (SyntaxError, ValueError, TypeError, ZeroDivisionError,
            OverflowError, RecursionError):
        return value
