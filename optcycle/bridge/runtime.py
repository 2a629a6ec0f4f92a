"""
Serialized invocation of numeric runtime functions.

Every call resolves ``<module>.<function_name>`` by name, converts the
arguments to floats, invokes the function and converts the result back to
Decimal. Only one invocation may run inside the runtime at any instant
across the whole process; the lock is released on every exit path.
"""

import importlib
import math
import threading
from contextlib import contextmanager
from decimal import Decimal
from numbers import Real
from typing import Any, Callable, Iterator, Optional

import numpy as np

from ..errors import ComputationError
from ..logging.config import get_bridge_logger

bridge_logger = get_bridge_logger(__name__)

# The numeric runtime is not safe for concurrent entry
RUNTIME_LOCK = threading.Lock()


def is_runtime_locked() -> bool:
    return RUNTIME_LOCK.locked()


class CrossRuntimeBridge:
    """Typed adapter over a numeric module: ``invoke(name, *args) -> Decimal``."""

    def __init__(self, module_name: str = "numpy", lock: threading.Lock = RUNTIME_LOCK):
        self.module_name = module_name
        self._lock = lock
        self.logger = bridge_logger.bind(module=module_name)

    @contextmanager
    def _runtime_session(self, function_name: str) -> Iterator[Any]:
        """Hold the runtime lock and yield the imported module."""
        with self._lock:
            try:
                module = importlib.import_module(self.module_name)
            except ImportError as e:
                raise ComputationError(function_name, str(e), self.module_name) from e
            yield module

    def _resolve(self, module: Any, function_name: str) -> Callable[..., Any]:
        target = module
        for part in function_name.split("."):
            try:
                target = getattr(target, part)
            except AttributeError as e:
                raise ComputationError(function_name, str(e), self.module_name) from e
        if not callable(target):
            raise ComputationError(
                function_name,
                f"'{function_name}' is not callable",
                self.module_name
            )
        return target

    def _convert_args(self, function_name: str, args: tuple) -> list[float]:
        converted = []
        for arg in args:
            if isinstance(arg, bool) or not isinstance(arg, (Real, Decimal)):
                raise ComputationError(
                    function_name,
                    f"unsupported argument type {type(arg).__name__}",
                    self.module_name
                )
            converted.append(float(arg))
        return converted

    def _convert_result(self, function_name: str, value: Any) -> Decimal:
        if isinstance(value, np.ndarray):
            if value.size != 1:
                raise ComputationError(
                    function_name,
                    f"expected a scalar result, got array of shape {value.shape}",
                    self.module_name
                )
            value = value.reshape(()).item()
        elif isinstance(value, np.generic):
            value = value.item()

        if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
            raise ComputationError(
                function_name,
                f"incompatible return type {type(value).__name__}",
                self.module_name
            )

        result = float(value)
        if not math.isfinite(result):
            raise ComputationError(
                function_name,
                f"non-finite result {result}",
                self.module_name
            )
        return Decimal(repr(result))

    def invoke(self, function_name: str, *args: Any) -> Decimal:
        """
        Invoke a named runtime function under the process-wide lock.

        Args:
            function_name: Attribute path inside the module, e.g. 'sin' or 'linalg.norm'
            *args: Numeric arguments (int, float, Decimal)

        Returns:
            Result as Decimal

        Raises:
            ComputationError: If the function cannot be resolved, raises inside
                the runtime, or returns something that is not a finite scalar
        """
        converted = self._convert_args(function_name, args)

        with self._runtime_session(function_name) as module:
            func = self._resolve(module, function_name)
            try:
                raw = func(*converted)
            except Exception as e:
                raise ComputationError(function_name, str(e), self.module_name) from e
            result = self._convert_result(function_name, raw)

        self.logger.debug(
            "Runtime invocation complete",
            function=function_name,
            args=[str(arg) for arg in args],
            result=str(result)
        )
        return result


def compute_sin(value: Any, bridge: Optional[CrossRuntimeBridge] = None) -> Decimal:
    """Sine computed inside the numeric runtime."""
    bridge = bridge or CrossRuntimeBridge()
    return bridge.invoke("sin", value)
