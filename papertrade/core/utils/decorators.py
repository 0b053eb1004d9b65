"""
Utility decorators for ledger logging.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any

from loguru import logger


def _extract_ledger_context(bound_args: Any) -> dict[str, Any]:
    """Extract ledger context from function arguments."""
    context = {}
    for param_name, value in bound_args.arguments.items():
        if param_name == "self":
            continue
        if param_name in ["symbol", "quantity", "new_initial_balance", "order_id"]:
            context[param_name] = _serialize_parameter_value(value)
    return context


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "value"):
        return str(value.value)  # Handle enum values
    return value


def _setup_logging_context(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Bind arguments and build the base logging context."""
    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()

    self_obj = bound_args.arguments.get("self")
    return {
        "correlation_id": str(uuid.uuid4())[:8],
        "portfolio_id": getattr(self_obj, "portfolio_id", None),
        **_extract_ledger_context(bound_args),
    }


def _log_outcome(func_name: str, context: dict[str, Any], result: Any, elapsed_ms: float) -> None:
    """Log a completed ledger operation, distinguishing rejections."""
    outcome = {**context, "execution_time_ms": round(elapsed_ms, 2)}
    success = getattr(result, "success", None)

    if success is False:
        outcome["rejection"] = getattr(result, "message", "")
        logger.bind(**outcome).warning(f"Ledger operation rejected: {func_name}")
    else:
        logger.bind(**outcome).info(f"Ledger operation completed: {func_name}")


def log_ledger_operation[F: Callable[..., Any]](func: F) -> F:
    """Decorator to log ledger operations with correlation IDs and timing."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context = _setup_logging_context(func, args, kwargs)
        func_name = func.__name__
        logger.bind(**context).debug(f"Ledger operation started: {func_name}")
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.bind(
                **context,
                execution_time_ms=round(elapsed_ms, 2),
                error_type=type(e).__name__,
            ).error(f"Ledger operation failed: {func_name}: {e}")
            raise

        _log_outcome(func_name, context, result, (time.perf_counter() - start_time) * 1000)
        return result

    return wrapper  # type: ignore
