"""Runtime validators for constructor arguments."""

from __future__ import annotations

from collections.abc import Iterable


def _type_name(value: object) -> str:
    return type(value).__name__


def ensure_callable(value: object, *, name: str) -> None:
    if not callable(value):
        raise TypeError(f"{name} must be callable, got {_type_name(value)}")


def ensure_optional_callable(value: object | None, *, name: str) -> None:
    if value is not None and not callable(value):
        raise TypeError(f"{name} must be callable or None, got {_type_name(value)}")


def ensure_non_negative_int(value: object, *, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {_type_name(value)}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def ensure_exception_types(
    values: Iterable[object], *, name: str
) -> frozenset[type[BaseException]]:
    kinds = []
    for index, item in enumerate(values):
        if not (isinstance(item, type) and issubclass(item, BaseException)):
            raise TypeError(
                f"{name}[{index}] must be an exception class, got {_type_name(item)}"
            )
        kinds.append(item)
    return frozenset(kinds)


__all__ = [
    "ensure_callable",
    "ensure_exception_types",
    "ensure_non_negative_int",
    "ensure_optional_callable",
]
