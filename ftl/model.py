"""
Data-model adapter.

Template code never looks at host Python objects directly. Values are
wrapped into models that expose narrow capabilities (scalar string,
boolean, number); the engine only asks "does this value have capability X"
and "give me its value as X".
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Protocol, Union, runtime_checkable

Number = Union[int, float, Decimal]


@runtime_checkable
class TemplateModel(Protocol):
    """Values that describe their own type for error messages."""

    def model_type_name(self) -> str:
        ...


@runtime_checkable
class ScalarModel(Protocol):
    """Capability: the value is a scalar string."""

    def get_as_string(self) -> str:
        ...


@runtime_checkable
class BooleanModel(Protocol):
    """Capability: the value is a boolean."""

    def get_as_boolean(self) -> bool:
        ...


@runtime_checkable
class NumberModel(Protocol):
    """Capability: the value is a number."""

    def get_as_number(self) -> Number:
        ...


@dataclass(frozen=True)
class SimpleScalar:
    value: str

    def get_as_string(self) -> str:
        return self.value

    def model_type_name(self) -> str:
        return "a string"


@dataclass(frozen=True)
class SimpleBoolean:
    value: bool

    def get_as_boolean(self) -> bool:
        return self.value

    def model_type_name(self) -> str:
        return "a boolean"


@dataclass(frozen=True)
class SimpleNumber:
    value: Number

    def get_as_number(self) -> Number:
        return self.value

    def model_type_name(self) -> str:
        return "a number"


@dataclass(frozen=True)
class ObjectModel:
    """Any other host object; has none of the capabilities above."""
    obj: Any

    def model_type_name(self) -> str:
        return f"an object of type {type(self.obj).__name__}"


TRUE = SimpleBoolean(True)
FALSE = SimpleBoolean(False)


def wrap(obj: Any) -> Optional[TemplateModel]:
    """
    Default object wrapper: converts a host value into a template model.

    `None` stays `None` (a missing value). Models are returned unchanged.
    """
    if obj is None:
        return None
    if isinstance(obj, (SimpleScalar, SimpleBoolean, SimpleNumber, ObjectModel)):
        return obj
    # bool is a subclass of int, so it has to be checked first
    if isinstance(obj, bool):
        return TRUE if obj else FALSE
    if isinstance(obj, str):
        return SimpleScalar(obj)
    if isinstance(obj, (int, float, Decimal)):
        return SimpleNumber(obj)
    # Host objects exposing any capability are models already
    if isinstance(obj, (TemplateModel, ScalarModel, BooleanModel, NumberModel)):
        return obj
    return ObjectModel(obj)


def is_scalar(model: Any) -> bool:
    return isinstance(model, ScalarModel)


def is_boolean(model: Any) -> bool:
    return isinstance(model, BooleanModel)


def is_number(model: Any) -> bool:
    return isinstance(model, NumberModel)


def format_number(n: Number) -> str:
    """Numbers are printed without a trailing `.0` when they are integral."""
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    return str(n)


def type_description(model: Any) -> str:
    """Human readable description of a model's type, for error messages."""
    if model is None:
        return "null"
    if isinstance(model, TemplateModel):
        return model.model_type_name()
    return f"an object of type {type(model).__name__}"


__all__ = [
    "TemplateModel",
    "ScalarModel",
    "BooleanModel",
    "NumberModel",
    "SimpleScalar",
    "SimpleBoolean",
    "SimpleNumber",
    "ObjectModel",
    "TRUE",
    "FALSE",
    "wrap",
    "is_scalar",
    "is_boolean",
    "is_number",
    "format_number",
    "type_description",
]
