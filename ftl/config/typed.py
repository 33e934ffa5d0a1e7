"""
Typed loading of raw YAML data into dataclasses.

`load_typed(tp, raw)` walks the annotations of `tp` recursively and
coerces plain YAML values (dicts, lists, scalars) into them, reporting
problems as ConfigError with a `$.field[0]` style path.
"""

from __future__ import annotations

import dataclasses
import logging
import sys
import typing as t
from dataclasses import fields, is_dataclass
from enum import Enum
from types import UnionType
from typing import Any, get_args, get_origin

from ..errors import ConfigError

_LOG = logging.getLogger(__name__)

# -------------------- Helpers --------------------

def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or str(tp)

def _err(path: str, msg: str) -> ConfigError:
    _LOG.debug("RAISE at %s: %s", path, msg)
    return ConfigError(f"{path}: {msg}")

def _strip_annotated(tp: Any) -> Any:
    if get_origin(tp) is t.Annotated:
        args = get_args(tp)
        return args[0] if args else Any
    return tp

def _coerce_literal(val: Any, tp: Any, path: str) -> Any:
    allowed = get_args(tp)
    if val in allowed:
        return val
    raise _err(path, f"expected one of {list(allowed)}, got {val!r}")

def _coerce_enum(val: Any, tp: Any, path: str) -> Any:
    if isinstance(val, tp):
        return val
    if isinstance(val, str) and val in tp.__members__:
        return tp[val]  # by name
    try:
        return tp(val)  # by value
    except ValueError:
        raise _err(path, f"expected enum {_type_name(tp)}, got {val!r}") from None

def _coerce_union(val: Any, tp: Any, path: str) -> Any:
    errs: list[str] = []
    for sub in get_args(tp):
        # NoneType only matches None
        if sub is type(None):
            if val is None:
                return None
            continue
        try:
            return load_typed(sub, val, path=path)
        except ConfigError as e:
            errs.append(str(e))
    raise _err(path, " | ".join(errs) or f"no variant of {_type_name(tp)} matched")

def _coerce_mapping(val: Any, tp: Any, path: str) -> Any:
    if not isinstance(val, dict):
        raise _err(path, f"expected mapping, got {type(val).__name__}")
    kt, vt = get_args(tp) or (Any, Any)
    out: dict[Any, Any] = {}
    for k, v in val.items():
        k2 = load_typed(kt, k, path=f"{path}.<key>")
        out[k2] = load_typed(vt, v, path=f"{path}.{k2}")
    return out

def _coerce_sequence(val: Any, tp: Any, path: str) -> Any:
    origin = get_origin(tp)
    if not isinstance(val, (list, tuple)):
        raise _err(path, f"expected a list, got {type(val).__name__}")
    (et,) = get_args(tp)[:1] or (Any,)
    items = [load_typed(et, v, path=f"{path}[{i}]") for i, v in enumerate(val)]
    if origin is tuple:
        return tuple(items)
    return items

def _resolve_type_hints_for_class(tp: Any) -> dict[str, Any]:
    mod = sys.modules.get(tp.__module__)
    gns: dict[str, Any] = dict(vars(mod)) if mod is not None else {}
    return t.get_type_hints(tp, globalns=gns, include_extras=True)

def _coerce_dataclass(val: Any, tp: Any, path: str) -> Any:
    if val is None:
        val = {}
    if not isinstance(val, dict):
        raise _err(path, f"expected mapping for {_type_name(tp)}, got {type(val).__name__}")
    type_hints = _resolve_type_hints_for_class(tp)
    fld_map = {f.name: f for f in fields(tp) if f.init}
    extras = set(val.keys()) - set(fld_map.keys())
    if extras:
        raise _err(path, f"unknown key(s): {sorted(str(k) for k in extras)}")
    kwargs: dict[str, Any] = {}
    for name, f in fld_map.items():
        sub_path = f"{path}.{name}"
        if name in val:
            kwargs[name] = load_typed(type_hints.get(name, f.type), val[name], path=sub_path)
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise _err(sub_path, "required field missing")
    return tp(**kwargs)

# -------------------- Entry point --------------------

def load_typed(tp: Any, val: Any, *, path: str = "$") -> Any:
    """
    Recursively coerces raw data `val` into the type `tp`.

    Supported: dataclasses, Literal, Union/Optional, dict, list, tuple,
    Enum and the primitives str/int/float/bool. `Any` passes through.

    Raises:
        ConfigError: With the path of the first offending value
    """
    tp = _strip_annotated(tp)
    origin = get_origin(tp)

    if tp is Any or tp is object:
        return val

    if isinstance(tp, type) and is_dataclass(tp):
        return _coerce_dataclass(val, tp, path)

    if origin is t.Literal:
        return _coerce_literal(val, tp, path)

    if origin in (t.Union, UnionType):
        return _coerce_union(val, tp, path)

    if origin is dict:
        return _coerce_mapping(val, tp, path)
    if origin in (list, tuple):
        return _coerce_sequence(val, tp, path)

    if isinstance(tp, type) and issubclass(tp, Enum):
        return _coerce_enum(val, tp, path)

    if tp is type(None):
        if val is None:
            return None
        raise _err(path, f"expected null, got {type(val).__name__}")

    if tp in (str, int, float, bool):
        # bool is an int subclass; YAML true/false must not pass as numbers
        if isinstance(val, bool) and tp is not bool:
            raise _err(path, f"expected {_type_name(tp)}, got bool")
        if tp is float and isinstance(val, int):
            return float(val)
        if not isinstance(val, tp):
            raise _err(path, f"expected {_type_name(tp)}, got {type(val).__name__}")
        return val

    raise _err(path, f"unsupported type {_type_name(tp)}")


__all__ = ["load_typed"]
