"""
Tests for configuration loading.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Literal, Optional

import pytest

from ftl.config import MAX_RECURSION_LIMIT, EngineConfig, find_config, load_config, load_typed
from ftl.errors import ConfigError

from tests.infrastructure.file_utils import write


class TestLoadConfig:

    def test_defaults_without_file(self, tmp_path: Path):
        cfg = load_config(tmp_path / "ftl.yaml")
        assert cfg == EngineConfig()
        assert cfg.template_root == "templates"
        assert cfg.default_encoding == "utf-8"
        assert cfg.recursion_limit == 64

    def test_none_path(self):
        assert load_config(None) == EngineConfig()

    def test_full_file(self, tmpproj: Path):
        cfg = load_config(find_config(tmpproj))
        assert cfg.recursion_limit == 8
        assert cfg.exclude == ["private/**"]
        assert cfg.shared_variables == {"site": "Example"}

    def test_empty_file(self, tmp_path: Path):
        path = write(tmp_path / "ftl.yaml", "")
        assert load_config(path) == EngineConfig()

    def test_unknown_key(self, tmp_path: Path):
        path = write(tmp_path / "ftl.yaml", "templates_root: x\n")
        with pytest.raises(ConfigError, match="unknown key"):
            load_config(path)

    def test_wrong_type_reports_path(self, tmp_path: Path):
        path = write(tmp_path / "ftl.yaml", "recursion_limit: many\n")
        with pytest.raises(ConfigError, match=r"\$\.recursion_limit: expected int, got str"):
            load_config(path)

    def test_bool_is_not_an_int(self, tmp_path: Path):
        path = write(tmp_path / "ftl.yaml", "recursion_limit: true\n")
        with pytest.raises(ConfigError, match="got bool"):
            load_config(path)

    def test_recursion_limit_must_be_positive(self, tmp_path: Path):
        path = write(tmp_path / "ftl.yaml", "recursion_limit: 0\n")
        with pytest.raises(ConfigError, match="positive"):
            load_config(path)

    def test_recursion_limit_upper_bound(self, tmp_path: Path):
        path = write(tmp_path / "ftl.yaml", f"recursion_limit: {MAX_RECURSION_LIMIT + 1}\n")
        with pytest.raises(ConfigError, match=r"\$\.recursion_limit: must be a positive number not above"):
            load_config(path)
        assert load_config(write(path, f"recursion_limit: {MAX_RECURSION_LIMIT}\n")).recursion_limit == MAX_RECURSION_LIMIT

    def test_direct_construction_is_validated(self):
        with pytest.raises(ConfigError, match="recursion_limit"):
            EngineConfig(recursion_limit=2000)

    def test_not_a_mapping(self, tmp_path: Path):
        path = write(tmp_path / "ftl.yaml", "- a\n- b\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = write(tmp_path / "ftl.yaml", "a: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_find_config(self, tmp_path: Path):
        assert find_config(tmp_path) is None
        path = write(tmp_path / "ftl.yaml", "{}\n")
        assert find_config(tmp_path) == path


class Color(Enum):
    RED = "red"
    BLUE = "blue"


@dataclass
class Inner:
    name: str
    tags: List[str] = field(default_factory=list)


@dataclass
class Outer:
    inner: Inner
    color: Color = Color.RED
    mode: Literal["a", "b"] = "a"
    ratio: float = 1.0
    extra: Optional[int] = None
    table: Dict[str, int] = field(default_factory=dict)


class TestLoadTyped:

    def test_nested(self):
        raw = {
            "inner": {"name": "x", "tags": ["t1", "t2"]},
            "color": "blue",
            "mode": "b",
            "ratio": 2,
            "extra": None,
            "table": {"k": 1},
        }
        obj = load_typed(Outer, raw)
        assert obj == Outer(Inner("x", ["t1", "t2"]), Color.BLUE, "b", 2.0, None, {"k": 1})

    def test_enum_by_name(self):
        assert load_typed(Outer, {"inner": {"name": "x"}, "color": "RED"}).color is Color.RED

    def test_required_field_missing(self):
        with pytest.raises(ConfigError, match=r"\$\.inner\.name: required field missing"):
            load_typed(Outer, {"inner": {}})

    def test_nested_list_path(self):
        with pytest.raises(ConfigError, match=r"\$\.inner\.tags\[1\]: expected str, got int"):
            load_typed(Outer, {"inner": {"name": "x", "tags": ["a", 2]}})

    def test_literal(self):
        with pytest.raises(ConfigError, match=r"\$\.mode"):
            load_typed(Outer, {"inner": {"name": "x"}, "mode": "c"})

    def test_optional(self):
        with pytest.raises(ConfigError, match=r"\$\.extra"):
            load_typed(Outer, {"inner": {"name": "x"}, "extra": "no"})

    def test_bad_enum(self):
        with pytest.raises(ConfigError, match="expected enum Color"):
            load_typed(Outer, {"inner": {"name": "x"}, "color": "green"})
