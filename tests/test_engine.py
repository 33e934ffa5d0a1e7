"""
End-to-end tests through the Engine.
"""

import logging
from pathlib import Path

import pytest

from ftl.config import EngineConfig
from ftl.engine import Engine
from ftl.errors import (
    BugError,
    InclusionError,
    MalformedNameError,
    StaticSemanticError,
    TemplateLoadError,
    TemplateNotFoundError,
    UndefinedVariableError,
)
from ftl.template.loader import FileTemplateLoader

from tests.infrastructure.engine_utils import make_engine


class TestRender:

    def test_relative_include(self, engine):
        assert engine.render("a/b.ftl") == "C"

    def test_absolute_include(self):
        engine = make_engine({"a/b.ftl": '<#include "/c.ftl"/>', "c.ftl": "root C", "a/c.ftl": "C"})
        assert engine.render("a/b.ftl") == "root C"

    def test_parse_false_emits_raw_text(self):
        """The included template's text is not interpreted"""
        engine = make_engine({
            "main.ftl": 'before <#include "partial.ftl" parse=false/> after',
            "partial.ftl": '${x} <#include "nope.ftl"/> <#if y>z</#if>',
        })
        assert engine.render("main.ftl") == 'before ${x} <#include "nope.ftl"/> <#if y>z</#if> after'

    def test_parse_false_template_dumps_canonically(self, engine):
        template = engine.parse_template('<#include "x.ftl" parse=false/>')
        assert template.dump(canonical=True) == '<#include "x.ftl" parse=false/>'

    def test_ignore_missing(self):
        engine = make_engine({"main.ftl": '[<#include "missing.ftl" ignore_missing=true/>]'})
        assert engine.render("main.ftl") == "[]"

    def test_missing_include_raises(self):
        engine = make_engine({"main.ftl": '<#include "missing.ftl"/>'})
        with pytest.raises(InclusionError) as exc_info:
            engine.render("main.ftl")
        assert isinstance(exc_info.value.cause, TemplateNotFoundError)
        assert exc_info.value.template_name == "missing.ftl"

    def test_malformed_include_name(self):
        engine = make_engine({"main.ftl": '<#include "../x.ftl" ignore_missing=true/>'})
        with pytest.raises(MalformedNameError):
            engine.render("main.ftl")

    def test_syntax_error_in_included_template(self):
        engine = make_engine({"main.ftl": '<#include "broken.ftl"/>', "broken.ftl": "${"})
        with pytest.raises(InclusionError) as exc_info:
            engine.render("main.ftl")
        assert isinstance(exc_info.value.cause, TemplateLoadError)

    def test_static_error_in_main_template(self):
        engine = make_engine({"main.ftl": '<#include "x.ftl" ignore_missing="yes"/>'})
        with pytest.raises(TemplateLoadError) as exc_info:
            engine.render("main.ftl")
        assert isinstance(exc_info.value.__cause__, StaticSemanticError)

    def test_missing_main_template(self):
        with pytest.raises(TemplateNotFoundError):
            make_engine().render("main.ftl")

    def test_resolver_returning_nothing_is_a_bug(self, monkeypatch):
        engine = make_engine({"main.ftl": "x"})
        monkeypatch.setattr(engine.resolver, "get_template", lambda *args, **kwargs: None)
        with pytest.raises(BugError):
            engine.get_template("main.ftl")

    def test_render_text_with_data_model(self):
        engine = make_engine({"greet.ftl": "Hello ${who}"})
        text = engine.render_text('<#include "greet.ftl"/>, ${n + 1}', data_model={"who": "Ann", "n": 1})
        assert text == "Hello Ann, 2"

    def test_render_text_static_error(self):
        with pytest.raises(StaticSemanticError):
            make_engine().render_text('<#include "x.ftl" parse=1/>')

    def test_dynamic_attributes_from_data_model(self):
        engine = make_engine({"main.ftl": '<#include name parse=p ignore_missing=im/>', "x.ftl": "${raw}"})
        assert engine.render("main.ftl", {"name": "x.ftl", "p": "no", "im": False}) == "${raw}"
        assert engine.render("main.ftl", {"name": "y.ftl", "p": True, "im": True}) == ""

    def test_errors_are_logged_at_debug(self, caplog):
        engine = make_engine({"main.ftl": "${missing}"})
        with caplog.at_level(logging.DEBUG, logger="ftl.engine"):
            with pytest.raises(UndefinedVariableError):
                engine.render("main.ftl")
        assert "FTL stack trace" in caplog.text


class TestFileEngine:

    def test_default_loader_uses_template_root(self, tmpproj: Path):
        engine = Engine(EngineConfig(template_root=str(tmpproj / "templates"), shared_variables={"site": "S"}))
        assert engine.render("main.ftl", {"name": "Bob"}) == "Hello Bob!\n-- S sig"

    def test_raw_include_from_files(self, tmpproj: Path):
        engine = Engine(loader=FileTemplateLoader(tmpproj / "templates"))
        assert engine.render("raw.ftl") == "${not_evaluated} <#if x>y</#if>"

    def test_excluded_template(self, tmpproj: Path):
        engine = Engine(loader=FileTemplateLoader(tmpproj / "templates", exclude=["private/**"]))
        with pytest.raises(TemplateNotFoundError):
            engine.get_template("private/secret.ftl")
