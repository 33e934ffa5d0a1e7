"""
Tests for the Environment: scopes, inclusion sequence, recursion limit and
stack traces.
"""

import io

import pytest

from ftl.config import MAX_RECURSION_LIMIT
from ftl.errors import InclusionError, RecursionLimitError, UndefinedVariableError
from ftl.model import SimpleScalar

from tests.infrastructure.engine_utils import make_environment


class TestVariables:

    def test_lookup_order(self):
        env = make_environment(data_model={"v": "data", "d": "only data"}, shared_variables={"v": "shared", "s": "S"})
        assert env.get_variable("v").get_as_string() == "data"
        env.set_global("v", "global")
        assert env.get_variable("v").get_as_string() == "global"
        env.set_local("v", "local")
        assert env.get_variable("v").get_as_string() == "local"
        assert env.get_variable("d").get_as_string() == "only data"
        assert env.get_variable("s").get_as_string() == "S"
        assert env.get_variable("nothing") is None

    def test_values_are_wrapped(self):
        env = make_environment(data_model={"n": 3, "flag": True})
        assert env.get_variable("n").get_as_number() == 3
        assert env.get_variable("flag").get_as_boolean() is True


class TestProcess:

    def test_writes_to_given_sink(self):
        env = make_environment("a${x}b", data_model={"x": 1})
        sink = io.StringIO()
        env.out = sink
        env.process()
        assert sink.getvalue() == "a1b"

    def test_if_children_are_visited(self):
        env = make_environment("<#if flag>yes<#else>no</#if>", data_model={"flag": False})
        env.process()
        assert env.out.getvalue() == "no"


class TestInclude:

    def test_included_template_gets_new_local_scope(self):
        env = make_environment(
            '<#assign x = "main"/><#include "part.ftl"/>${x}',
            templates={"part.ftl": '<#assign x = "part"/>[${x}]'},
        )
        env.process()
        assert env.out.getvalue() == "[part]main"

    def test_included_template_sees_callers_locals(self):
        env = make_environment(
            '<#assign who = "caller"/><#include "part.ftl"/>',
            templates={"part.ftl": "${who}"},
        )
        env.process()
        assert env.out.getvalue() == "caller"

    def test_globals_are_shared(self):
        env = make_environment(
            '<#include "part.ftl"/>${g}',
            templates={"part.ftl": '<#global g = "set in part"/>'},
        )
        env.process()
        assert env.out.getvalue() == "set in part"

    def test_current_template_is_restored(self):
        env = make_environment('<#include "sub/part.ftl"/><#include "c.ftl"/>', name="main.ftl", templates={
            "sub/part.ftl": '<#include "c.ftl"/>',
            "sub/c.ftl": "sub-c ",
            "c.ftl": "root-c",
        })
        env.process()
        assert env.out.getvalue() == "sub-c root-c"
        assert env.current_template is env.main_template

    def test_state_restored_after_failure(self):
        env = make_environment('<#include "bad.ftl"/>', templates={"bad.ftl": "${undefined}"})
        with pytest.raises(UndefinedVariableError):
            env.process()
        assert env.current_template is env.main_template
        assert env.instruction_stack == []
        env.set_local("after", SimpleScalar("ok"))
        assert env.get_variable("after").get_as_string() == "ok"

    def test_encoding_defaults_to_config(self):
        env = make_environment(default_encoding="iso-8859-1", templates={"l1.ftl": "caf\xe9".encode("iso-8859-1")})
        template = env.get_template_for_inclusion("l1.ftl", None, True, False)
        assert template.encoding == "iso-8859-1"

    def test_to_full_template_name(self):
        env = make_environment()
        assert env.to_full_template_name("a/b.ftl", "c.ftl") == "a/c.ftl"
        assert env.to_full_template_name("a/b.ftl", "/c.ftl") == "c.ftl"

    def test_recursion_limit(self):
        env = make_environment('<#include "self.ftl"/>', templates={"self.ftl": '<#include "self.ftl"/>'},
                               recursion_limit=5)
        with pytest.raises(RecursionLimitError) as exc_info:
            env.process()
        err = exc_info.value
        assert err.limit == 5
        assert err.chain[0] == "main.ftl"
        assert len(err.chain) == 7

    def test_recursion_limit_at_maximum(self):
        """The largest allowed limit is reached before the interpreter stack runs out"""
        env = make_environment('<#include "self.ftl"/>', templates={"self.ftl": '<#include "self.ftl"/>'},
                               recursion_limit=MAX_RECURSION_LIMIT)
        with pytest.raises(RecursionLimitError) as exc_info:
            env.process()
        assert exc_info.value.limit == MAX_RECURSION_LIMIT
        assert len(exc_info.value.chain) == MAX_RECURSION_LIMIT + 2


class TestStackTrace:

    def test_error_inside_included_template(self):
        env = make_environment(
            'x\n<#include "part.ftl"/>',
            templates={"part.ftl": "text ${missing}"},
        )
        with pytest.raises(UndefinedVariableError) as exc_info:
            env.process()
        stack = exc_info.value.ftl_stack
        assert stack == [
            '- Failed at: ${missing} [in template "part.ftl" at line 1, column 6]',
            '- Reached through: #include "part.ftl" [in template "main.ftl" at line 2, column 1]',
        ]
        formatted = exc_info.value.format_with_stack()
        assert formatted.startswith("The following has evaluated to null or missing:\n==> missing")
        assert "FTL stack trace" in formatted

    def test_text_frames_are_skipped_unless_innermost(self):
        env = make_environment('<#if true>a${missing}</#if>')
        with pytest.raises(UndefinedVariableError) as exc_info:
            env.process()
        assert [line.split(":")[0] for line in exc_info.value.ftl_stack] == ["- Failed at", "- Reached through"]

    def test_inclusion_error_annotated_at_include(self):
        env = make_environment('<#include "missing.ftl"/>')
        with pytest.raises(InclusionError) as exc_info:
            env.process()
        assert exc_info.value.ftl_stack == [
            '- Failed at: #include "missing.ftl" [in template "main.ftl" at line 1, column 1]',
        ]
