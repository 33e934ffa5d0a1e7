"""
Per-render execution context.

One Environment exists per top-level render. It carries the identity of
the template currently executing, the output sink, the variable scopes and
the instruction stack used for error reporting. Nested inclusion reuses the
same Environment; it is never shared between threads.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, TextIO

from .names import to_root_based_name
from .nodes import TemplateElement
from .resolver import TemplateResolver
from .template import Template
from ..config.model import EngineConfig
from ..errors import RecursionLimitError, TemplateError
from ..model import TemplateModel, wrap
from ..utils import jquote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StackFrame:
    """An element being executed, with the template it belongs to."""
    element: TemplateElement
    template: Template


class Environment:
    """
    Execution context of a single render.

    Variable lookup order: local scopes (innermost first), globals, the
    data model, then the configuration's shared variables.
    """

    def __init__(
        self,
        template: Template,
        resolver: TemplateResolver,
        config: Optional[EngineConfig] = None,
        data_model: Optional[Mapping[str, Any]] = None,
        out: Optional[TextIO] = None,
    ):
        self.main_template = template
        self.current_template = template
        self.resolver = resolver
        self.config = config or EngineConfig()
        self.data_model: Dict[str, Any] = dict(data_model or {})
        self.out: TextIO = out if out is not None else io.StringIO()

        self.globals: Dict[str, Any] = {}
        self._local_scopes: List[Dict[str, Any]] = [{}]
        self._instruction_stack: List[StackFrame] = []
        self._include_chain: List[str] = []

    # ---------------------------------------------------------------
    # Variables
    # ---------------------------------------------------------------

    def set_local(self, name: str, value: Any) -> None:
        """Binds a variable in the innermost local scope."""
        self._local_scopes[-1][name] = value

    def set_global(self, name: str, value: Any) -> None:
        """Binds a variable visible to every template of this render."""
        self.globals[name] = value

    def get_variable(self, name: str) -> Optional[TemplateModel]:
        """Looks up a variable; returns None if it is not defined anywhere."""
        for scope in reversed(self._local_scopes):
            if name in scope:
                return wrap(scope[name])
        if name in self.globals:
            return wrap(self.globals[name])
        if name in self.data_model:
            return wrap(self.data_model[name])
        return wrap(self.config.shared_variables.get(name))

    # ---------------------------------------------------------------
    # Execution
    # ---------------------------------------------------------------

    def process(self) -> None:
        """Renders the main template into `out`."""
        logger.debug(f"Processing template {self.main_template.name!r}")
        self.visit(self.main_template.root)

    def visit(self, elements: Iterable[TemplateElement]) -> None:
        """Executes elements in order, descending into returned children."""
        for element in elements:
            self._visit_element(element)

    def _visit_element(self, element: TemplateElement) -> None:
        self._instruction_stack.append(StackFrame(element, self.current_template))
        try:
            children = element.accept(self)
            if children:
                self.visit(children)
        except TemplateError as e:
            # Annotate once, at the innermost element
            if e.ftl_stack is None:
                e.ftl_stack = self.format_stack_trace(self._instruction_stack)
            raise
        finally:
            self._instruction_stack.pop()

    # ---------------------------------------------------------------
    # Inclusion
    # ---------------------------------------------------------------

    def to_full_template_name(self, base_name: str, name: str) -> str:
        """
        Resolves a name written in the template `base_name`.

        Raises:
            MalformedNameError: If the name breaks the naming rules
        """
        return to_root_based_name(base_name, name)

    def get_template_for_inclusion(
        self,
        name: str,
        encoding: Optional[str],
        parse: bool,
        ignore_missing: bool,
    ) -> Optional[Template]:
        """
        Loads the template to include.

        Returns:
            The template, or None if it is missing and `ignore_missing` is set

        Raises:
            MalformedNameError: If the name breaks the naming rules
            TemplateLoadError: If the template is missing or cannot be loaded
        """
        if encoding is None:
            encoding = self.config.default_encoding
        return self.resolver.get_template(name, encoding, parse, ignore_missing)

    def include(self, template: Template) -> None:
        """
        Executes `template` in a nested local scope.

        Output goes to the same sink and globals are shared. The current
        template and scopes are restored when the included template
        completes or fails.
        """
        limit = self.config.recursion_limit
        if len(self._include_chain) >= limit:
            raise RecursionLimitError(
                limit=limit,
                chain=[self.main_template.name] + self._include_chain + [template.name],
            )

        saved_template = self.current_template
        self.current_template = template
        self._include_chain.append(template.name)
        self._local_scopes.append({})
        logger.debug(f"Entering included template {template.name!r} (depth {len(self._include_chain)})")
        try:
            self.visit(template.root)
        finally:
            self._local_scopes.pop()
            self._include_chain.pop()
            self.current_template = saved_template
            logger.debug(f"Leaving included template {template.name!r}")

    # ---------------------------------------------------------------
    # Diagnostics
    # ---------------------------------------------------------------

    @property
    def instruction_stack(self) -> List[StackFrame]:
        return list(self._instruction_stack)

    @staticmethod
    def format_stack_trace(frames: List[StackFrame]) -> List[str]:
        """
        Formats frames innermost first.

        Elements that are not shown in stack traces are skipped, except for
        the innermost one.
        """
        lines: List[str] = []
        for i, frame in enumerate(reversed(frames)):
            if i > 0 and not frame.element.is_shown_in_stack_trace():
                continue
            label = "Failed at" if i == 0 else "Reached through"
            lines.append(f"- {label}: {frame.element.dump(False)} [{_describe_location(frame)}]")
        return lines


def _describe_location(frame: StackFrame) -> str:
    name = frame.template.name
    where = f"in template {jquote(name)}" if name else "in nameless template"
    element = frame.element
    if element.line:
        where += f" at line {element.line}, column {element.column}"
    return where


__all__ = ["Environment", "StackFrame"]
