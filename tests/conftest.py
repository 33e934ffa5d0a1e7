from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from ftl.template.loader import DictTemplateLoader

# Shared infrastructure
from tests.infrastructure.file_utils import write
from tests.infrastructure.engine_utils import make_engine


@pytest.fixture
def tmpproj(tmp_path: Path) -> Path:
    """Minimal project: ftl.yaml + templates/ with a main template and partials."""
    root = tmp_path
    write(
        root / "ftl.yaml",
        textwrap.dedent("""
        template_root: templates
        recursion_limit: 8
        exclude:
          - "private/**"
        shared_variables:
          site: Example
        """).strip() + "\n",
    )
    write(root / "templates" / "main.ftl", 'Hello ${name}!\n<#include "parts/footer.ftl"/>')
    write(root / "templates" / "parts" / "footer.ftl", '-- ${site} <#include "sig.ftl"/>')
    write(root / "templates" / "parts" / "sig.ftl", "sig")
    write(root / "templates" / "raw.ftl", '<#include "raw_partial.ftl" parse=false/>')
    write(root / "templates" / "raw_partial.ftl", "${not_evaluated} <#if x>y</#if>")
    write(root / "templates" / "private" / "secret.ftl", "secret")
    return root


@pytest.fixture
def loader() -> DictTemplateLoader:
    return DictTemplateLoader({
        "a/b.ftl": '<#include "c.ftl"/>',
        "a/c.ftl": "C",
        "c.ftl": "root C",
    })


@pytest.fixture
def engine(loader):
    return make_engine(loader.templates)
