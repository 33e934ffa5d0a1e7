from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import find_config, load_config
from .engine import Engine
from .errors import TemplateError, TemplateUserError
from .template.loader import FileTemplateLoader
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ftl",
        description="Template engine with #include, #if and #assign directives",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Arguments shared by render/dump
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("name", help="template name, relative to the template root")
        sp.add_argument(
            "--root",
            metavar="DIR",
            help="template root directory (default: template_root from the config)",
        )
        sp.add_argument(
            "--config",
            metavar="FILE",
            help="config file (default: ./ftl.yaml if present)",
        )

    sp_render = sub.add_parser("render", help="Render a template to stdout")
    add_common(sp_render)
    sp_render.add_argument(
        "--var",
        action="append",
        metavar="KEY=VALUE",
        help="string variable for the data model (can be repeated)",
    )

    sp_dump = sub.add_parser("dump", help="Print the parsed template in canonical form")
    add_common(sp_dump)
    sp_dump.add_argument(
        "--trace",
        action="store_true",
        help="one element per line, in stack trace form",
    )

    return p


def _parse_vars(items: Optional[List[str]]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid --var {item!r}, expected KEY=VALUE")
        result[key] = value
    return result


def _engine_from_args(ns: argparse.Namespace) -> Engine:
    config_path = Path(ns.config) if ns.config else find_config(Path.cwd())
    if ns.config and not config_path.is_file():
        raise ValueError(f"Config file not found: {config_path}")
    cfg = load_config(config_path)

    if ns.root:
        root = Path(ns.root)
    elif config_path is not None:
        root = config_path.parent / cfg.template_root
    else:
        root = Path(cfg.template_root)

    if not root.is_dir():
        raise ValueError(f"Template root not found: {root}")

    return Engine(cfg, FileTemplateLoader(root, exclude=cfg.exclude))


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        engine = _engine_from_args(ns)

        if ns.cmd == "render":
            text = engine.render(ns.name, data_model=_parse_vars(ns.var))
            sys.stdout.write(text)
            return 0

        if ns.cmd == "dump":
            template = engine.get_template(ns.name)
            sys.stdout.write(template.dump(canonical=not ns.trace))
            if ns.trace:
                sys.stdout.write("\n")
            return 0

    except TemplateError as e:
        sys.stderr.write(e.format_with_stack().rstrip() + "\n")
        return 2
    except TemplateUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
