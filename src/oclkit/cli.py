#!/usr/bin/env python3
"""Command-line inspector for classes using oclkit constraints.

Imports a class and lists the invariants, pre/postconditions, derived and
guarded attributes registered on it.
"""

import argparse
import importlib
import os
import sys
from typing import List, Optional

from . import __version__
from .registry import ConstraintKind, registry_for
from .utils import log
from .utils.color import bold, cyan, green, grey, magenta, set_color_enabled, yellow


KIND_COLORS = {
    ConstraintKind.INVARIANT: yellow,
    ConstraintKind.PRECONDITION: cyan,
    ConstraintKind.POSTCONDITION: magenta,
}


def load_target(target: str) -> type:
    """Resolve ``package.module:ClassName`` to a class.

    Raises:
        ValueError: If the target is malformed or does not name a class
        ImportError: If the module cannot be imported
    """
    module_name, sep, qualname = target.partition(':')
    if not sep or not module_name or not qualname:
        raise ValueError(f"Expected MODULE:CLASS, got {target!r}")

    obj = importlib.import_module(module_name)
    for part in qualname.split('.'):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"{module_name} has no attribute {qualname!r}") from None

    if not isinstance(obj, type):
        raise ValueError(f"{target} is not a class")
    return obj


def format_registry(cls: type) -> List[str]:
    """Render the registry of ``cls`` as display lines."""
    registry = registry_for(cls)
    lines = [bold(f"{cls.__module__}.{cls.__qualname__}")]

    if len(registry) == 0 and not registry.derived and not registry.guarded:
        lines.append(grey("  (no constraints declared)"))
        return lines

    for decl in registry:
        paint = KIND_COLORS[decl.kind]
        target = f" for {decl.method_id}" if decl.method_id else ""
        lines.append(f"  {paint(decl.kind.label)} '{decl.name}'{target}")
    for name in registry.derived:
        lines.append(f"  {green('Derived')} '{name}'")
    for name in registry.guarded:
        lines.append(f"  {grey('Guarded')} '{name}'")
    return lines


def cmd_inspect(args: argparse.Namespace) -> int:
    # console scripts do not put the working directory on sys.path
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    status = 0
    for target in args.targets:
        try:
            cls = load_target(target)
        except (ImportError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            status = 1
            continue
        print("\n".join(format_registry(cls)))
    return status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oclkit",
        description="Inspect constraints declared with oclkit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List constraints of a class
  oclkit inspect myapp.models:Account

  # Several classes, plain output
  python -m oclkit inspect myapp.models:Account myapp.models:User --no-color
        """
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    inspect_parser = subparsers.add_parser('inspect', help='List declared constraints of classes')
    inspect_parser.add_argument('targets', nargs='+', metavar='MODULE:CLASS',
                                help='Class to inspect, e.g. myapp.models:Account')
    inspect_parser.set_defaults(func=cmd_inspect)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        set_color_enabled(False)
    if args.verbose:
        log.config("oclkit").setLevel("DEBUG")

    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
