"""
CLI entry point for bracelint.

Usage:
    bracelint lint <paths...>            Report whitespace problems
    bracelint lint <paths...> --fix      Fix them in place where possible
    bracelint checks                     List the available checks
    bracelint tokens <file>              Dump the token stream of a file
"""

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path

from . import __version__


def _configure_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def cmd_lint(args):
    """Lint manifests, optionally fixing them."""
    from .config import ConfigError, LintConfig
    from .rules import UnknownRuleError
    from .tools.lint import lint_paths, write_fixes

    try:
        config = LintConfig(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    _configure_logging(config.log_level, args.verbose)

    overrides = {}
    if args.fix:
        overrides["fix"] = True
    if args.only:
        overrides["only"] = tuple(args.only)
    if args.disable:
        overrides["disabled"] = tuple(config.disabled_checks) + tuple(args.disable)
    options = config.to_options(**overrides)

    try:
        reports = lint_paths(args.paths, options)
    except UnknownRuleError as e:
        print(f"Error: unknown check {e}", file=sys.stderr)
        return 2
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if options.fix:
        for report in reports:
            write_fixes(report)

    problems = [p for report in reports for p in report.problems]

    if args.json:
        print(json.dumps([p.to_dict() for p in problems], indent=2))
    else:
        for problem in problems:
            print(problem)

        counts = Counter(p.kind for p in problems)
        print(f"\nSummary: {len(problems)} problems in {len(reports)} files")
        for kind in ("error", "warning", "fixed"):
            if counts[kind]:
                print(f"  {kind}: {counts[kind]}")

    return 1 if any(p.kind == "error" for p in problems) else 0


def cmd_checks(args):
    """List registered checks."""
    from .rules import all_rules

    for rule in all_rules():
        suffix = "" if rule.fixable else " (no fix)"
        print(f"{rule.name}{suffix}")
    return 0


def cmd_tokens(args):
    """Dump the token stream of a file."""
    from .parser import LexerError, TokenStream

    try:
        stream = TokenStream.from_file(args.file)
    except LexerError as e:
        print(f"{args.file}: {e}", file=sys.stderr)
        return 1

    for token in stream:
        print(f"{token.line:>5}:{token.column:<4} {token.type.name:<14} {token.value!r}")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Whitespace linter for brace-delimited manifests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    bracelint lint manifests/
    bracelint lint init.pp --fix
    bracelint lint init.pp --only manifest_whitespace_opening_brace_before
    bracelint tokens init.pp
"""
    )
    parser.add_argument('--version', action='version', version=f'bracelint {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # lint
    lint_p = subparsers.add_parser('lint', help='Lint manifests')
    lint_p.add_argument('paths', nargs='+', type=Path, help='Files or directories')
    lint_p.add_argument('--fix', action='store_true', help='Fix problems in place')
    lint_p.add_argument('--only', action='append', metavar='CHECK',
                        help='Run only this check (repeatable)')
    lint_p.add_argument('--disable', action='append', metavar='CHECK',
                        help='Skip this check (repeatable)')
    lint_p.add_argument('--json', action='store_true', help='Output as JSON')
    lint_p.add_argument('--config', type=Path, help='YAML config file')
    lint_p.add_argument('-v', '--verbose', action='store_true')
    lint_p.set_defaults(func=cmd_lint)

    # checks
    checks_p = subparsers.add_parser('checks', help='List available checks')
    checks_p.set_defaults(func=cmd_checks)

    # tokens
    tokens_p = subparsers.add_parser('tokens', help='Dump the token stream of a file')
    tokens_p.add_argument('file', help='File to tokenize')
    tokens_p.set_defaults(func=cmd_tokens)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
