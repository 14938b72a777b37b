"""exprcalc command line."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import click

from exprcalc import __version__
from exprcalc.config import CONFIG_NAME, CalcConfig, ConfigError, discover_config
from exprcalc.errors import CalcError, DiagnosticRenderer
from exprcalc.lexer import Lexer
from exprcalc.parser import MAX_DEPTH_LIMIT, parse
from exprcalc.source import SourceText
from exprcalc.tree import Expr, evaluate


@dataclass
class _Input:
    """One expression to run, and where to point diagnostics."""

    text: str
    name: str
    line: int = 1


def _collect_inputs(
    expressions: tuple[str, ...],
    file: str | None,
    use_stdin: bool,
    renderer: DiagnosticRenderer,
) -> list[_Input]:
    """Gather expressions from arguments, a file, and stdin, in that order."""
    inputs: list[_Input] = []
    for i, text in enumerate(expressions, start=1):
        name = f"<arg {i}>"
        renderer.add_source(SourceText(text, name))
        inputs.append(_Input(text, name))

    sources: list[SourceText] = []
    if file is not None:
        sources.append(SourceText.from_path(Path(file)))
    if use_stdin:
        sources.append(SourceText(sys.stdin.read(), "<stdin>"))

    for source in sources:
        renderer.add_source(source)
        for lineno, line in enumerate(source.lines, start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            inputs.append(_Input(line, source.name, lineno))
    return inputs


def _trace_logger(enabled: bool) -> logging.Logger | None:
    """Build the logger handed to the parser when tracing is on."""
    if not enabled:
        return None
    log = logging.getLogger("exprcalc.trace")
    log.setLevel(logging.DEBUG)
    log.propagate = False
    # Rebind on every run: stderr may have been swapped since the last one.
    for handler in list(log.handlers):
        log.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("trace: %(message)s"))
    log.addHandler(handler)
    return log


def _format_value(value: float, precision: int) -> str:
    return f"{value:.{precision}g}"


def _settings(
    max_depth: int | None, trace: bool, no_color: bool,
) -> tuple[CalcConfig, DiagnosticRenderer, logging.Logger | None]:
    try:
        config = discover_config()
    except ConfigError as e:
        click.echo(f"error: {CONFIG_NAME}: {e}", err=True)
        raise SystemExit(2)
    if max_depth is not None:
        config.parser.max_depth = max_depth
    if trace:
        config.parser.trace = True
    if no_color:
        config.output.color = False
    renderer = DiagnosticRenderer(color=config.output.color)
    return config, renderer, _trace_logger(config.parser.trace)


def _parse_inputs(
    inputs: list[_Input],
    config: CalcConfig,
    renderer: DiagnosticRenderer,
    log: logging.Logger | None,
) -> Iterator[tuple[_Input, Expr | None]]:
    """Yield ``(input, tree)`` pairs; failures are reported and yield None."""
    for item in inputs:
        try:
            tree = parse(
                item.text, item.name,
                first_line=item.line,
                max_depth=config.parser.max_depth,
                logger=log,
            )
        except CalcError as e:
            click.echo(renderer.render(e.to_diagnostic()), err=True)
            yield item, None
            continue
        yield item, tree


_input_args = [
    click.argument("expressions", nargs=-1),
    click.option("--file", "-f", type=click.Path(exists=True, dir_okay=False),
                 help="Read one expression per line from a file."),
    click.option("--stdin", "use_stdin", is_flag=True,
                 help="Read one expression per line from stdin."),
    click.option("--max-depth", type=click.IntRange(1, MAX_DEPTH_LIMIT), default=None,
                 help="Maximum parenthesis/operator nesting depth."),
    click.option("--trace", is_flag=True, help="Log parser steps to stderr."),
    click.option("--no-color", is_flag=True, help="Disable colored diagnostics."),
]


def _with_input_args(func):
    for decorator in reversed(_input_args):
        func = decorator(func)
    return func


@click.group()
@click.version_option(__version__, prog_name="exprcalc")
def main() -> None:
    """Evaluate arithmetic and boolean expressions."""


@main.command(name="eval")
@_with_input_args
@click.option("--precision", type=click.IntRange(min=0), default=None,
              help="Significant digits in printed results.")
def eval_cmd(
    expressions: tuple[str, ...],
    file: str | None,
    use_stdin: bool,
    max_depth: int | None,
    trace: bool,
    no_color: bool,
    precision: int | None,
) -> None:
    """Parse and evaluate expressions, printing one result per line."""
    config, renderer, log = _settings(max_depth, trace, no_color)
    inputs = _collect_inputs(expressions, file, use_stdin, renderer)
    if not inputs:
        click.echo("error: no expressions given", err=True)
        raise SystemExit(2)

    digits = precision if precision is not None else config.output.precision
    had_errors = False
    for _, tree in _parse_inputs(inputs, config, renderer, log):
        if tree is None:
            had_errors = True
            continue
        click.echo(_format_value(evaluate(tree), digits))

    if had_errors:
        raise SystemExit(1)


@main.command()
@_with_input_args
def check(
    expressions: tuple[str, ...],
    file: str | None,
    use_stdin: bool,
    max_depth: int | None,
    trace: bool,
    no_color: bool,
) -> None:
    """Parse expressions without evaluating them."""
    config, renderer, log = _settings(max_depth, trace, no_color)
    inputs = _collect_inputs(expressions, file, use_stdin, renderer)
    if not inputs:
        click.echo("error: no expressions given", err=True)
        raise SystemExit(2)

    failed = 0
    for item, tree in _parse_inputs(inputs, config, renderer, log):
        if tree is None:
            failed += 1
        else:
            click.echo(f"{item.name}:{item.line}: ok")

    if failed:
        click.echo(f"{failed} of {len(inputs)} expression(s) failed", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("expression")
@click.option("--max-depth", type=click.IntRange(1, MAX_DEPTH_LIMIT), default=None,
              help="Maximum parenthesis/operator nesting depth.")
@click.option("--trace", is_flag=True, help="Log parser steps to stderr.")
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
def view(expression: str, max_depth: int | None, trace: bool, no_color: bool) -> None:
    """Show the parse tree of an expression."""
    config, renderer, log = _settings(max_depth, trace, no_color)
    inputs = _collect_inputs((expression,), None, False, renderer)
    for _, tree in _parse_inputs(inputs, config, renderer, log):
        if tree is None:
            raise SystemExit(1)
        _dump_tree(tree)
        click.echo(str(tree))


def _dump_tree(root: Expr) -> None:
    """Print one node per line, children indented under their parent."""
    stack: list[tuple[Expr, int, str]] = [(root, 0, "")]
    while stack:
        node, depth, role = stack.pop()
        indent = "  " * depth
        prefix = f"{role}: " if role else ""
        click.echo(f"{indent}{prefix}{node.kind.name} {node.token.value!r}")
        if node.right is not None:
            stack.append((node.right, depth + 1, "right"))
        if node.left is not None:
            stack.append((node.left, depth + 1, "left"))


@main.command()
@click.argument("expression")
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
def tokens(expression: str, no_color: bool) -> None:
    """Show the token stream of an expression."""
    _, renderer, _ = _settings(None, False, no_color)
    renderer.add_source(SourceText(expression, "<arg 1>"))
    try:
        toks = Lexer(expression, "<arg 1>").lex()
    except CalcError as e:
        click.echo(renderer.render(e.to_diagnostic()), err=True)
        raise SystemExit(1)
    for tok in toks:
        span = tok.span
        click.echo(f"{span.start_line}:{span.start_col}\t{tok.kind.name}\t{tok.value!r}")
