"""CLI interface for the code playground."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from playground.examples import list_examples
from playground.failures import FailureAnalyzer
from playground.session import PlaygroundSession, RunResult
from playground.snippets import extract_playground_snippets
from playground.state import PlaygroundStore
from sandbox.transpile import TranspileError
from workbench.config import PlaygroundConfig, load_config

app = typer.Typer(help="JavaScript / TypeScript playground CLI")

_SUFFIX_LANGUAGES = {".ts": "typescript", ".mts": "typescript", ".js": "javascript", ".mjs": "javascript"}


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_session(config_path: Optional[str], timeout: Optional[float] = None) -> PlaygroundSession:
    try:
        config = load_config(config_path) if config_path else PlaygroundConfig()
    except FileNotFoundError as e:
        typer.secho(f"❌ Config file not found: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except ValueError as e:
        typer.secho(f"❌ Invalid config: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    if timeout is not None:
        config.execution_timeout_s = timeout
    return PlaygroundSession.from_config(config, PlaygroundStore(config.default_code))


def _resolve_language(path: Path, language: Optional[str]) -> str:
    if language:
        value = language.lower()
    else:
        value = _SUFFIX_LANGUAGES.get(path.suffix.lower(), "javascript")
    if value not in ("javascript", "typescript"):
        typer.secho(f"❌ Invalid language: {language}. Must be javascript or typescript.", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    return value


def _read_source(path: Path) -> str:
    if not path.exists():
        typer.secho(f"❌ Source file not found: {path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _print_result(result: RunResult) -> None:
    for line in result.output:
        typer.echo(line)
    for diagnostic in result.diagnostics:
        typer.secho(f"⚠️  {diagnostic}", fg=typer.colors.YELLOW, err=True)
    for line in result.errors:
        typer.secho(line, fg=typer.colors.RED, err=True)

    if result.errors:
        analyzer = FailureAnalyzer()
        for line in result.errors:
            analyzer.record_failure(line)
        summary = ", ".join(f"{name}={count}" for name, count in analyzer.get_top_failures())
        typer.secho(f"\n❌ Run {result.generation} failed ({summary})", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command()
def run(
    source: str = typer.Argument(..., help="JavaScript or TypeScript file to run"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="javascript or typescript"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to playground YAML config"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Execution timeout in seconds"),
) -> None:
    """Run a source file in the sandbox and print its console output."""
    path = Path(source)
    session = _load_session(config_path, timeout)
    session.store.load(_read_source(path), _resolve_language(path, language))
    _print_result(session.run())


@app.command()
def document(
    source: str = typer.Argument(..., help="JavaScript or TypeScript file"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="javascript or typescript"),
    iframe: bool = typer.Option(False, "--iframe", help="Wrap the document in a sandboxed iframe tag"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to playground YAML config"),
) -> None:
    """Write the sandbox HTML document (srcdoc) for a source file."""
    path = Path(source)
    session = _load_session(config_path)
    session.store.load(_read_source(path), _resolve_language(path, language))
    try:
        html = session.render_iframe() if iframe else session.render_document()
    except TranspileError as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if output is None:
        typer.echo(html)
        return
    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(html)
    typer.secho(f"✅ Sandbox document written to {output_path}", fg=typer.colors.GREEN)


@app.command()
def examples() -> None:
    """List the built-in example snippets."""
    for example in list_examples():
        typer.secho(f"\n{example.title} ({example.language})", fg=typer.colors.BLUE)
        typer.echo(example.code)


@app.command()
def run_example(
    title: str = typer.Argument(..., help="Example title, e.g. 'Array map'"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to playground YAML config"),
) -> None:
    """Load a built-in example into the playground and run it."""
    session = _load_session(config_path)
    try:
        session.load_example(title)
    except KeyError:
        typer.secho(f"❌ Unknown example: {title}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    _print_result(session.run())


@app.command()
def snippets(
    lesson: str = typer.Argument(..., help="Lesson markdown file"),
    run_index: Optional[int] = typer.Option(None, "--run", help="Run the snippet at this index"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to playground YAML config"),
) -> None:
    """List the playground snippets in a lesson, or run one of them."""
    found = extract_playground_snippets(_read_source(Path(lesson)))
    if not found:
        typer.secho("No playground snippets found.", fg=typer.colors.YELLOW)
        return

    if run_index is None:
        typer.secho(f"\n📄 Found {len(found)} snippet(s):", fg=typer.colors.BLUE)
        for index, code in enumerate(found):
            typer.secho(f"\n[{index}]", fg=typer.colors.BLUE)
            typer.echo(code.rstrip("\n"))
        return

    if not 0 <= run_index < len(found):
        typer.secho(f"❌ Snippet index out of range: {run_index}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    session = _load_session(config_path)
    session.load_snippet(found[run_index])
    _print_result(session.run())


if __name__ == "__main__":
    app()
