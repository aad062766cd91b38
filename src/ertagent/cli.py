"""Command line interface for ertagent."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ertagent.cases import TestCase, build_case_table
from ertagent.config import get_settings
from ertagent.errors import ErtAgentError
from ertagent.runner import TestRunner
from ertagent.spec import TestGroup, load_specs

app = typer.Typer(
    name="ertagent",
    help="Agent-driven acceptance tests for Emacs.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _load(paths: list[Path]) -> list[TestGroup]:
    try:
        return load_specs(paths)
    except ErtAgentError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(1) from exc


@app.command("list")
def list_cases(paths: list[Path] = typer.Argument(..., help="Spec files or directories")) -> None:
    """Print the test cases found in the given specs."""
    table = Table("Case", "Description")
    for case in build_case_table(_load(paths)):
        table.add_row(case.case_id, case.description)
    console.print(table)


@app.command("run")
def run_cases(
    paths: list[Path] = typer.Argument(..., help="Spec files or directories"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model in provider/model form"),
    max_iterations: Optional[int] = typer.Option(None, "--max-iterations", min=1, help="Agent iteration budget"),
    emacs: Optional[str] = typer.Option(None, "--emacs", help="Emacs executable"),
) -> None:
    """Run every test case and report the verdicts."""
    groups = _load(paths)
    settings = get_settings(model=model, max_iterations=max_iterations, emacs_path=emacs)
    runner = TestRunner(settings)

    results: list[tuple[TestCase, bool, str]] = []
    for case in build_case_table(groups):
        try:
            verdict = runner.run_case(case)
        except ErtAgentError as exc:
            results.append((case, False, f"{type(exc).__name__}: {exc}"))
            continue
        results.append((case, verdict.passed, verdict.reason))

    table = Table("Case", "Result", "Reason")
    for case, passed, reason in results:
        status = "[green]PASS[/green]" if passed else "[red]FAIL[/red]"
        table.add_row(case.case_id, status, reason)
    console.print(table)

    failures = sum(1 for _, passed, _ in results if not passed)
    console.print(f"{len(results) - failures} passed, {failures} failed")
    if failures:
        raise typer.Exit(1)
