"""Rich-powered console output for Cerebrus."""

from __future__ import annotations

from rich.console import Console as RichConsole
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cerebrus.changenotes.validator import ValidationResult
from cerebrus.rules.models import RuleEvaluation, Severity


class Console:
    """Terminal output for the CLI."""

    def __init__(self, stderr: bool = False) -> None:
        self.console = RichConsole(stderr=stderr)

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {escape(message)}")

    def markdown(self, text: str) -> None:
        """Render markdown text."""
        self.console.print(Markdown(text))

    def show_comment(self, body: str, title: str = "PR comment") -> None:
        self.console.print(Panel(Markdown(body), title=f"[bold]{title}[/bold]", border_style="cyan"))

    def show_rule_results(self, evaluation: RuleEvaluation) -> None:
        """Table of every evaluated rule and whether it matched."""
        table = Table(title="Path Rules", border_style="cyan")
        table.add_column("Id", justify="right", style="bold")
        table.add_column("Rule")
        table.add_column("Severity")
        table.add_column("Matched", justify="center")

        for outcome in evaluation.outcomes:
            mark = "[red]yes[/red]" if outcome.matched else "[dim]no[/dim]"
            colour = "red" if outcome.severity is Severity.ERROR else "yellow"
            severity = f"[{colour}]{outcome.severity.value}[/{colour}]"
            table.add_row(str(outcome.rule_id), escape(outcome.name), severity, mark)

        self.console.print(table)
        if evaluation.aborted:
            self.warning("Stopped after a rule with stop-processing set")

    def show_validation(self, result: ValidationResult) -> None:
        """List change-note issues per file."""
        if result.success:
            self.success("All change notes are valid")
            return
        for entry in result.errors:
            self.console.print(f"\n[bold]{escape(entry.file)}[/bold]")
            for issue in entry.issues:
                self.console.print(f"  [red]-[/red] {escape(issue)}")
