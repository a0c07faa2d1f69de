"""
Horizon CLI - Command line interface for the cloud release radar.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from horizon.ai import BaseAIClient, GeminiClient
from horizon.config.settings import DEFAULT_CUSTOMER, Settings
from horizon.exceptions import HorizonError
from horizon.inventory import SAMPLE_INVENTORY, InventoryItem, load_inventory, total_amount
from horizon.radar import Analyzer, EmailSchedule
from horizon.radar.matcher import best_match

app = typer.Typer(
    name="horizon",
    help="Cloud Release Radar - Match vendor release notes to your billed SKUs",
    add_completion=False,
)
console = Console()

STEP_LABELS = {
    "searching": "Searching release notes...",
    "mapping": "Mapping notes to SKUs...",
    "insights": "Synthesizing insights...",
    "complete": "Analysis complete",
}


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    setup_logging(verbose)


def load_items(csv_path: Optional[Path], sample: bool) -> list[InventoryItem]:
    """Load the inventory from an export, or the sample portfolio."""
    if sample or csv_path is None:
        if not sample:
            console.print("[dim]No export given, using the sample portfolio[/]")
        return list(SAMPLE_INVENTORY)

    settings = Settings.from_env()
    try:
        return load_inventory(csv_path, settings.layout)
    except (OSError, HorizonError) as e:
        console.print(f"[red]Could not read {csv_path}: {e}[/]")
        raise typer.Exit(code=1)


def inventory_table(items: list[InventoryItem], title: str = "SKU Inventory") -> Table:
    table = Table(title=title)
    table.add_column("SKU", style="cyan")
    table.add_column("Description")
    table.add_column("Unit", style="magenta")
    table.add_column("Quantity", justify="right")
    table.add_column("Amount", justify="right")

    for item in items:
        table.add_row(
            item.id,
            item.description[:50],
            item.unit,
            f"{item.quantity:,.2f}",
            f"[yellow]${item.amount:,.2f}[/]",
        )
    return table


def run_analysis(client: BaseAIClient, items: list[InventoryItem]):
    if not client.connect():
        console.print("[red]GEMINI_API_KEY is not set; analysis needs a live model.[/]")
        raise typer.Exit(code=1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting analysis...", total=None)
        analyzer = Analyzer(
            client,
            on_step=lambda step: progress.update(task, description=STEP_LABELS.get(step.value, step.value)),
        )
        report = analyzer.run(items)

    return analyzer, report


@app.command()
def inventory(
    csv_path: Path = typer.Argument(..., help="Consumption export (CSV)"),
    top: int = typer.Option(0, "--top", "-t", help="Only show the N most expensive SKUs"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Aggregate a billing export into a SKU inventory."""
    items = load_items(csv_path, sample=False)
    shown = items[:top] if top > 0 else items

    if json_output:
        output = {
            "items": [i.to_dict() for i in shown],
            "summary": {
                "skus": len(items),
                "total_amount": round(total_amount(items), 2),
            },
        }
        typer.echo(json.dumps(output, indent=2))
        return

    if not items:
        console.print("[yellow]No billable rows found in the export.[/]")
        return

    console.print(inventory_table(shown))
    console.print()
    console.print(Panel(
        f"[bold]Distinct SKUs:[/] {len(items)}\n"
        f"[bold]Total Amount:[/] [yellow]${total_amount(items):,.2f}[/]",
        title="Summary",
    ))


@app.command()
def sample(
    json_output: bool = typer.Option(False, "--json", "-j"),
):
    """Show the sample portfolio."""
    items = list(SAMPLE_INVENTORY)
    if json_output:
        typer.echo(json.dumps([i.to_dict() for i in items], indent=2))
        return
    console.print(inventory_table(items, title="Sample Portfolio"))


@app.command()
def analyze(
    csv_path: Optional[Path] = typer.Argument(None, help="Consumption export (CSV)"),
    use_sample: bool = typer.Option(False, "--sample", "-s", help="Use the sample portfolio"),
    json_output: bool = typer.Option(False, "--json", "-j"),
):
    """Match release notes to the inventory and synthesize insights."""
    items = load_items(csv_path, use_sample)
    with GeminiClient() as client:
        _, report = run_analysis(client, items)

    if json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2))
        return

    if report.error:
        console.print(f"[red]{report.error}[/]")
        raise typer.Exit(code=1)

    if report.notes:
        table = Table(title="Release Notes")
        table.add_column("Date")
        table.add_column("Service", style="magenta")
        table.add_column("Title")
        table.add_column("Match", justify="right")

        for note in report.notes:
            score = f"{note.match_score:.0f}" if note.match_score is not None else "-"
            color = "green" if note.is_relevant else "white"
            table.add_row(note.date, note.service, note.title[:50], f"[{color}]{score}[/]")

        console.print(table)

    if report.insights:
        table = Table(title="Strategic Insights")
        table.add_column("Impact")
        table.add_column("Type")
        table.add_column("Title")
        table.add_column("Action")
        table.add_column("Savings", justify="right")

        impact_colors = {"high": "red", "medium": "yellow", "low": "white"}

        for insight in report.insights:
            color = impact_colors.get(insight.impact.value, "white")
            table.add_row(
                f"[{color}]{insight.impact.value.upper()}[/]",
                insight.type.value,
                insight.title[:40],
                insight.action_label,
                f"[green]{insight.savings}[/]" if insight.savings else "-",
            )

        console.print(table)

    top = best_match(report.notes)
    console.print(Panel(
        f"[bold]SKUs Analyzed:[/] {len(report.inventory)}\n"
        f"[bold]Release Notes:[/] {len(report.notes)}  |  "
        f"[bold]Relevant:[/] [green]{len(report.relevant_notes)}[/]\n"
        f"[bold]Insights:[/] {len(report.insights)}\n"
        f"[bold]Top Match:[/] {top.title if top else '-'}",
        title="Analysis",
    ))


@app.command()
def digest(
    csv_path: Optional[Path] = typer.Argument(None, help="Consumption export (CSV)"),
    use_sample: bool = typer.Option(False, "--sample", "-s"),
    customer: str = typer.Option(DEFAULT_CUSTOMER, "--customer", "-c", help="Addressee of the email"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the HTML to a file"),
):
    """Draft the HTML email digest."""
    items = load_items(csv_path, use_sample)
    with GeminiClient() as client:
        analyzer, report = run_analysis(client, items)
        html = analyzer.draft_digest(report, customer)

    if output is not None:
        output.write_text(html, encoding="utf-8")
        console.print(f"[green]Digest written to {output}[/]")
        return

    console.print(html)


@app.command()
def schedule():
    """Show the default digest schedule."""
    current = EmailSchedule()
    days = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
    console.print(Panel(
        f"[bold]Frequency:[/] {current.frequency.value}\n"
        f"[bold]Day:[/] {days[current.day_of_week]}\n"
        f"[bold]Recipient:[/] {current.recipient_email}\n"
        f"[bold]Enabled:[/] {'yes' if current.enabled else 'no'}\n"
        f"[bold]Last Sent:[/] {current.last_sent or '-'}",
        title="Digest Schedule",
    ))


@app.command()
def version():
    """Show version information."""
    from horizon import __version__
    console.print(f"Horizon v{__version__}")
    console.print("Cloud Release Radar")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
