#!/usr/bin/env python3
"""
Demo script for Horizon - Cloud Release Radar.

Aggregates a small generated export, then runs the release radar if a
Gemini API key is configured.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from horizon.ai import GeminiClient
from horizon.inventory import aggregate, total_amount
from horizon.radar import Analyzer


console = Console()

DEMO_ROWS = [
    ["Subscription Plan Number", "Date", "SKU", "Unit", "Quantity", "", "", "", "Amount"],
    ["SUB-1", "2024-05-01", "B91214 - Compute - Standard - E4 - OCPU", "OCPU/Hour", "220", "", "", "", "611.30"],
    ["SUB-1", "2024-05-02", "B91214 - Compute - Standard - E4 - OCPU", "OCPU/Hour", "230", "", "", "", "639.20"],
    ["SUB-1", "2024-05-01", "B88317 - Block Storage - Performance", "GB/Month", "5000", "", "", "", "840.00"],
    ["SUB-1", "2024-05-01", "B92322 - Object Storage - Standard", "GB/Month", "12000", "", "", "", "315.20"],
    ["SUB-1", "2024-05-01", "B93111 - Network - Outbound Data Transfer", "GB/Month", "n/a", "", "", "", "120.00"],
    ["SUB-1", "2024-05-01", "", "GB/Month", "1", "", "", "", "1.00"],
    ["SUB-1", "truncated row"],
]


def main():
    console.print(Panel.fit(
        "[bold blue]Horizon[/bold blue]\n"
        "Cloud Release Radar\n"
        "[dim]Demo Mode - Using a generated export[/dim]",
        border_style="blue",
    ))
    console.print()

    console.print("[bold]1. Aggregating consumption export...[/bold]")
    items = aggregate(DEMO_ROWS)

    table = Table(title="SKU Inventory")
    table.add_column("SKU", style="cyan")
    table.add_column("Description")
    table.add_column("Unit", style="magenta")
    table.add_column("Quantity", justify="right")
    table.add_column("Amount", justify="right")

    for item in items:
        table.add_row(
            item.id,
            item.description,
            item.unit,
            f"{item.quantity:,.0f}",
            f"[yellow]${item.amount:,.2f}[/]",
        )

    console.print(table)
    console.print(Panel(
        f"[bold]Rows in Export:[/] {len(DEMO_ROWS) - 1}\n"
        f"[bold]Distinct SKUs:[/] {len(items)}\n"
        f"[bold]Total Amount:[/] [yellow]${total_amount(items):,.2f}[/]",
        title="Summary",
    ))
    console.print()

    console.print("[bold]2. Matching release notes...[/bold]")
    client = GeminiClient()
    if not client.connect():
        console.print("   [yellow]No GEMINI_API_KEY set, skipping the release radar[/yellow]")
        return

    analyzer = Analyzer(client)
    report = analyzer.run(items)

    for note in report.notes:
        marker = "[green]*[/]" if note.is_relevant else " "
        console.print(f" {marker} {note.date}  {note.service}: {note.title}")
    console.print()

    console.print("[bold]3. Strategic insights[/bold]")
    for insight in report.insights:
        console.print(f"   [{insight.impact.value.upper()}] {insight.title} - {insight.action_label}")
    console.print()

    console.print("[bold]4. Drafting email digest...[/bold]")
    console.print(analyzer.draft_digest(report))


if __name__ == "__main__":
    main()
