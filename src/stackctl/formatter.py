"""Output formatters for stack events, details and diffs."""

import io

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from stackctl.models import DiffResult, Stack, StackEvent, StackExport, StackResource

STATUS_COLORS = {
    "FAILED": "red",
    "ROLLBACK": "red",
    "COMPLETE": "green",
    "IN_PROGRESS": "yellow",
}


def status_color(status: str) -> str | None:
    for marker, color in STATUS_COLORS.items():
        if marker in status:
            return color
    return None


def format_event(event: StackEvent) -> str:
    """Format one event as a single log line."""
    line = (
        f"{event.timestamp:%Y-%m-%d %H:%M:%S} {event.logical_id} {event.resource_type} "
        f"{click.style(event.status, fg=status_color(event.status))}"
    )
    if event.reason:
        line += f" ({event.reason})"
    return line


def _render(table: Table) -> str:
    console = Console(file=io.StringIO(), record=True, width=120)
    console.print(table)
    return console.export_text()


def format_events(events: list[StackEvent]) -> str:
    if not events:
        return "No events."

    table = Table(title="Events")
    table.add_column("Timestamp")
    table.add_column("Logical ID")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Reason")
    for e in events:
        table.add_row(
            f"{e.timestamp:%Y-%m-%d %H:%M:%S}",
            e.logical_id,
            e.resource_type,
            e.status,
            Text(e.reason or ""),
        )
    return _render(table)


def format_stack(stack: Stack) -> str:
    """Format status, parameters, tags and outputs of a stack."""
    console = Console(file=io.StringIO(), record=True, width=120)
    console.print(f"[bold]{stack.name}[/bold] {stack.status}")
    if stack.status_reason:
        console.print(f"  {stack.status_reason}", markup=False)

    for title, rows in (
        ("Parameters", {p.key: p.value for p in sorted(stack.parameters, key=lambda p: p.key)}),
        ("Tags", stack.tags),
        ("Outputs", stack.outputs),
    ):
        if not rows:
            continue
        table = Table(title=title)
        table.add_column("Key")
        table.add_column("Value")
        for key, value in rows.items():
            table.add_row(key, Text(value))
        console.print(table)

    return console.export_text()


def format_stacks(stacks: list[Stack]) -> str:
    if not stacks:
        return "No stacks."

    table = Table(title="Stacks")
    table.add_column("Name")
    table.add_column("Status")
    for s in sorted(stacks, key=lambda s: s.name):
        table.add_row(s.name, Text(s.status, style=status_color(s.status) or ""))
    return _render(table)


def format_resources(resources: list[StackResource]) -> str:
    if not resources:
        return "No resources."

    table = Table(title="Resources")
    table.add_column("Physical ID")
    table.add_column("Type")
    for r in resources:
        table.add_row(Text(r.physical_id), r.resource_type)
    return _render(table)


def format_exports(exports: list[StackExport]) -> str:
    if not exports:
        return "No exports."

    table = Table(title="Exports")
    table.add_column("Name")
    table.add_column("Value")
    for e in exports:
        table.add_row(e.name, Text(e.value))
    return _render(table)


def format_diff(result: DiffResult, stack_name: str) -> str:
    """Format a diff report, distinguishing 'no difference' from an empty diff."""
    if result.skipped:
        return f"No parameters file for {stack_name}; skipping {result.subject} diff."
    if result.identical:
        return f"No difference in {result.subject} of {stack_name}."

    styled = []
    for line in result.lines:
        if line.startswith("+") and not line.startswith("+++"):
            styled.append(click.style(line, fg="green"))
        elif line.startswith("-") and not line.startswith("---"):
            styled.append(click.style(line, fg="red"))
        else:
            styled.append(line)
    return "\n".join(styled)
