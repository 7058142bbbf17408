"""Rich renderers for extracted W-2 fields and tax results.

Transforms SDK output (field records, TaxResult/estimate dicts) into
formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from w2calc.sdk import FIELD_TYPES, missing_core_fields


FIELD_LABELS = {
    "wages": "Box 1  Wages, tips, other comp.",
    "federal_tax_withheld": "Box 2  Federal income tax withheld",
    "ss_wages": "Box 3  Social security wages",
    "ss_tax_withheld": "Box 4  Social security tax withheld",
    "medicare_wages": "Box 5  Medicare wages and tips",
    "medicare_tax_withheld": "Box 6  Medicare tax withheld",
    "ein": "Employer ID (EIN)",
    "control_number": "Control number",
    "employee_ssn": "Employee SSN",
    "employer_name": "Employer name",
    "employer_address": "Employer address",
    "employee_name": "Employee name",
    "employee_address": "Employee address",
    "state_wages": "Box 16 State wages",
    "state_income_tax": "Box 17 State income tax",
    "locality_name": "Box 20 Locality name",
    "local_wages": "Box 18 Local wages",
    "local_income_tax": "Box 19 Local income tax",
}


def render_w2_fields(console: Console, record: dict) -> None:
    """Render an extracted field record, one row per found field."""
    missing = missing_core_fields(record)
    if missing:
        console.print(Panel(
            f"[yellow]Not found: {', '.join(missing)}[/yellow]",
            title="Review",
            border_style="yellow",
        ))

    if not record:
        console.print("[dim]No W-2 fields recognized.[/dim]")
        return

    table = Table(title="Extracted W-2 Fields", box=box.ROUNDED)
    table.add_column("Field", style="bold", min_width=30)
    table.add_column("Value", justify="right", min_width=14)

    for key, shape in FIELD_TYPES.items():
        if key not in record:
            continue
        value = record[key]
        if shape == "money":
            table.add_row(FIELD_LABELS[key], _fmt(value))
        elif shape == "money_rows":
            table.add_row(FIELD_LABELS[key], "\n".join(_fmt(v) for v in value))
        elif shape == "text_rows":
            table.add_row(FIELD_LABELS[key], "\n".join(value))
        else:
            table.add_row(FIELD_LABELS[key], value)

    console.print(table)


def render_tax_result(console: Console, data: dict, title: str = "Federal Income Tax") -> None:
    """Render tax and breakdown.

    Args:
        console: Rich Console instance
        data: TaxResult.to_dict() or estimate_from_w2() output
        title: Table title
    """
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("", style="bold", min_width=25)
    table.add_column("Amount", justify="right", min_width=14)

    if "wages" in data:
        table.add_row("Wages (Box 1)", _fmt(data["wages"]))
        table.add_row("Taxable income", _fmt(data["taxable"]))
        table.add_row("", "")

    table.add_row("[bold]BRACKETS[/bold]", "")
    if not data["breakdown"]:
        table.add_row("  [dim]no taxable income[/dim]", "")
    for entry in data["breakdown"]:
        table.add_row(f"  {entry['label']}", _fmt(entry["tax"]))
    table.add_row("", "")
    table.add_row("[bold]Total tax[/bold]", f"[bold]{_fmt(data['tax'])}[/bold]")

    if "withheld" in data:
        table.add_row("Federal tax withheld (Box 2)", _fmt(data["withheld"]))
        net = data["refund_positive_owe_negative"]
        if net >= 0:
            table.add_row("[bold green]REFUND[/bold green]", f"[bold green]{_fmt(net)}[/bold green]")
        else:
            table.add_row("[bold red]OWED[/bold red]", f"[bold red]{_fmt(abs(net))}[/bold red]")
        table.add_row("Effective rate", f"{data['effective_rate']:.2%}", style="dim")

    console.print(table)


def _fmt(amount: float | None) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    return f"${amount:,.2f}"
