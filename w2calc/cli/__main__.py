"""W2 Calc CLI - Command-line interface for W-2 extraction and tax estimates."""

import json
import logging
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.console import Console

from w2calc import __version__
from w2calc.sdk import (
    BRACKETS_SINGLE_2025,
    DEFAULT_FILING_STATUS,
    DEFAULT_TAX_YEAR,
    SourceReadError,
    TaxRulesNotFoundError,
    compute_tax,
    estimate_from_w2,
    get_brackets,
    get_setting,
    load_bracket_file,
    parse_w2_text,
    read_source_text,
)

from .renderers.w2_renderer import render_tax_result, render_w2_fields
from .settings_commands import FILING_STATUSES, settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="w2-calc")
@click.option("--verbose", "-v", is_flag=True, help="Log extraction and rule lookups to stderr.")
def cli(verbose):
    """W2 Calc - W-2 field extraction and federal tax estimates.

    Reads recognized W-2 text (OCR output saved as .txt, or a PDF with a
    text layer) and estimates federal income tax with progressive brackets.

    Bracket tables are chosen in this order:

    \b
    1. --brackets FILE (YAML list of {up_to, rate})
    2. --year / --filing-status, or tax_year / filing_status settings
    3. built-in 2025 single-filer table
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


cli.add_command(settings_group)


def _read_text(source: str) -> str:
    """Read recognized text from a file path or '-' for stdin."""
    if source == "-":
        return click.get_text_stream("stdin").read()
    try:
        return read_source_text(Path(source))
    except SourceReadError as e:
        raise click.ClickException(str(e))


def _resolve_brackets(year, filing_status, brackets_file):
    """Pick the bracket table from options, then settings, then the built-in default."""
    if brackets_file:
        try:
            return load_bracket_file(Path(brackets_file))
        except (ValidationError, yaml.YAMLError) as e:
            raise click.ClickException(f"Invalid bracket file {brackets_file}:\n{e}")

    year = year or get_setting("tax_year")
    filing_status = filing_status or get_setting("filing_status")
    if not year and not filing_status:
        return BRACKETS_SINGLE_2025

    year = year or DEFAULT_TAX_YEAR
    filing_status = filing_status or DEFAULT_FILING_STATUS
    try:
        return get_brackets(year, filing_status)
    except TaxRulesNotFoundError as e:
        raise click.ClickException(str(e))
    except KeyError as e:
        raise click.ClickException(e.args[0])
    except (ValidationError, yaml.YAMLError) as e:
        raise click.ClickException(f"Invalid tax rules for {year}:\n{e}")


def _bracket_options(func):
    func = click.option("--brackets", "brackets_file", type=click.Path(exists=True, dir_okay=False),
                        help="YAML bracket table overriding year/filing status")(func)
    func = click.option("--filing-status", type=click.Choice(FILING_STATUSES),
                        help=f"Filing status (default: setting or {DEFAULT_FILING_STATUS})")(func)
    func = click.option("--year", help=f"Tax year for bracket lookup (default: setting or {DEFAULT_TAX_YEAR})")(func)
    return func


def _format_option(func):
    return click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
                        help="Output format (default: table)")(func)


@cli.command("extract")
@click.argument("source", type=click.Path(allow_dash=True))
@_format_option
def extract(source, output_format):
    """Extract W-2 fields from recognized text.

    SOURCE is a .txt file of OCR output, a PDF with a text layer, or '-'
    for stdin. Fields that could not be found are omitted.

    Examples:
      w2-calc extract w2_ocr.txt
      w2-calc extract w2.pdf --format json
    """
    record = parse_w2_text(_read_text(source))

    if output_format == "json":
        click.echo(json.dumps(record, indent=2))
    else:
        render_w2_fields(Console(), record)


@cli.command("tax")
@click.argument("amount", type=float)
@_bracket_options
@_format_option
def tax(amount, year, filing_status, brackets_file, output_format):
    """Compute progressive federal income tax on a taxable AMOUNT.

    Examples:
      w2-calc tax 50000
      w2-calc tax 120000 --filing-status mfj --format json
    """
    brackets = _resolve_brackets(year, filing_status, brackets_file)
    result = compute_tax(amount, brackets).to_dict()

    if output_format == "json":
        click.echo(json.dumps(result, indent=2))
    else:
        render_tax_result(Console(), result)


@cli.command("estimate")
@click.argument("source", type=click.Path(allow_dash=True))
@click.option("--adjustments", type=float, default=0.0, show_default=True,
              help="Amount subtracted from Box 1 wages before applying brackets")
@_bracket_options
@_format_option
def estimate(source, adjustments, year, filing_status, brackets_file, output_format):
    """Estimate federal tax and refund from recognized W-2 text.

    Taxable income is Box 1 wages minus --adjustments. The refund (or amount
    owed) compares the bracket tax against Box 2 withholding.

    Examples:
      w2-calc estimate w2_ocr.txt --adjustments 15000
    """
    record = parse_w2_text(_read_text(source))
    brackets = _resolve_brackets(year, filing_status, brackets_file)
    result = estimate_from_w2(record, adjustments=adjustments, brackets=brackets)

    if output_format == "json":
        click.echo(json.dumps(result, indent=2))
        return

    console = Console()
    if "wages" not in record:
        console.print("[yellow]Box 1 wages not found; estimate uses $0.00.[/yellow]")
    render_tax_result(console, result, title="W-2 Tax Estimate")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
