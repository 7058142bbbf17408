"""Settings CLI commands for W2 Calc.

Manages settings.json - tax rules directory and bracket defaults.
"""

import click
from pathlib import Path

from w2calc.sdk import (
    load_settings,
    get_setting,
    set_setting,
    unset_setting,
    get_settings_path,
    get_tax_rule_years,
    KNOWN_SETTINGS,
    DEFAULT_TAX_YEAR,
    DEFAULT_FILING_STATUS,
)

FILING_STATUSES = ("single", "mfj", "mfs", "hoh")


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - tax_rules_dir: extra directory of YYYY.yaml bracket files
    - tax_year: default year for 'tax' and 'estimate' (--year)
    - filing_status: default filing status (single, mfj, mfs, hoh)
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    click.echo(f"  tax_year: {current.get('tax_year', DEFAULT_TAX_YEAR)}")
    click.echo(f"  filing_status: {current.get('filing_status', DEFAULT_FILING_STATUS)}")
    click.echo(f"  tax rule years: {', '.join(get_tax_rule_years()) or '(none)'}")


@settings.command("get")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
def settings_get(key):
    """Print a single setting value."""
    value = get_setting(key)
    if value is None:
        raise click.ClickException(f"{key} is not set")
    click.echo(value)


@settings.command("set")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
@click.argument("value")
def settings_set(key, value):
    """Set a setting.

    Examples:
        w2-calc settings set tax_year 2025
        w2-calc settings set filing_status mfj
        w2-calc settings set tax_rules_dir ~/tax-rules
    """
    if key == "tax_year" and (not value.isdigit() or len(value) != 4):
        raise click.BadParameter(f"Invalid year '{value}'. Must be 4 digits.")
    if key == "filing_status" and value not in FILING_STATUSES:
        raise click.BadParameter(f"Invalid filing status '{value}'. Choose from: {', '.join(FILING_STATUSES)}")
    if key == "tax_rules_dir":
        rules_path = Path(value).expanduser().resolve()
        if not rules_path.is_dir():
            raise click.ClickException(f"Not a directory: {rules_path}")
        value = str(rules_path)

    set_setting(key, value)
    click.echo(f"Set {key}: {value}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("unset")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
def settings_unset(key):
    """Remove a setting, reverting to its default."""
    if unset_setting(key):
        click.echo(f"Cleared {key}.")
    else:
        click.echo(f"{key} was not set.")
