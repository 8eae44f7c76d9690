"""Business settings commands."""

import click
from shopledger.cli.error_handling import exit_with_error, handle_outcome
from shopledger.cli.parsing import format_amount, parse_amount_or_exit
from shopledger.domain.settings import SettingsService


@click.command("init")
@click.argument("name")
@click.option("--daily-target", help="Daily profit target (e.g., '25000' or '25,000 FCFA')")
@click.pass_context
def init_business(ctx, name: str, daily_target: str | None):
    """Name the business and optionally set a daily profit target."""
    service = SettingsService(ctx.obj["store"])
    if service.is_initialized():
        exit_with_error(
            ctx,
            f"Business already initialized as '{service.get_settings().name}'. "
            "Use 'settings set' to change it.",
        )

    target = parse_amount_or_exit(ctx, daily_target) if daily_target is not None else None
    outcome = service.update_settings(name=name, daily_target=target)
    handle_outcome(ctx, outcome)
    click.echo(f"Initialized business '{outcome.value.name}'")


@click.group()
def settings_group():
    """Show and edit business settings."""
    pass


@settings_group.command("show")
@click.pass_context
def show_settings(ctx):
    """Show the business settings."""
    settings = SettingsService(ctx.obj["store"]).get_settings()
    if not settings.name:
        click.echo("Business not initialized. Run 'init NAME' first.")
        return

    click.echo(f"Business:     {settings.name}")
    if settings.daily_target is None:
        click.echo("Daily target: (none)")
    else:
        click.echo(f"Daily target: {format_amount(settings.daily_target)}")


@settings_group.command("set")
@click.option("--name", help="New business name")
@click.option("--daily-target", help="New daily profit target")
@click.option("--clear-target", is_flag=True, help="Remove the daily profit target")
@click.pass_context
def set_settings(ctx, name: str | None, daily_target: str | None, clear_target: bool):
    """Change the business name or daily profit target."""
    if name is None and daily_target is None and not clear_target:
        exit_with_error(ctx, "Nothing to change. Use --name, --daily-target or --clear-target")

    target = parse_amount_or_exit(ctx, daily_target) if daily_target is not None else None
    outcome = SettingsService(ctx.obj["store"]).update_settings(
        name=name, daily_target=target, clear_target=clear_target
    )
    handle_outcome(ctx, outcome)
    click.echo("Updated settings")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(init_business)
    cli.add_command(settings_group, name="settings")
