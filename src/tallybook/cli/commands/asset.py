"""Fixed asset commands."""

import click
from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.formatting import format_amount
from tallybook.domain.assets import FixedAssetService
from tallybook.domain.errors import DomainError
from tallybook.utils.amount_parser import parse_amount, parse_optional_amount
from tallybook.utils.date_parser import parse_date


@click.group()
def asset_group():
    """Manage fixed assets and depreciation."""
    pass


@asset_group.command("add")
@click.argument("name")
@click.option("--cost", required=True, help="Acquisition cost")
@click.option("--acquired", "acquired_on", required=True, help="Acquisition date")
@click.option("--category", default="", help="Asset category (e.g. Vehicles)")
@click.option("--asset-account", help="Asset account code")
@click.option("--paid-from", help="Cash or bank account code the purchase was paid from")
@click.option("--depreciable", is_flag=True, help="Depreciate the asset straight-line")
@click.option("--life-years", type=int, help="Useful life in years")
@click.option("--residual-value", help="Residual value at the end of the useful life")
@click.option("--accumulated-account", help="Accumulated depreciation account code")
@click.option("--expense-account", help="Depreciation expense account code")
@click.pass_context
def add_asset(
    ctx,
    name: str,
    cost: str,
    acquired_on: str,
    category: str,
    asset_account: str | None,
    paid_from: str | None,
    depreciable: bool,
    life_years: int | None,
    residual_value: str | None,
    accumulated_account: str | None,
    expense_account: str | None,
):
    """Register a fixed asset.

    With --paid-from, the purchase is journalized against --asset-account.

    Examples:
        tallybook asset add "Laptop" --cost 15000000 --acquired 2024-01-10 \\
            --asset-account 1501 --paid-from 1200 --depreciable --life-years 4 \\
            --accumulated-account 1601 --expense-account 5401
    """
    service = FixedAssetService(ctx.obj["db"])

    try:
        asset = service.register_asset(
            name=name,
            cost=parse_amount(cost),
            acquired_on=parse_date(acquired_on),
            category=category,
            asset_account_code=asset_account,
            payment_account_code=paid_from,
            is_depreciable=depreciable,
            life_years=life_years,
            residual_value=parse_optional_amount(residual_value),
            accumulated_depreciation_account_code=accumulated_account,
            depreciation_expense_account_code=expense_account,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Registered asset {asset.id} '{asset.name}'")
    click.echo(f"  Cost: {format_amount(asset.cost)}")
    if asset.is_depreciable:
        click.echo(f"  Useful life: {asset.life_years} years")
    if paid_from:
        click.echo(f"  Purchase journalized: {asset_account} from {paid_from}")


@asset_group.command("list")
@click.pass_context
def list_assets(ctx):
    """List fixed assets with their book values."""
    assets = FixedAssetService(ctx.obj["db"]).list_assets()
    if not assets:
        click.echo("No assets found.")
        return

    click.echo("\nFixed assets:")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<5} {'Name':<28} {'Acquired':<12} {'Cost':>16} "
        f"{'Depreciation':>16} {'Book value':>16}"
    )
    click.echo("-" * 100)
    for asset in assets:
        click.echo(
            f"{asset.id:<5} {asset.name[:28]:<28} {str(asset.acquired_on):<12} "
            f"{format_amount(asset.cost):>16} {format_amount(asset.accumulated_depreciation):>16} "
            f"{format_amount(asset.book_value):>16}"
        )


@asset_group.command("depreciate")
@click.argument("asset_id", type=int)
@click.option("--date", help="Date of the depreciation entry (defaults to end of this month)")
@click.pass_context
def depreciate(ctx, asset_id: int, date: str | None):
    """Post one month of depreciation for an asset."""
    service = FixedAssetService(ctx.obj["db"])

    try:
        on_date = parse_date(date) if date else None
        asset = service.run_depreciation(asset_id, on_date=on_date)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Depreciated asset {asset.id} '{asset.name}'")
    click.echo(f"  Accumulated depreciation: {format_amount(asset.accumulated_depreciation)}")
    click.echo(f"  Book value: {format_amount(asset.book_value)}")


@asset_group.command("update")
@click.argument("asset_id", type=int)
@click.option("--name", help="New asset name")
@click.option("--category", help="New category")
@click.option("--asset-account", help="Asset account code")
@click.option("--depreciable/--not-depreciable", default=None, help="Turn depreciation on or off")
@click.option("--life-years", type=int, help="Useful life in years")
@click.option("--residual-value", help="Residual value at the end of the useful life")
@click.option("--accumulated-account", help="Accumulated depreciation account code")
@click.option("--expense-account", help="Depreciation expense account code")
@click.pass_context
def update_asset(
    ctx,
    asset_id: int,
    name: str | None,
    category: str | None,
    asset_account: str | None,
    depreciable: bool | None,
    life_years: int | None,
    residual_value: str | None,
    accumulated_account: str | None,
    expense_account: str | None,
):
    """Edit a fixed asset's register details.

    Cost and acquisition date are journalized and can't be edited; delete
    and re-register the asset instead.

    Examples:
        tallybook asset update 1 --name "Laptop (sales)" --life-years 5
    """
    service = FixedAssetService(ctx.obj["db"])

    try:
        asset = service.update_asset(
            asset_id,
            name=name,
            category=category,
            residual_value=parse_amount(residual_value) if residual_value else None,
            is_depreciable=depreciable,
            life_years=life_years,
            asset_account_code=asset_account,
            accumulated_depreciation_account_code=accumulated_account,
            depreciation_expense_account_code=expense_account,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated asset {asset.id} '{asset.name}'")


@asset_group.command("delete")
@click.argument("asset_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_asset(ctx, asset_id: int, yes: bool):
    """Remove a fixed asset from the register.

    Its purchase and depreciation transactions stay in the journal.
    """
    service = FixedAssetService(ctx.obj["db"])

    try:
        asset = service.require_asset(asset_id)
        if not yes and not click.confirm(f"Delete asset {asset.id} '{asset.name}'?"):
            click.echo("Deletion cancelled.")
            return
        service.delete_asset(asset_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted asset {asset_id}")


def register_commands(cli):
    """Register asset commands with main CLI."""
    cli.add_command(asset_group, name="asset")
