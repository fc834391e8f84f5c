"""
walletpass command line interface.

Usage:
    walletpass build ./models/coupon --out coupon.pkpass --serial-number 42
    walletpass pack bundle.pkpasses ./models/coupon ./models/ticket
    walletpass inspect coupon.pkpass
"""
from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Optional, Sequence, Tuple

import click
from pydantic import ValidationError

from walletpass.config import SigningConfig
from walletpass.core import PKPass
from walletpass.core.constants import MANIFEST_JSON, PASS_TYPES, TRANSIT_TYPES
from walletpass.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

# Errors a build can end with; reported without a traceback
BUILD_ERRORS = (TypeError, ValueError, RuntimeError, FileNotFoundError)


def _load_config(config_path: Optional[str]) -> SigningConfig:
    try:
        if config_path:
            return SigningConfig.from_yaml(config_path)
        return SigningConfig.from_env()
    except (RuntimeError, ValidationError) as exc:
        raise click.ClickException(f"Invalid signing configuration: {exc}") from exc


def _build_pass(
    config: SigningConfig,
    model: str,
    pass_type: Optional[str] = None,
    transit_type: Optional[str] = None,
    serial_number: Optional[str] = None,
    description: Optional[str] = None,
    barcode: Optional[str] = None,
    translations: Sequence[Tuple[str, str, str]] = (),
) -> PKPass:
    props = {}
    if serial_number:
        props["serialNumber"] = serial_number
    if description:
        props["description"] = description

    pkpass = PKPass.from_source(
        {
            "model": str(config.resolve_model(model)),
            "certificates": config.to_certificates(),
        },
        props,
    )

    if pass_type:
        pkpass.type = pass_type
    if transit_type:
        pkpass.transit_type = transit_type
    if barcode:
        pkpass.set_barcodes(barcode)
    for lang, key, value in translations:
        pkpass.localize(lang, {key: value})

    return pkpass


@click.group()
@click.option("--log-level", default=None, help="Log level (default: $WALLETPASS_LOG_LEVEL or WARNING)")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON")
def cli(log_level: Optional[str], json_logs: bool) -> None:
    """Build, pack and inspect signed wallet passes."""
    configure_logging(level=log_level, json_output=json_logs)


@cli.command()
@click.argument("model")
@click.option("--out", "-o", "out", required=True, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML signing config")
@click.option("--type", "pass_type", type=click.Choice(PASS_TYPES), help="Override the template pass type")
@click.option("--transit-type", type=click.Choice(TRANSIT_TYPES), help="Transit type of boarding passes")
@click.option("--serial-number", help="pass.json serialNumber")
@click.option("--description", help="pass.json description")
@click.option("--barcode", help="Message of the generated barcodes")
@click.option(
    "--localize",
    "translations",
    type=(str, str, str),
    multiple=True,
    metavar="LANG KEY VALUE",
    help="Add a translation (repeatable)",
)
def build(
    model: str,
    out: Path,
    config_path: Optional[str],
    pass_type: Optional[str],
    transit_type: Optional[str],
    serial_number: Optional[str],
    description: Optional[str],
    barcode: Optional[str],
    translations: Tuple[Tuple[str, str, str], ...],
) -> None:
    """Build a .pkpass from the template folder MODEL."""
    config = _load_config(config_path)
    try:
        pkpass = _build_pass(
            config,
            model,
            pass_type=pass_type,
            transit_type=transit_type,
            serial_number=serial_number,
            description=description,
            barcode=barcode,
            translations=translations,
        )
        data = pkpass.get_as_bytes()
    except BUILD_ERRORS as exc:
        logger.error("pass_build_failed", model=model, error=str(exc))
        raise click.ClickException(str(exc)) from exc

    out.write_bytes(data)
    click.echo(f"Wrote {out} ({len(data)} bytes)")


@cli.command()
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("models", nargs=-1, required=True)
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML signing config")
def pack(out: Path, models: Tuple[str, ...], config_path: Optional[str]) -> None:
    """Build one pass per template in MODELS and pack them into OUT (.pkpasses)."""
    config = _load_config(config_path)
    try:
        passes = [_build_pass(config, model) for model in models]
        data = PKPass.pack(*passes).get_as_bytes()
    except BUILD_ERRORS as exc:
        logger.error("pass_pack_failed", models=list(models), error=str(exc))
        raise click.ClickException(str(exc)) from exc

    out.write_bytes(data)
    click.echo(f"Wrote {out} ({len(passes)} passes, {len(data)} bytes)")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect(file: Path) -> None:
    """Print the manifest of a built pass."""
    try:
        with zipfile.ZipFile(file) as zf:
            manifest = json.loads(zf.read(MANIFEST_JSON))
    except (zipfile.BadZipFile, KeyError, ValueError) as exc:
        raise click.ClickException(f"{file} is not a valid pass: {exc}") from exc

    click.echo(json.dumps(manifest, indent=2, sort_keys=True))


if __name__ == "__main__":
    cli()
