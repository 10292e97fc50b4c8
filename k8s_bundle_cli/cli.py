"""k8s-bundle CLI - Check operator bundles against community catalog criteria.

The CLI is a thin wrapper around the Python API (see validation/).
All business logic lives in the library; the CLI handles user interaction.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from k8s_bundle_cli.config import get_setting, list_settings, set_setting, unset_setting
from k8s_bundle_cli.errors import BundleError, ConfigError
from k8s_bundle_cli.json_output import ErrorDetail, error_envelope, success_envelope
from k8s_bundle_cli.loader import load_bundle
from k8s_bundle_cli.models import Bundle
from k8s_bundle_cli.output import detail, error, info, success, warn
from k8s_bundle_cli.validation import ValidationReport, validate_bundle


def _config_dir(ctx: click.Context) -> Path:
    obj = ctx.find_root().obj or {}
    return obj.get("config_dir") or Path.cwd()


def should_output_json(ctx: click.Context, json_flag: bool = False) -> bool:
    """Determine if JSON output should be used.

    Checks the global --format option (falling back to K8S_BUNDLE_FORMAT and
    the config file) and the per-command --json flag.

    Args:
        ctx: Click context containing the format preference.
        json_flag: Per-command --json flag value.

    Returns:
        True if JSON output should be used, False for text output.
    """
    obj = ctx.find_root().obj or {}
    global_format = get_setting("format", cli_value=obj.get("format"), config_dir=_config_dir(ctx))
    return global_format == "json" or json_flag


def output_json_envelope(envelope: Any) -> None:
    """Output a JSON envelope to stdout."""
    click.echo(envelope.to_json())


@click.group()
@click.version_option(package_name="k8s-bundle-cli")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default=None,
    help="Output format (json for machine parsing, text for humans).",
)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding .k8s-bundle.yaml (default: current directory).",
)
@click.pass_context
def cli(ctx: click.Context, output_format: str | None, config_dir: Path | None) -> None:
    """k8s-bundle - Check operator bundles before publishing to community catalogs."""
    ctx.ensure_object(dict)
    ctx.obj["format"] = output_format
    ctx.obj["config_dir"] = config_dir


# ─────────────────────────────────────────────────────────────────────────────
# Check command
# ─────────────────────────────────────────────────────────────────────────────


def _print_report(bundle: Bundle, report: ValidationReport, *, verbose: bool) -> None:
    if verbose:
        for key, value in sorted(bundle.annotations.items()):
            detail(f"{key}: {value}")
    for outcome in report.outcomes:
        label = outcome.name or bundle.name
        for diagnostic in outcome.errors:
            error(str(diagnostic))
        for diagnostic in outcome.warnings:
            warn(str(diagnostic))
        if outcome.passed and verbose:
            success(f"{label}: all checks passed")


def _print_check_summary(checked: int, error_count: int, warning_count: int) -> None:
    if not error_count and not warning_count:
        success(f"{checked} bundle{'s' if checked != 1 else ''} passed all checks")
        return

    parts = []
    if error_count:
        parts.append(f"{error_count} error{'s' if error_count != 1 else ''}")
    if warning_count:
        parts.append(f"{warning_count} warning{'s' if warning_count != 1 else ''}")
    if error_count:
        error(f"Validation failed: {', '.join(parts)}")
    else:
        warn(f"Validation passed with {', '.join(parts)}")


@cli.command()
@click.argument("bundle_dirs", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Also report bundles that pass")
@click.pass_context
def check(
    ctx: click.Context, bundle_dirs: tuple[Path, ...], json_output: bool, verbose: bool
) -> None:
    """Validate operator bundles.

    Checks that bundles using Kubernetes APIs removed in v1.22 declare
    operators.operatorframework.io/maxKubeVersion below 1.22 in their CSV.

    BUNDLE_DIRS are bundle directories (containing manifests/ or the manifest files).
    """
    try:
        use_json = should_output_json(ctx, json_output)
        verbose = bool(
            get_setting("verbose", cli_value=verbose or None, config_dir=_config_dir(ctx))
        )
    except ConfigError as err:
        _fail_config(ctx, "check", err)
        return

    bundles: list[dict[str, Any]] = []
    errors: list[ErrorDetail] = []
    warning_count = 0

    for path in bundle_dirs:
        if not use_json:
            info(f"Checking bundle {path}")
        try:
            bundle = load_bundle(path)
        except BundleError as err:
            errors.append(ErrorDetail(type=type(err).__name__, message=str(err), code=err.code))
            bundles.append({"path": str(path), "loaded": False})
            if not use_json:
                error(err.message)
            continue

        report = validate_bundle(bundle)
        bundles.append(
            {
                "path": str(path),
                "loaded": True,
                "name": bundle.name,
                "annotations": dict(bundle.annotations),
                **report.to_dict(),
            }
        )
        errors.extend(ErrorDetail(type="PolicyViolation", message=str(d)) for d in report.errors)
        warning_count += len(report.warnings)
        if not use_json:
            _print_report(bundle, report, verbose=verbose)

    if use_json:
        data = {
            "bundles": bundles,
            "summary": {
                "checked": len(bundle_dirs),
                "errors": len(errors),
                "warnings": warning_count,
            },
        }
        if errors:
            output_json_envelope(error_envelope("check", errors, data=data))
        else:
            output_json_envelope(success_envelope("check", data))
    else:
        _print_check_summary(len(bundle_dirs), len(errors), warning_count)

    # Exit code: 1 if any errors (not warnings)
    if errors:
        raise SystemExit(1)


# ─────────────────────────────────────────────────────────────────────────────
# Config commands
# ─────────────────────────────────────────────────────────────────────────────


def _fail_config(ctx: click.Context, command: str, err: ConfigError) -> None:
    # The config file itself may be broken, so only the --format flag is consulted
    obj = ctx.find_root().obj or {}
    if obj.get("format") == "json":
        output_json_envelope(
            error_envelope(
                command,
                [ErrorDetail(type=type(err).__name__, message=str(err), code=err.code)],
            )
        )
    else:
        error(err.message)
    raise SystemExit(1) from err


@cli.group()
def config() -> None:
    """Show and change k8s-bundle settings."""


@config.command("list")
@click.pass_context
def config_list(ctx: click.Context) -> None:
    """List all settings with their values and sources."""
    try:
        settings = list_settings(_config_dir(ctx))
    except ConfigError as err:
        _fail_config(ctx, "config list", err)
        return

    if should_output_json(ctx):
        output_json_envelope(success_envelope("config list", {"settings": settings}))
        return

    for key, entry in settings.items():
        info(f"{key} = {entry['value']}")
        detail(f"  source: {entry['source']}")


@config.command("get")
@click.argument("key")
@click.pass_context
def config_get(ctx: click.Context, key: str) -> None:
    """Print the resolved value of KEY."""
    try:
        value = get_setting(key, config_dir=_config_dir(ctx))
    except ConfigError as err:
        _fail_config(ctx, "config get", err)
        return

    if should_output_json(ctx):
        output_json_envelope(success_envelope("config get", {"key": key, "value": value}))
    elif value is None:
        warn(f"{key} is not set")
    else:
        click.echo(value)


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Persist KEY=VALUE in the config file."""
    try:
        set_setting(_config_dir(ctx), key, value)
    except ConfigError as err:
        _fail_config(ctx, "config set", err)
        return

    if should_output_json(ctx):
        output_json_envelope(success_envelope("config set", {"key": key, "value": value}))
    else:
        success(f"Set {key} = {value}")


@config.command("unset")
@click.argument("key")
@click.pass_context
def config_unset(ctx: click.Context, key: str) -> None:
    """Remove KEY from the config file."""
    try:
        removed = unset_setting(_config_dir(ctx), key)
    except ConfigError as err:
        _fail_config(ctx, "config unset", err)
        return

    if should_output_json(ctx):
        output_json_envelope(success_envelope("config unset", {"key": key, "removed": removed}))
    elif removed:
        success(f"Removed {key}")
    else:
        warn(f"{key} was not set in the config file")
