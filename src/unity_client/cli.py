"""Command-line interface for provisioning VMware LUNs on Unity arrays."""
from __future__ import annotations

import json
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import typer
from click.core import ParameterSource

try:  # pragma: no cover - exercised in runtime environments
    from rich import box
    from rich.console import Console
    from rich.table import Table
except ImportError as exc:  # pragma: no cover - optional dependency guard
    raise RuntimeError(
        "The CLI requires Rich for table rendering. Install the CLI extras via "
        "'pip install unity-python[cli]' to enable this command."
    ) from exc

from . import UnityClient
from .auth.basic import BasicAuth
from .cli_schema import CLI_TABLE_VIEWS, TableView
from .dispatcher import AutoApprove, DispatchReport, InteractiveConfirm, LunCreator
from .exceptions import UnityError, ValidationError
from .models import ParameterSet, size_to_bytes

app = typer.Typer(help="Unity storage provisioning CLI.", no_args_is_help=True)

luns_app = typer.Typer(help="VMware LUN operations.")
app.add_typer(luns_app, name="luns")


def _build_sessions(
    base_urls: Sequence[str],
    username: str | None,
    password: str | None,
    verify_ssl: bool,
    cert_path: Path | None,
    timeout: float,
    release_version: str | None,
) -> list[UnityClient]:
    if not base_urls:
        raise typer.BadParameter("At least one --base-url is required.")
    if not username or not password:
        raise typer.BadParameter("--username and --password are required.")

    verify_target: bool | str
    if cert_path:
        expanded_cert = cert_path.expanduser()
        if not expanded_cert.exists():
            raise typer.BadParameter("Certificate file not found for --cert option.")
        if not verify_ssl:
            raise typer.BadParameter("Cannot combine --cert with --no-verify.")
        verify_target = str(expanded_cert)
    else:
        verify_target = verify_ssl

    sessions: list[UnityClient] = []
    for base_url in base_urls:
        client = UnityClient(
            base_url=base_url,
            auth_strategy=BasicAuth(username=username, password=password),
            verify_ssl=verify_target,
            timeout=timeout,
            release_version=release_version,
        )
        try:
            client.connect()
        except UnityError as exc:
            typer.secho(
                f"Unable to connect to {client.label}: {exc}",
                err=True,
                fg=typer.colors.RED,
            )
        sessions.append(client)
    return sessions


def _was_bound(ctx: typer.Context, parameter: str) -> bool:
    return ctx.get_parameter_source(parameter) not in (None, ParameterSource.DEFAULT)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


console = Console(force_terminal=False, color_system=None)


def _render_rich_table(view: TableView, rows: Sequence[Mapping[str, Any]]) -> None:
    table = Table(
        title=view.title,
        box=box.SIMPLE,
        show_lines=False,
        header_style="bold cyan",
    )
    for column in view.columns:
        table.add_column(column.header, justify=column.justify)
    for row in rows:
        table.add_row(*(column.render(row) for column in view.columns))
    console.print(table)


def _report_failures(report: DispatchReport) -> None:
    for label in report.disconnected:
        typer.secho(
            f"Session {label} is not connected; no VMware LUNs were created there.",
            err=True,
            fg=typer.colors.RED,
        )
    for failure in report.failures:
        message = f"Failed to create '{failure.name}' on {failure.session} ({failure.kind}"
        if failure.status_code is not None:
            message += f", status {failure.status_code}"
        message += f"): {failure.message}"
        typer.secho(message, err=True, fg=typer.colors.RED)


def _shared_options() -> dict[str, Any]:  # pragma: no cover - helper indirection
    # Respect UNITY_VERIFY_SSL environment variable when present.
    env_verify = os.getenv("UNITY_VERIFY_SSL")
    if env_verify is None:
        default_verify = True
    else:
        default_verify = env_verify.strip().lower() not in {"0", "false", "no", "off"}

    return {
        "base_url": typer.Option(
            [],
            "--base-url",
            envvar="UNITY_BASE_URL",
            help="Unity management URL; repeat to target several arrays.",
            show_default=False,
        ),
        "username": typer.Option(
            None,
            "--username",
            "-u",
            envvar="UNITY_USERNAME",
            help="Array username.",
        ),
        "password": typer.Option(
            None,
            "--password",
            "-p",
            envvar="UNITY_PASSWORD",
            help="Array password.",
            hide_input=True,
        ),
        "verify_ssl": typer.Option(
            default_verify,
            "--verify/--no-verify",
            envvar="UNITY_VERIFY_SSL",
            help="Enable or disable TLS certificate verification.",
            show_default=True,
        ),
        "cert_path": typer.Option(
            None,
            "--cert",
            envvar="UNITY_CA_CERT",
            help="Path to a custom CA bundle for TLS verification.",
        ),
        "timeout": typer.Option(30.0, help="Request timeout (seconds).", show_default=True),
        "release_version": typer.Option(
            None,
            "--release-version",
            envvar="UNITY_RELEASE",
            help="Optional Unity OE release (e.g., 5.0.3); discovered when omitted.",
        ),
        "output_json": typer.Option(
            False,
            "--json",
            "-j",
            help="Return raw JSON instead of rendering a table.",
        ),
    }


_SHARED_OPTIONS = _shared_options()


def _vmware_lun_create_options() -> dict[str, Any]:  # pragma: no cover - helper indirection
    return {
        "name": typer.Option(..., "--name", help="LUN name; repeat to create several."),
        "pool": typer.Option(..., "--pool", help="Target storage pool identifier (e.g., pool_1)."),
        "size": typer.Option(..., "--size", help="LUN size value."),
        "size_unit": typer.Option(
            "bytes",
            "--size-unit",
            help="Unit for size (bytes, kb, mb, gb, tb, kib, mib, gib, tib).",
            show_default=True,
        ),
        "description": typer.Option(None, "--description", help="LUN description."),
        "host": typer.Option(
            [],
            "--host",
            help="Host identifier granted access; repeat for several hosts.",
            show_default=False,
        ),
        "access_mask": typer.Option(
            "Production",
            "--access-mask",
            help="Access for every --host (NoAccess, Production, Snapshot, Both).",
            show_default=True,
        ),
        "thin": typer.Option(
            True,
            "--thin/--no-thin",
            help="Thin provision the LUN.",
            show_default=True,
        ),
        "fast_vp": typer.Option(
            None,
            "--fast-vp",
            help="FAST VP tiering policy (Autotier_High, Autotier, Highest, Lowest, "
            "No_Data_Movement, Mixed).",
        ),
        "compression": typer.Option(
            False,
            "--compression/--no-compression",
            help="Enable compression; defaults to what the pool supports.",
            show_default=False,
        ),
        "snap_schedule": typer.Option(None, "--snap-schedule", help="Snapshot schedule id."),
        "snap_schedule_paused": typer.Option(
            False,
            "--snap-schedule-paused/--no-snap-schedule-paused",
            help="Create the snapshot schedule in a paused state.",
            show_default=True,
        ),
        "assume_yes": typer.Option(
            False,
            "--yes",
            "-y",
            help="Create without asking for confirmation of each LUN.",
        ),
    }


_VMWARE_LUN_CREATE_OPTIONS = _vmware_lun_create_options()


@luns_app.command("create-vmware")
def luns_create_vmware(
    ctx: typer.Context,
    base_url: list[str] = _SHARED_OPTIONS["base_url"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    release_version: str | None = _SHARED_OPTIONS["release_version"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
    name: list[str] = _VMWARE_LUN_CREATE_OPTIONS["name"],
    pool: str = _VMWARE_LUN_CREATE_OPTIONS["pool"],
    size: str = _VMWARE_LUN_CREATE_OPTIONS["size"],
    size_unit: str = _VMWARE_LUN_CREATE_OPTIONS["size_unit"],
    description: str | None = _VMWARE_LUN_CREATE_OPTIONS["description"],
    host: list[str] = _VMWARE_LUN_CREATE_OPTIONS["host"],
    access_mask: str = _VMWARE_LUN_CREATE_OPTIONS["access_mask"],
    thin: bool = _VMWARE_LUN_CREATE_OPTIONS["thin"],
    fast_vp: str | None = _VMWARE_LUN_CREATE_OPTIONS["fast_vp"],
    compression: bool = _VMWARE_LUN_CREATE_OPTIONS["compression"],
    snap_schedule: str | None = _VMWARE_LUN_CREATE_OPTIONS["snap_schedule"],
    snap_schedule_paused: bool = _VMWARE_LUN_CREATE_OPTIONS["snap_schedule_paused"],
    assume_yes: bool = _VMWARE_LUN_CREATE_OPTIONS["assume_yes"],
) -> None:
    """Create one VMware VMFS LUN per --name on every connected array."""

    try:
        params = ParameterSet(
            names=tuple(name),
            pool_id=pool,
            size=size_to_bytes(size, size_unit),
            description=description,
            is_thin_enabled=thin,
            is_compression_enabled=compression if _was_bound(ctx, "compression") else None,
            tiering_policy=fast_vp,
            host_ids=tuple(host),
            access_mask=access_mask,
            snap_schedule=snap_schedule,
            is_snap_schedule_paused=snap_schedule_paused,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    sessions = _build_sessions(
        base_urls=base_url,
        username=username,
        password=password,
        verify_ssl=verify_ssl,
        cert_path=cert_path,
        timeout=timeout,
        release_version=release_version,
    )
    if assume_yes:
        confirm = AutoApprove()
    else:
        confirm = InteractiveConfirm(lambda question: typer.confirm(question, default=False))

    report = DispatchReport()
    try:
        created = [
            lun.to_row()
            for lun in LunCreator().execute(sessions, params.names, params, confirm, report=report)
        ]
    finally:
        for session in sessions:
            session.close()

    if output_json:
        _echo_json(
            {
                "created": created,
                "skipped": [{"session": s, "name": n} for s, n in report.skipped],
                "failures": [failure.to_row() for failure in report.failures],
                "disconnected": report.disconnected,
            }
        )
    elif created:
        _render_rich_table(CLI_TABLE_VIEWS["luns.created"], created)
    elif not report.failed:
        typer.secho("No VMware LUNs were created.", fg=typer.colors.YELLOW)

    if report.failed:
        _report_failures(report)
        raise typer.Exit(code=1)
