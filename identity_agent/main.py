"""
identity_agent.main
------------
AUTHOR: carter-vin

CLI entrypoint for host identity resolution

Key contract:
- `host-identity-agent --help` shows a Commands section.
- `host-identity-agent identity` prints one identity JSON line, or exits 1.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from identity_agent import AGENT_VERSION
from identity_agent.config import DEFAULT_CONFIG_DIRS, load_collecting_config
from identity_agent.errors import IdentityError, describe_error
from identity_agent.identity import (
    DEFAULT_LEVEL,
    KERNEL_ARGS_FILE,
    OS_RELEASE_FILE,
    identity_to_json,
    resolve_identity,
)
from identity_agent.logging import emit_event

# Explicit multi-command CLI
app = typer.Typer(
    add_completion=False,
    help="host-identity-agent: resolve platform, OS version and collection level",
)


# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class EnvironmentInfo:
    """
    Snapshot of the runtime environment
    """

    python_version: str
    os: str
    machine: str
    utc_now: str


def collect_environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        utc_now=datetime.now(timezone.utc).isoformat(),
    )


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Print a short hint when no subcommand is provided.
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: host-identity-agent --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print agent version & runtime env
    """
    env = collect_environment_info()

    typer.echo(f"host-identity-agent v{AGENT_VERSION}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"utc_now={env.utc_now}")


@app.command("identity")
def identity(
    level: Optional[str] = typer.Option(
        None,
        help="Collection level (minimal|full). Overrides config and env.",
    ),
    config_dir: Optional[list[Path]] = typer.Option(
        None,
        "--config-dir",
        help="Config fragment directory (repeatable). Replaces the default dirs.",
    ),
    cmdline_path: Path = typer.Option(
        KERNEL_ARGS_FILE,
        help="Kernel cmdline file.",
    ),
    os_release_path: Path = typer.Option(
        OS_RELEASE_FILE,
        help="os-release file.",
    ),
) -> None:
    """
    Resolve the host identity once and print it as JSON

    Failure semantics:
    - config or lookup failures emit identity_failed and exit 1
    """
    emit_event(
        "agent_start",
        agent_version=AGENT_VERSION,
        mode="identity",
        cmdline_path=str(cmdline_path),
        os_release_path=str(os_release_path),
    )

    def _on_level_fallback(requested: str) -> None:
        emit_event(
            "level_fallback",
            agent_version=AGENT_VERSION,
            requested_level=requested,
            level=DEFAULT_LEVEL.value,
        )

    try:
        cfg = load_collecting_config(
            config_dirs=config_dir if config_dir else DEFAULT_CONFIG_DIRS,
            level_override=level,
            on_level_fallback=_on_level_fallback,
        )

        emit_event(
            "config_loaded",
            agent_version=AGENT_VERSION,
            level=cfg.level.value,
            sources=list(cfg.sources),
        )

        # Level is already canonical here; resolve won't re-report fallback.
        ident = resolve_identity(
            cfg.level,
            cmdline_path=cmdline_path,
            os_release_path=os_release_path,
        )

        emit_event(
            "identity_resolved",
            agent_version=AGENT_VERSION,
            **ident.get_data(),
        )
        typer.echo(identity_to_json(ident))

    except IdentityError as e:
        emit_event(
            "identity_failed",
            agent_version=AGENT_VERSION,
            error_type=type(e).__name__,
            message=describe_error(e),
        )
        raise typer.Exit(code=1)

    finally:
        emit_event(
            "agent_shutdown",
            agent_version=AGENT_VERSION,
            mode="identity",
        )


if __name__ == "__main__":
    app()
