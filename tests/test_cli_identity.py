"""
Contract tests for the `identity` command.
"""

import json

from typer.testing import CliRunner

from identity_agent.main import app


def _split_output(output: str) -> tuple[list[dict], list[dict]]:
    events, other = [], []
    for line in output.splitlines():
        payload = json.loads(line)
        (events if "event_type" in payload else other).append(payload)
    return events, other


def _fixtures(tmp_path, cmdline: str = "ignition.platform.id=qemu\n"):
    cmdline_path = tmp_path / "cmdline"
    cmdline_path.write_text(cmdline, encoding="utf-8")
    os_release = tmp_path / "os-release"
    os_release.write_text("ID=fedora\nVERSION_ID=39\n", encoding="utf-8")
    config_dir = tmp_path / "config.d"
    config_dir.mkdir()
    return [
        "--cmdline-path",
        str(cmdline_path),
        "--os-release-path",
        str(os_release),
        "--config-dir",
        str(config_dir),
    ]


def test_identity_prints_mapping(tmp_path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["identity", "--level", "full", *_fixtures(tmp_path)])

    assert result.exit_code == 0
    events, other = _split_output(result.output)
    assert other == [{"current_os_version": "39", "level": "full", "platform": "qemu"}]
    assert [e["event_type"] for e in events] == [
        "agent_start",
        "config_loaded",
        "identity_resolved",
        "agent_shutdown",
    ]


def test_identity_unknown_level_emits_fallback(tmp_path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["identity", "--level", "bogus", *_fixtures(tmp_path)])

    assert result.exit_code == 0
    events, other = _split_output(result.output)
    assert other[0]["level"] == "minimal"
    fallback = [e for e in events if e["event_type"] == "level_fallback"]
    assert fallback[0]["requested_level"] == "bogus"
    assert fallback[0]["level"] == "minimal"


def test_identity_failure_exits_non_zero(tmp_path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["identity", "--level", "full", *_fixtures(tmp_path, cmdline="quiet\n")],
    )

    assert result.exit_code == 1
    events, other = _split_output(result.output)
    assert other == []
    failed = [e for e in events if e["event_type"] == "identity_failed"]
    assert failed[0]["error_type"] == "IdentityConstructionError"
    assert failed[0]["message"].startswith("failed to build 'full' identity: ")
    assert events[-1]["event_type"] == "agent_shutdown"


def test_undecodable_config_fragment_exits_non_zero(tmp_path) -> None:
    """
    A non-UTF-8 fragment is reported as identity_failed, not a crash.
    """
    args = _fixtures(tmp_path)
    (tmp_path / "config.d" / "bad.toml").write_bytes(b'[collecting]\nlevel = "\xff"\n')
    runner = CliRunner()

    result = runner.invoke(app, ["identity", *args])

    assert result.exit_code == 1
    events, other = _split_output(result.output)
    assert other == []
    failed = [e for e in events if e["event_type"] == "identity_failed"]
    assert failed[0]["error_type"] == "ConfigError"
