"""Tests for config.yaml loading and target port validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from portprobe import configuration
from portprobe.models import TargetPort


def test_missing_config_is_created_with_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"

    config = configuration.load_or_create_config(str(path))

    assert config == configuration.DEFAULT_CONFIG
    assert path.exists()
    written = yaml.safe_load(path.read_text())
    assert written["server_host"] == "45.146.81.208"
    assert [p["port"] for p in written["target_ports"]] == [80, 443, 3306, 30120]


def test_user_config_is_merged_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("server_host: probe.example.net\nconnect_timeout_ms: 500\n")

    config = configuration.load_or_create_config(str(path))

    assert config["server_host"] == "probe.example.net"
    assert config["connect_timeout_ms"] == 500
    assert config["packets_per_port"] == 5
    assert config["target_ports"] == configuration.DEFAULT_CONFIG["target_ports"]


def test_malformed_yaml_exits(tmp_path: Path, capsys) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("server_host: [unterminated\n")

    with pytest.raises(SystemExit) as excinfo:
        configuration.load_or_create_config(str(path))

    assert excinfo.value.code == 2
    assert "Error parsing" in capsys.readouterr().err


def test_non_mapping_config_exits(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(SystemExit):
        configuration.load_or_create_config(str(path))


def test_created_config_has_header_and_reloads(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    configuration.load_or_create_config(str(path))

    assert path.read_text().startswith("# portprobe Configuration File")
    assert configuration.load_or_create_config(str(path)) == configuration.DEFAULT_CONFIG


def test_default_target_ports() -> None:
    targets = configuration.target_ports_from_config(configuration.DEFAULT_CONFIG)

    assert targets[0] == TargetPort(80, "HTTP", "Web Server")
    assert [t.name for t in targets] == ["HTTP", "HTTPS", "MySQL", "FiveM"]


def test_target_ports_accepts_numeric_strings_and_missing_names() -> None:
    targets = configuration.target_ports_from_config({"target_ports": [{"port": "8080"}]})
    assert targets == [TargetPort(8080, "8080", "")]


@pytest.mark.parametrize(
    "entries, message",
    [
        ([], "non-empty"),
        ([{"name": "no port"}], "target_ports[0]"),
        ([{"port": 0}], "out of range"),
        ([{"port": 70000}], "out of range"),
        ([{"port": "http"}], "must be an integer"),
        ([{"port": 80}, {"port": 80}], "more than once"),
    ],
)
def test_invalid_target_ports_raise(entries, message: str) -> None:
    with pytest.raises(ValueError) as excinfo:
        configuration.target_ports_from_config({"target_ports": entries})
    assert message in str(excinfo.value)
