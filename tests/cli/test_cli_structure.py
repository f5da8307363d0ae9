# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

import argparse
import importlib

import pytest
import yaml

CONTRACT = {
    "routes": {
        "/items": {
            "get": {
                "query": {"limit": {"type": "integer", "maximum": 50}},
                "responses": {200: ["application/json"]},
            },
            "post": {
                "body": {
                    "application/json": {
                        "type": "object",
                        "properties": {"name": {"type": "string"}},
                        "required": ["name"],
                    }
                }
            },
        }
    }
}


def _get_subparser_names(parser: argparse.ArgumentParser) -> set[str]:
    subparser_actions = [
        action
        for action in parser._actions
        if isinstance(action, argparse._SubParsersAction)
    ]
    if not subparser_actions:
        raise AssertionError("expected at least one subparser action")
    names: set[str] = set()
    for action in subparser_actions:
        names.update(action.choices.keys())
    return names


@pytest.fixture()
def cli_main():
    return importlib.import_module("reqcheck.cli.main")


@pytest.fixture()
def contract_file(tmp_path, monkeypatch):
    monkeypatch.delenv("REQCHECK_STRICT_CONTENT_TYPE", raising=False)
    path = tmp_path / "contract.yaml"
    path.write_text(yaml.safe_dump(CONTRACT))
    return path


def test_build_parser_registers_expected_commands(cli_main):
    parser = cli_main.build_parser()
    assert {"check", "routes"}.issubset(_get_subparser_names(parser))


def test_run_command_invokes_callable(cli_main):
    called = {}

    def fake(args):
        called["args"] = args
        return 0

    namespace = argparse.Namespace(func=fake, value=42)

    assert cli_main.run_command(namespace) == 0
    assert called["args"].value == 42


def test_header_option_requires_colon(cli_main):
    parser = cli_main.build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["check", "/items", "-H", "no-colon"])


def test_check_valid_request(cli_main, contract_file, capsys):
    code = cli_main.main(
        ["check", "--contract", str(contract_file), "/items?limit=10", "-H", "Accept: application/json"]
    )

    assert code == 0
    assert capsys.readouterr().out.strip() == "OK"


def test_check_reports_failure_kind(cli_main, contract_file, capsys):
    code = cli_main.main(
        ["check", "--contract", str(contract_file), "/items?limit=500", "-H", "Accept: application/json"]
    )

    assert code == 1
    out = capsys.readouterr().out
    assert out.startswith("FAIL [parameter_value]")
    assert "'limit'" in out


def test_check_reads_body_from_file(cli_main, contract_file, tmp_path, capsys):
    body = tmp_path / "body.json"
    body.write_text('{"name": 3}')

    code = cli_main.main(
        [
            "check",
            "--contract",
            str(contract_file),
            "-X",
            "POST",
            "/items",
            "-H",
            "Content-Type: application/json",
            "-d",
            f"@{body}",
        ]
    )

    assert code == 1
    assert "name (type)" in capsys.readouterr().out


def test_check_unknown_route_is_an_error(cli_main, contract_file, capsys):
    code = cli_main.main(["check", "--contract", str(contract_file), "/nowhere"])

    assert code == 2
    assert "No contract declared" in capsys.readouterr().err


def test_missing_contract_file_is_an_error(cli_main, tmp_path, capsys):
    code = cli_main.main(["routes", "--contract", str(tmp_path / "missing.yaml")])

    assert code == 2
    assert "not found" in capsys.readouterr().err


def test_routes_lists_operations(cli_main, contract_file, capsys):
    assert cli_main.main(["routes", "--contract", str(contract_file)]) == 0
    assert capsys.readouterr().out.splitlines() == ["GET /items", "POST /items"]
