"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

from cli.config import Settings, load_settings
from cli.main import app as cli_app

FIXTURE = Path(__file__).parent / "fixtures" / "catalog" / "awsiamactions_sample.json"


def _run(tmp_path: Path, *argv: str) -> int:
    return cli_app(["--config", str(tmp_path / "iamx.yml"), "--catalog", str(FIXTURE), *argv])


def test_list_services_text(tmp_path, capsys):
    assert _run(tmp_path, "list-services") == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["\t[-] dynamodb", "\t[-] iam", "\t[-] s3"]


def test_list_services_with_names_json(tmp_path, capsys):
    assert _run(tmp_path, "list-services", "--with-names", "--format", "json") == 0
    rows = json.loads(capsys.readouterr().out)
    assert rows[1] == {"prefix": "iam", "name": "AWS Identity and Access Management (IAM)"}


def test_expand_service_with_prefix(tmp_path, capsys):
    assert _run(tmp_path, "expand", "--service-name", "iam", "--prefix", "Create", "--format", "json") == 0
    assert json.loads(capsys.readouterr().out) == ["iam:CreateRole", "iam:CreateUser"]


def test_expand_service_with_pattern(tmp_path, capsys):
    assert _run(tmp_path, "expand", "--service-name", "s3", "--pattern", "Get*Acl", "--format", "json") == 0
    assert json.loads(capsys.readouterr().out) == ["s3:GetObjectAcl"]


def test_expand_qualified_patterns(tmp_path, capsys):
    assert _run(tmp_path, "expand", "iam:Create*", "s3:Get?bject", "iam:CreateRole", "--format", "json") == 0
    assert json.loads(capsys.readouterr().out) == ["iam:CreateRole", "iam:CreateUser", "s3:GetObject"]


def test_expand_unknown_service_exits_one(tmp_path, capsys):
    assert _run(tmp_path, "expand", "--service-name", "nosuchservice") == 1
    assert "not found" in capsys.readouterr().err


def test_expand_requires_arguments(tmp_path, capsys):
    assert _run(tmp_path, "expand") == 2
    assert "--service-name" in capsys.readouterr().err


def test_expand_pattern_without_service_prefix(tmp_path, capsys):
    assert _run(tmp_path, "expand", "CreateRole") == 2
    assert "missing a service prefix" in capsys.readouterr().err


def test_expand_file_writes_output(tmp_path, capsys):
    policy = {
        "Version": "2012-10-17",
        "Statement": [{"Effect": "Allow", "Action": "iam:Create*", "Resource": "*"}],
    }
    policy_path = tmp_path / "policy.json"
    out_path = tmp_path / "out" / "expanded.json"
    policy_path.write_text(json.dumps(policy), encoding="utf-8")

    code = _run(tmp_path, "expand-file", "--policy-file", str(policy_path), "--output-file", str(out_path))
    assert code == 0
    expanded = json.loads(out_path.read_text(encoding="utf-8"))
    assert expanded["Statement"][0]["Action"] == ["iam:CreateRole", "iam:CreateUser"]
    assert "Writing expanded policy" in capsys.readouterr().err


def test_expand_file_reports_statement_errors(tmp_path, capsys):
    policy = {"Statement": [{"Action": "*"}, {"Action": "s3:Put*"}]}
    policy_path = tmp_path / "policy.json"
    policy_path.write_text(json.dumps(policy), encoding="utf-8")

    assert _run(tmp_path, "expand-file", "--policy-file", str(policy_path)) == 0
    captured = capsys.readouterr()
    expanded = json.loads(captured.out)
    assert expanded["Statement"] == [{"Action": "*"}, {"Action": ["s3:PutObject"]}]
    assert "1 statement(s) left unexpanded" in captured.err

    assert _run(tmp_path, "expand-file", "--policy-file", str(policy_path), "--fail-on-errors") == 4
    assert _run(tmp_path, "expand-file", "--policy-file", str(policy_path), "--strict") == 2


def test_expand_file_rejects_invalid_json(tmp_path, capsys):
    policy_path = tmp_path / "policy.json"
    policy_path.write_text("{not json", encoding="utf-8")
    assert _run(tmp_path, "expand-file", "--policy-file", str(policy_path)) == 2
    assert "not valid JSON" in capsys.readouterr().err


def test_config_file_sets_defaults(tmp_path, capsys):
    config_path = tmp_path / "iamx.yml"
    config_path.write_text(f"catalog_source: {FIXTURE}\ndefault_format: json\n", encoding="utf-8")
    assert cli_app(["--config", str(config_path), "expand", "--service-name", "dynamodb"]) == 0
    assert json.loads(capsys.readouterr().out) == ["dynamodb:GetItem", "dynamodb:PutItem", "dynamodb:Query"]


def test_load_settings_defaults_and_merge(tmp_path):
    settings = load_settings(tmp_path / "absent.yml")
    assert settings == Settings()
    merged = settings.merge_cli(format_override="md", use_cache=False, strict=True)
    assert (merged.default_format, merged.use_cache, merged.strict) == ("md", False, True)
    assert merged.catalog_source == settings.catalog_source


def test_cache_commands(tmp_path, capsys):
    cache = tmp_path / "cache" / "actions.json"
    config_path = tmp_path / "iamx.yml"
    config_path.write_text(f"cache_path: {cache}\n", encoding="utf-8")

    assert cli_app(["--config", str(config_path), "cache", "path"]) == 0
    assert capsys.readouterr().out.strip() == str(cache)

    cache.parent.mkdir(parents=True)
    cache.write_text("[]", encoding="utf-8")
    assert cli_app(["--config", str(config_path), "cache", "delete"]) == 0
    assert not cache.exists()
    assert "Deleted" in capsys.readouterr().err


def test_cache_update_rejects_local_catalog(tmp_path):
    assert _run(tmp_path, "cache", "update") == 2


def test_expand_empty_pattern_matches_nothing(tmp_path, capsys):
    assert _run(tmp_path, "expand", "--service-name", "iam", "--pattern", "", "--format", "json") == 0
    captured = capsys.readouterr()
    assert json.loads(captured.out) == []
    assert "No matching actions" in captured.err


def test_expand_rejects_filters_with_qualified_patterns(tmp_path, capsys):
    assert _run(tmp_path, "expand", "iam:*", "--prefix", "Create") == 2
    assert "only apply with --service-name" in capsys.readouterr().err
    assert _run(tmp_path, "expand", "iam:*", "--pattern", "Get*") == 2


def test_list_services_with_names_markdown(tmp_path, capsys):
    assert _run(tmp_path, "list-services", "--with-names", "--format", "md") == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "| Prefix | Name |"
    assert lines[1] == "| --- | --- |"
    assert lines[3] == "| iam | AWS Identity and Access Management (IAM) |"


def test_list_services_with_names_table(tmp_path, capsys):
    assert _run(tmp_path, "list-services", "--with-names", "--format", "table") == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["PREFIX", "NAME"]
    assert set(lines[1].replace(" ", "")) == {"="}
    assert lines[2] == "dynamodb  Amazon DynamoDB"
    assert lines[4].split(None, 1) == ["s3", "Amazon S3"]


def test_expand_markdown_lists_actions(tmp_path, capsys):
    assert _run(tmp_path, "expand", "iam:CreateU*", "--format", "md") == 0
    assert capsys.readouterr().out.splitlines() == ["- `iam:CreateUser`"]
