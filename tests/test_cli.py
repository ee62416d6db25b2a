import base64
import json

import pytest
from click.testing import CliRunner

from shamir257 import cli as cli_module
from shamir257.audit import verify_log
from shamir257.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def share_lines(output):
    return [line for line in output.splitlines() if line.startswith("{")]


def split_text(runner, secret="hello", shares="5", threshold="3", *extra):
    result = runner.invoke(
        cli, ["split", "--shares", shares, "--threshold", threshold, "--secret-text", secret, *extra]
    )
    assert result.exit_code == 0, result.output
    return share_lines(result.output)


def test_split_prints_one_json_share_per_line(runner):
    lines = split_text(runner)
    assert len(lines) == 5
    assert [json.loads(line)["x"] for line in lines] == [1, 2, 3, 4, 5]
    assert list(json.loads(lines[0])) == ["version", "prime", "threshold", "x", "yValues", "secretLength"]


def test_split_then_combine_as_text(runner):
    lines = split_text(runner, "Launch code: 12345")
    args = ["combine", "--as-text"]
    for line in lines[1:4]:
        args += ["--share-json", line]
    result = runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "Launch code: 12345"


def test_split_base64_and_combine_from_file(runner, tmp_path):
    secret = bytes([0, 1, 2, 250, 255])
    out = tmp_path / "shares.jsonl"
    result = runner.invoke(
        cli,
        [
            "split",
            "--shares", "4",
            "--threshold", "2",
            "--secret-base64", base64.b64encode(secret).decode(),
            "--out", str(out),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Wrote 4 share(s) to" in result.output
    assert len(out.read_text().splitlines()) == 4

    result = runner.invoke(cli, ["combine", "--shares-file", str(out)])
    assert result.exit_code == 0, result.output
    assert base64.b64decode(result.output.strip()) == secret


def test_combine_insufficient_shares_exits_with_2(runner):
    lines = split_text(runner, "abc", "5", "4")
    result = runner.invoke(cli, ["combine", "--share-json", lines[0], "--share-json", lines[1]])
    assert result.exit_code == 2
    assert "Error: Insufficient shares" in result.output


def test_combine_invalid_json_exits_with_2(runner):
    result = runner.invoke(cli, ["combine", "--share-json", "{bad-json}"])
    assert result.exit_code == 2
    assert "could not be parsed" in result.output


def test_combine_missing_file_exits_with_2(runner, tmp_path):
    result = runner.invoke(cli, ["combine", "--shares-file", str(tmp_path / "missing.jsonl")])
    assert result.exit_code == 2
    assert "Shares file does not exist" in result.output


def test_combine_non_utf8_as_text_exits_with_2(runner):
    encoded = base64.b64encode(b"\xff\xfe").decode()
    lines = share_lines(
        runner.invoke(
            cli, ["split", "--shares", "2", "--threshold", "2", "--secret-base64", encoded]
        ).output
    )
    result = runner.invoke(cli, ["combine", "--as-text", "--share-json", lines[0], "--share-json", lines[1]])
    assert result.exit_code == 2
    assert "not valid UTF-8" in result.output


@pytest.mark.parametrize(
    "args, message",
    [
        (["--shares", "1", "--threshold", "2", "--secret-text", "x"], "Share count must be between 2 and 256"),
        (["--shares", "3", "--threshold", "4", "--secret-text", "x"], "Threshold must be between"),
        (
            ["--shares", "3", "--threshold", "2", "--secret-text", "x", "--secret-base64", "eA=="],
            "exactly one secret input",
        ),
        (["--shares", "3", "--threshold", "2", "--secret-base64", "***"], "not valid base64"),
        (["--shares", "3", "--threshold", "2", "--secret-base64", "eA"], "not valid base64"),
    ],
)
def test_split_argument_errors_exit_with_2(runner, args, message):
    result = runner.invoke(cli, ["split", *args])
    assert result.exit_code == 2
    assert message in result.output


def test_usage_errors_exit_with_2(runner):
    assert runner.invoke(cli, ["split", "--shares", "many"]).exit_code == 2
    assert runner.invoke(cli, ["frobnicate"]).exit_code == 2


def test_unexpected_errors_exit_with_1(runner, monkeypatch):
    lines = split_text(runner, "abc", "3", "2")

    def explode(shares):
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_module, "combine", explode)
    result = runner.invoke(cli, ["combine", "--share-json", lines[0], "--share-json", lines[1]])
    assert result.exit_code == 1
    assert "Unexpected error: boom" in result.output


def test_secret_size_limit(runner, monkeypatch):
    monkeypatch.setenv("SHAMIR257_MAX_SECRET_KB", "1")
    result = runner.invoke(
        cli, ["split", "--shares", "2", "--threshold", "2", "--secret-text", "a" * 1025]
    )
    assert result.exit_code == 2
    assert "limit is 1024 bytes" in result.output


def test_interactive_split(runner):
    result = runner.invoke(cli, ["split"], input="3\n2\ntext\nprompted secret\n\n")
    assert result.exit_code == 0, result.output
    lines = share_lines(result.output)
    assert len(lines) == 3

    combined = runner.invoke(
        cli, ["combine", "--as-text", "--share-json", lines[2], "--share-json", lines[0]]
    )
    assert combined.output.strip() == "prompted secret"


def test_interactive_mode_selection_and_pasted_combine(runner):
    lines = split_text(runner, "pasted", "4", "3")
    pasted = "\n".join(lines[:3])
    result = runner.invoke(cli, [], input=f"combine\n\n{pasted}\n\ntext\n")
    assert result.exit_code == 0, result.output
    assert result.output.strip().splitlines()[-1] == "pasted"


def test_interactive_combine_from_file(runner, tmp_path):
    lines = split_text(runner, "from-file", "3", "2")
    path = tmp_path / "shares.jsonl"
    path.write_text("\n".join(lines) + "\n")
    result = runner.invoke(cli, ["combine"], input=f"{path}\nbase64\n")
    assert result.exit_code == 0, result.output
    assert base64.b64decode(result.output.strip().splitlines()[-1]) == b"from-file"


def test_audit_records_are_written_when_configured(runner, monkeypatch, tmp_path):
    monkeypatch.setenv("SHAMIR257_AUDIT_DIR", str(tmp_path))
    lines = split_text(runner, "audited", "3", "2")
    runner.invoke(cli, ["combine", "--share-json", lines[0], "--share-json", lines[1]])

    records = sorted(tmp_path.glob("audit_*.json"))
    assert len(records) == 2
    events = {json.loads(path.read_text())["payload"]["event"] for path in records}
    assert events == {"split", "combine"}
    for path in records:
        assert verify_log(path)
        details = json.loads(path.read_text())["payload"]["details"]
        assert details["secret_length"] == len("audited")
        assert "audited" not in path.read_text()


def test_no_audit_records_without_configuration(runner, monkeypatch, tmp_path):
    monkeypatch.delenv("SHAMIR257_AUDIT_DIR", raising=False)
    monkeypatch.chdir(tmp_path)
    split_text(runner, "quiet", "2", "2")
    assert not list(tmp_path.iterdir())


def test_combine_deeply_nested_json_exits_with_2(runner):
    result = runner.invoke(cli, ["combine", "--share-json", "[" * 100000])
    assert result.exit_code == 2
    assert "could not be parsed" in result.output
