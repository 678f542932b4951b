from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from rapid_dev import cli
from rapid_dev.cli import main


def test_name_prints_canonical_name(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["name", "--project", "Ecom", "--service", "Order", "--type", "API"])
    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.out.strip() == "ecom-order-api"


def test_name_reports_every_violation(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["name", "--repo", "MyApp v1"])
    captured = capsys.readouterr()
    assert exit_code == 1
    assert 'Repo name "myapp-v1" violates rules:' in captured.err
    assert '- Avoid versioning/placeholder token: "v1".' in captured.err
    assert '- Avoid version token: "v1".' in captured.err


def test_check_accepts_and_rejects(capsys: pytest.CaptureFixture[str]):
    assert main(["check", "my-app"]) == 0
    assert "my-app: ok" in capsys.readouterr().out

    assert main(["check", "my_app"]) == 1
    err = capsys.readouterr().err
    assert "- Use only lowercase letters, numbers, and hyphens." in err
    assert "- No uppercase, underscores, or spaces." in err


def test_doctor_reports_missing_tools(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.setattr("rapid_dev.tooling.shutil.which", lambda command: None)
    exit_code = main(["doctor"])
    captured = capsys.readouterr()
    assert exit_code == 1
    assert "pkgmgr=none" in captured.out
    assert "gh auth status" in captured.out
    assert "Missing required CLIs: git, node, npm, gh, netlify, gcloud, flutter" in captured.err


def test_doctor_install_dry_run(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.setattr("rapid_dev.tooling.shutil.which", lambda command: f"/usr/bin/{command}")
    exit_code = main(["doctor", "--install", "--dry-run"])
    captured = capsys.readouterr()
    assert exit_code == 0
    assert "> npm install -g netlify-cli@latest" in captured.out
    assert "> flutter upgrade" in captured.out


def test_doctor_dry_run_implies_install(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.setattr("rapid_dev.tooling.shutil.which", lambda command: f"/usr/bin/{command}")
    exit_code = main(["doctor", "--dry-run"])
    captured = capsys.readouterr()
    assert exit_code == 0
    assert "> npm install -g netlify-cli@latest" in captured.out
    assert "> flutter upgrade" in captured.out
    assert "Versions:" not in captured.out


def _fake_run(failing):
    def run(args, **kwargs):
        command = (Path(args[0]).name, *args[1:])
        return subprocess.CompletedProcess(args, 1 if failing(command) else 0)

    return run


def test_doctor_install_continues_after_failed_upgrade(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    monkeypatch.setattr("rapid_dev.tooling.shutil.which", lambda command: f"/usr/bin/{command}")
    monkeypatch.setattr(cli, "detect_package_manager", lambda: "winget")
    monkeypatch.setattr(
        "rapid_dev.runner.subprocess.run",
        _fake_run(lambda command: command[:2] == ("winget", "upgrade")),
    )

    exit_code = main(["doctor", "--install"])
    captured = capsys.readouterr()
    assert exit_code == 0
    assert "> winget upgrade --id Git.Git -e --source winget" in captured.out
    assert "> flutter upgrade" in captured.out
    assert "> pipx upgrade aider-chat" in captured.out
    assert "Tools:" in captured.out
    assert "ERROR" not in captured.err


def test_doctor_install_fails_when_required_install_fails(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    monkeypatch.setattr(
        "rapid_dev.tooling.shutil.which",
        lambda command: None if command == "gh" else f"/usr/bin/{command}",
    )
    monkeypatch.setattr(cli, "detect_package_manager", lambda: "winget")
    monkeypatch.setattr(
        "rapid_dev.runner.subprocess.run",
        _fake_run(lambda command: command[:2] == ("winget", "install")),
    )

    exit_code = main(["doctor", "--install"])
    captured = capsys.readouterr()
    assert exit_code == 1
    assert "> winget install --id GitHub.cli -e --source winget" in captured.out
    assert "ERROR: Command failed with exit code 1" in captured.err
    assert "Tools:" not in captured.out


def test_doctor_prints_versions_and_skips_failures(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    monkeypatch.setattr("rapid_dev.tooling.shutil.which", lambda command: f"/usr/bin/{command}")
    monkeypatch.setattr(
        "rapid_dev.runner.subprocess.run",
        _fake_run(lambda command: command == ("gcloud", "--version")),
    )

    exit_code = main(["doctor"])
    captured = capsys.readouterr()
    assert exit_code == 0
    assert "Versions:" in captured.out
    assert "> git --version" in captured.out
    assert "> gcloud --version" in captured.out
    assert "> flutter --version" in captured.out
    assert "> aider --version" in captured.out


def test_new_files_only(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "out"
    exit_code = main(
        ["new", "--project", "shop", "--description", "web", "--files-only", "--dir", str(target)]
    )
    assert exit_code == 0
    assert (target / "functions" / "api" / "package.json").exists()
    assert "Scaffold written to" in capsys.readouterr().out


def test_new_dry_run_uses_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".rapid-dev.json").write_text(
        '{"defaults": {"org": "acme", "private": true, "netlify": true}}', encoding="utf-8"
    )
    exit_code = main(["new", "--team", "data", "--component", "etl", "--dry-run"])
    out = capsys.readouterr().out
    assert exit_code == 0
    assert "gh repo create acme/data-etl --private --clone" in out
    assert "> cd " in out and "netlify link" in out
    assert "Created repo: acme/data-etl" in out
    assert "  node scripts/zip-flutter.mjs" in out
    assert not (tmp_path / "data-etl").exists()


def test_new_rejects_invalid_name(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.chdir(tmp_path)
    exit_code = main(["new", "--project", "app", "--description", "latest", "--dry-run"])
    captured = capsys.readouterr()
    assert exit_code == 1
    assert 'Repo name "app-latest" violates rules:' in captured.err
    assert 'Avoid versioning/placeholder token: "latest".' in captured.err


def test_new_requires_tools(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("rapid_dev.tooling.shutil.which", lambda command: None)
    exit_code = main(["new", "--project", "shop", "--description", "web"])
    assert exit_code == 1
    assert "Missing required CLI: git." in capsys.readouterr().err


def test_new_files_only_refuses_to_overwrite(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
    monkeypatch.chdir(tmp_path)
    args = ["new", "--repo", "shop-web", "--files-only"]
    assert main(args) == 0
    assert main(args) == 1
    assert "already exists" in capsys.readouterr().err
    assert main([*args, "--force"]) == 0


def test_verbosity_levels(monkeypatch: pytest.MonkeyPatch):
    levels: list[int] = []
    monkeypatch.setattr(cli.logging, "basicConfig", lambda **kwargs: levels.append(kwargs["level"]))
    main(["check", "my-app"])
    main(["-v", "check", "my-app"])
    main(["-vv", "check", "my-app"])
    assert levels == [cli.logging.WARNING, cli.logging.INFO, cli.logging.DEBUG]
