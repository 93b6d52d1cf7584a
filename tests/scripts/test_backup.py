from __future__ import annotations

import subprocess

import pytest

from scripts import backup

DB = {"host": "db", "port": 3307, "user": "fin", "password": "pw", "database": "finstrava"}


def test_dump_command_keeps_password_off_the_command_line():
    cmd = backup.dump_command(DB)

    assert cmd[0] == "mysqldump"
    assert cmd[-1] == "finstrava"
    assert "--routines" in cmd
    assert not any("pw" in part for part in cmd)


def test_successful_dump_is_written(tmp_path, monkeypatch):
    seen = {}

    def fake_run(cmd, stdout, stderr, env, check):
        seen["pwd"] = env["MYSQL_PWD"]
        stdout.write(b"-- dump\n")

    monkeypatch.setattr(backup.subprocess, "run", fake_run)
    target = backup.run_backup(DB, tmp_path)

    assert target.parent == tmp_path
    assert target.name.startswith("finstrava_")
    assert target.read_bytes() == b"-- dump\n"
    assert seen["pwd"] == "pw"


def test_failed_dump_removes_partial_file(tmp_path, monkeypatch):
    def fake_run(cmd, stdout, stderr, env, check):
        stdout.write(b"-- partial")
        raise subprocess.CalledProcessError(2, cmd, stderr=b"Access denied for user 'fin'")

    monkeypatch.setattr(backup.subprocess, "run", fake_run)
    with pytest.raises(SystemExit) as exc:
        backup.run_backup(DB, tmp_path)

    assert "Access denied for user 'fin'" in str(exc.value)
    assert list(tmp_path.iterdir()) == []


def test_missing_mysqldump_is_reported(tmp_path, monkeypatch):
    def fake_run(*args, **kwargs):
        raise FileNotFoundError("mysqldump")

    monkeypatch.setattr(backup.subprocess, "run", fake_run)
    with pytest.raises(SystemExit, match="mysqldump not found"):
        backup.run_backup(DB, tmp_path)
    assert list(tmp_path.iterdir()) == []
