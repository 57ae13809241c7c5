from pathlib import Path

import pytest

from fastuow.command import FastUoWCommand, FastUoWCommandParser
from fastuow.core import TransactionStartFailed


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "setup.cfg").write_text(
        "[fastuow]\nname = shop\ndb_url = sqlite://\n", encoding="utf8"
    )
    return tmp_path


def test_info(project: Path, capsys):
    parser = FastUoWCommandParser(FastUoWCommand(project))

    assert parser.parse_args(["info"]) == 0
    out = capsys.readouterr().out
    assert "shop" in out
    assert "sqlite://" in out


def test_check(project: Path):
    cmd = FastUoWCommand(project)

    assert cmd.check(timeout=10) is True
    assert FastUoWCommandParser(cmd).parse_args(["check"]) == 0


def test_check_reports_database_error(tmp_path: Path, capsys):
    missing = tmp_path / "missing" / "shop.db"
    (tmp_path / "setup.cfg").write_text(
        f"[fastuow]\ndb_url = sqlite:///{missing}\n", encoding="utf8"
    )
    cmd = FastUoWCommand(tmp_path)

    with pytest.raises(TransactionStartFailed):
        cmd.check()

    assert FastUoWCommandParser(cmd).parse_args(["check"]) == 1
    assert "failed to begin transaction" in capsys.readouterr().err


def test_no_args_prints_help(project: Path, capsys):
    parser = FastUoWCommandParser(FastUoWCommand(project))

    assert parser.parse_args([]) == 0
    assert "usage: uow" in capsys.readouterr().out
