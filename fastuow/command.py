"""Command line script for FastUoW."""
import os
import sys
from argparse import ArgumentParser, Namespace, RawTextHelpFormatter
from pathlib import Path
from textwrap import dedent
from typing import Optional, Sequence

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from fastuow.config import FastUoW
from fastuow.core import Context, FastUoWError
from fastuow.logging import get_logger, set_log_level
from fastuow.uow import UnitOfWork
from fastuow.utils import Fore, bold, fg

YELLOW, CYAN, RED, GREEN, WHITE = (
    Fore.YELLOW,
    Fore.CYAN,
    Fore.RED,
    Fore.GREEN,
    Fore.WHITE,
)
WHITE_EX, CYAN_EX = Fore.LIGHTWHITE_EX, Fore.LIGHTCYAN_EX


logger = get_logger("fastuow.command")


class PingRepository:
    """연결 확인용 레포지터리."""

    def __init__(self, tx):
        self.session = tx.session

    def ping(self) -> int:
        return self.session.execute(text("SELECT 1")).scalar()


class FastUoWCommand:
    def __init__(self, path: Optional[Path] = None):
        """현재 경로의 ``setup.cfg`` 에서 설정을 읽습니다."""
        self.path = Path(os.path.abspath(path or "."))
        self.config = FastUoW.load_from_config(self.path)
        set_log_level(self.config.log_level)

    def info(self):
        """FastUoW 설정 정보를 출력합니다."""
        dot = bold("-", YELLOW)
        print(bold("FastUoW Information"))
        print(dot, fg("Name", CYAN), "     :", fg(self.config.name, WHITE_EX))
        print(dot, fg("Database", CYAN), " :", fg(self.config.get_db_url(), WHITE_EX))
        print(
            dot,
            fg("Isolation", CYAN),
            ":",
            fg(self.config.isolation_level or "default", WHITE_EX),
        )
        print(dot, fg("Path", CYAN), "     :", fg(self.path, WHITE_EX))

    def check(self, timeout: Optional[float] = None) -> bool:
        """DB 에 트랜잭션을 시작하고 롤백해서 연결을 확인합니다.

        실제 데이터는 변경하지 않습니다. DB 에 연결할 수 없으면
        :class:`TransactionStartFailed` 를 발생시킵니다.
        """
        bullet = bold("✓" if os.name != "nt" else "v", GREEN)
        ctx = Context(timeout=timeout)
        uow = UnitOfWork.from_config(self.config)
        uow.register("ping", PingRepository)

        def ping(uow: UnitOfWork):
            result = uow.get_repository(ctx, "ping").ping()
            uow.rollback()
            return result

        try:
            result = uow.do(ctx, ping)
        except SQLAlchemyError as e:
            raise FastUoWError(f"database check failed: {e}") from e

        logger.info(
            f"{bullet} transaction on {fg(self.config.get_db_url(), CYAN)}... %s",
            bold("ok" if result == 1 else "unexpected result", YELLOW),
        )
        return result == 1


class FastUoWCommandParser:
    """콘솔 커맨드 명령어 파서.

    실제 작업은 `FastUoWCommand` 객체에 위임합니다.
    """

    def __init__(self, cmd: Optional[FastUoWCommand] = None):
        """기본 생성자."""
        self.parser = ArgumentParser(
            "uow",
            description=f"✨ {bold('FastUoW')} : {fg('command line utility', CYAN_EX)}",
        )
        self._subparsers = self.parser.add_subparsers(dest="command")
        self._cmd = cmd or FastUoWCommand()

        for handler in [self._cmd.info, self._cmd.check]:
            command = handler.__name__
            # 핸들러 함수의 주석을 커맨드라인 도움말로 변환하기 위한 작업입니다.
            doc = None
            if handler.__doc__:
                lines = handler.__doc__.splitlines()
                doc = lines[0] + "\n" + dedent("\n".join(lines[1:]))
            parser = self._subparsers.add_parser(
                command,
                description=doc,
                formatter_class=RawTextHelpFormatter,
            )
            if command == "check":
                parser.add_argument(
                    "--timeout", type=float, default=None, help="트랜잭션 시작 제한 시간(초)"
                )

    def parse_args(self, args: Sequence[str]) -> int:
        """콘솔 명령어를 해석해서 적절한 작업을 수행합니다."""
        if not args:
            self.parser.print_help()
            return 0

        ns = self.parser.parse_args(args)
        try:
            if hasattr(self, ns.command):
                getattr(self, ns.command)(ns)
            else:
                getattr(self._cmd, ns.command)()
        except FastUoWError as e:
            print(
                f"{bold('FastUoW ERROR:', RED)} {fg(e.message, YELLOW)}",
                file=sys.stderr,
            )
            return 1
        return 0

    def check(self, ns: Namespace):
        """`check` 명령어 처리."""
        if not self._cmd.check(timeout=ns.timeout):
            raise FastUoWError("database check returned an unexpected result")


def console_main():
    try:
        parser = FastUoWCommandParser()
    except FastUoWError as e:
        print(f"{bold('FastUoW ERROR:', RED)} {fg(e.message, YELLOW)}", file=sys.stderr)
        sys.exit(1)
    sys.exit(parser.parse_args(sys.argv[1:]))


if __name__ == "__main__":
    console_main()
