import logging

from uvicorn.logging import DefaultFormatter


def get_logger(name: str, log_level=logging.INFO):
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(log_level)
        ch = logging.StreamHandler()
        ch.setFormatter(DefaultFormatter(fmt="%(levelprefix)s %(message)s"))
        logger.addHandler(ch)

    return logger


def set_log_level(log_level) -> None:
    """``fastuow`` 로 시작하는 모든 로거의 레벨을 변경합니다."""
    for name in list(logging.root.manager.loggerDict):
        if name == "fastuow" or name.startswith("fastuow."):
            logging.getLogger(name).setLevel(log_level)
