import logging

import pytest

from quotesync.utils.logger import resolve_level, setup_logging


@pytest.fixture()
def restore_root_level():
    root = logging.getLogger()
    saved = root.level
    noisy = {name: logging.getLogger(name).level for name in ("urllib3", "sqlalchemy.engine")}
    try:
        yield
    finally:
        root.setLevel(saved)
        for name, level in noisy.items():
            logging.getLogger(name).setLevel(level)


@pytest.mark.parametrize(
    "level,verbose,expected",
    [
        ("warning", False, logging.WARNING),
        (" DEBUG ", False, logging.DEBUG),
        ("chatty", False, logging.INFO),
        ("ERROR", True, logging.DEBUG),
    ],
)
def test_resolve_level(level, verbose, expected):
    assert resolve_level(level, verbose) == expected


def test_setup_logging_resets_root_level(restore_root_level):
    setup_logging("ERROR")
    assert logging.getLogger().level == logging.ERROR
    assert logging.getLogger("urllib3").level == logging.WARNING

    setup_logging("INFO", verbose=True)
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.DEBUG
