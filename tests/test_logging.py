from __future__ import annotations

import logging

import pytest

from clidoc.logging import configure_logging, get_logger


@pytest.mark.parametrize(
    ("flags", "level"),
    [
        ({}, logging.INFO),
        ({"verbose": True}, logging.DEBUG),
        ({"debug": True}, logging.DEBUG),
        ({"quiet": True}, logging.WARNING),
    ],
)
def test_configure_logging_levels(flags: dict[str, bool], level: int) -> None:
    logger = configure_logging(**flags)

    assert logger.level == level
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)


def test_configure_logging_resets_handlers_and_formats(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging()
    configure_logging(verbose=True)

    get_logger("config").debug("looking for %s", ".clidocrc")

    assert capsys.readouterr().err == "[clidoc] DEBUG looking for .clidocrc\n"
    assert len(logging.getLogger("clidoc").handlers) == 1
