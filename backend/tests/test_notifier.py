"""Tests for the logging notifier."""

import logging

from person_palace.ui.notifier import LoggingNotifier, Notification


def test_default_variant_logs_info(caplog):
    with caplog.at_level(logging.INFO, logger="person_palace.ui.notifier"):
        LoggingNotifier().notify(Notification(title="Saved!", description="Person was successfully saved."))
    record = caplog.records[-1]
    assert record.levelno == logging.INFO
    assert record.getMessage() == "Saved! Person was successfully saved."


def test_destructive_variant_logs_error(caplog):
    log = logging.getLogger("tests.toasts")
    with caplog.at_level(logging.INFO, logger="tests.toasts"):
        LoggingNotifier(log).notify(
            Notification(title="Error", description="Failed to delete person", variant="destructive")
        )
    assert caplog.records[-1].levelno == logging.ERROR
    assert caplog.records[-1].name == "tests.toasts"
