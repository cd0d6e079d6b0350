from secure_app.models.enums import LogCategory, LogLevel
from secure_app.utils.logger import (
    configure_logger,
    get_category_logger,
    get_logger,
    Logger,
)


def test_configure_keeps_singleton():
    before = get_logger()
    configure_logger(LogLevel.WARN, use_colors=False)

    assert get_logger() is before
    assert before.min_level == LogLevel.WARN


def test_sinks_receive_records_above_min_level():
    logger = Logger(min_level=LogLevel.INFO, use_colors=False)
    records = []
    logger.add_sink(records.append)

    logger.debug(LogCategory.STATE, "hidden")
    logger.info(LogCategory.STATE, "Locked", secured=True)

    assert [r.message for r in records] == ["Locked"]
    assert records[0].details == ("secured: True",)

    logger.remove_sink(records.append)
    logger.info(LogCategory.STATE, "Unlocked")
    assert len(records) == 1


def test_bound_logger_category_override(log_records):
    log = get_category_logger(LogCategory.LIFECYCLE)

    log.info("Foreground")
    log.warn("Overridden", category=LogCategory.AUTH)
    log.with_category(LogCategory.NATIVE).debug("Overlay")

    assert [r.category for r in log_records] == [
        LogCategory.LIFECYCLE,
        LogCategory.AUTH,
        LogCategory.NATIVE,
    ]
    assert log_records[1].level == LogLevel.WARN


def test_console_format(capsys):
    logger = Logger(min_level=LogLevel.DEBUG, use_colors=False)

    logger.info(LogCategory.AUTH, "Authentication finished", status="SUCCESS", locked=False)

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].endswith("AUTH      ✓ Authentication finished")
    assert lines[1].strip() == "├─ status: SUCCESS"
    assert lines[2].strip() == "└─ locked: False"
