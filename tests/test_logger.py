import logging

from alertmanager_notifier import logger


def test_setup_logging_sets_level_and_quiets_urllib3() -> None:
    root = logging.getLogger()
    previous = root.level
    try:
        logger.setup_logging("debug")
        assert root.level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.WARNING

        logger.setup_logging("not-a-level")
        assert root.level == logging.INFO
    finally:
        root.setLevel(previous)
