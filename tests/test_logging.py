"""Tests for content_qa.logging_config."""

import logging

from content_qa.logging_config import PACKAGE_LOGGERS, setup_logging


class TestSetupLogging:
    def test_configures_every_package_logger(self):
        root = setup_logging("DEBUG")

        assert root.name == "content_qa"
        for name in PACKAGE_LOGGERS:
            logger = logging.getLogger(name)
            assert logger.level == logging.DEBUG
            assert len(logger.handlers) == 1
            assert logger.propagate is False

    def test_repeated_calls_do_not_duplicate_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("vector_store").handlers) == 1

    def test_unknown_level_defaults_to_info(self):
        setup_logging("chatty")
        assert logging.getLogger("retrieval").level == logging.INFO

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "qa.log"
        setup_logging(logging.INFO, log_file=log_file)

        logging.getLogger("generation.service").info("answer produced")
        for handler in logging.getLogger("generation").handlers:
            handler.flush()

        assert "generation.service - INFO - answer produced" in log_file.read_text(encoding="utf-8")
