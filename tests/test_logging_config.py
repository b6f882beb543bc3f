import logging

from zengen.logging_config import FILE_ONLY_LOGGERS, setup_logging


def _handlers_by_type(logger):
    return {type(handler): handler for handler in logger.handlers}


def test_setup_logging_installs_console_and_file_handlers(config_factory, tmp_path):
    config = config_factory(log_level="WARNING", file_log_level="DEBUG")

    logger = setup_logging(config)
    try:
        handlers = _handlers_by_type(logger)
        assert logger.name == "zengen"
        assert logger.propagate is False
        assert handlers[logging.StreamHandler].level == logging.WARNING
        assert handlers[logging.FileHandler].level == logging.DEBUG

        logger.debug("file only %s", 1)
        handlers[logging.FileHandler].flush()
        with open(config.log_file, encoding="utf-8") as handle:
            content = handle.read()
        assert "file only 1" in content
        assert "| DEBUG |" in content
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def test_setup_logging_is_idempotent_and_routes_library_loggers(config_factory):
    config = config_factory()

    setup_logging(config)
    logger = setup_logging(config)
    try:
        assert len(logger.handlers) == 2
        file_handler = _handlers_by_type(logger)[logging.FileHandler]
        for name, level in FILE_ONLY_LOGGERS.items():
            library_logger = logging.getLogger(name)
            assert library_logger.level == level
            assert library_logger.propagate is False
            assert library_logger.handlers == [file_handler]
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logging.captureWarnings(False)
