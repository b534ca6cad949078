from pythonjsonlogger.json import JsonFormatter

from src.logging_config import get_logger


def test_logger_is_configured_once_with_json_output():
    logger = get_logger('tests.logging')

    assert get_logger('tests.logging') is logger
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JsonFormatter)
    assert logger.propagate is False
