"""
Tests for logging configuration.
"""
import json
import logging
import pytest
from sqompare.logging_config import ColoredFormatter, JSONFormatter, get_logger, record_context, setup_logging


def _record(level=logging.INFO, msg='Test message'):
    return logging.LogRecord(
        name='test', level=level, pathname='', lineno=0,
        msg=msg, args=(), exc_info=None
    )


class TestLoggingConfig:
    """Test logging configuration."""

    def test_setup_logging_default(self):
        logger = setup_logging(verbose=0)
        assert logger.level == logging.WARNING

    def test_setup_logging_verbose(self):
        logger = setup_logging(verbose=1)
        assert logger.level == logging.INFO

    def test_setup_logging_debug(self):
        logger = setup_logging(verbose=3)
        assert logger.level == logging.DEBUG

    def test_setup_logging_negative_verbosity(self):
        logger = setup_logging(verbose=-1)
        assert logger.level == logging.WARNING

    def test_setup_logging_json_format(self):
        logger = setup_logging(verbose=1, log_format='json')
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_setup_logging_no_color(self):
        logger = setup_logging(verbose=1, log_format='text', no_color=True)
        formatter = logger.handlers[0].formatter
        assert isinstance(formatter, ColoredFormatter)
        assert formatter.use_color is False

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging(verbose=1)
        logger = setup_logging(verbose=1)
        assert len(logger.handlers) == 1

    def test_get_logger_default(self):
        assert get_logger().name == 'sqompare'

    def test_get_logger_with_name(self):
        assert get_logger('parser').name == 'sqompare.parser'


class TestJSONFormatter:
    """Test JSON log formatter."""

    def test_basic_format(self):
        output = json.loads(JSONFormatter().format(_record()))
        assert output['message'] == 'Test message'
        assert output['level'] == 'INFO'
        assert output['timestamp'].endswith('Z')

    def test_format_with_extras(self):
        record = _record()
        record.table_name = 'users'
        record.operation = 'compare'
        record.source = 'Database 1'
        output = json.loads(JSONFormatter().format(record))
        assert output['table_name'] == 'users'
        assert output['operation'] == 'compare'
        assert output['source'] == 'Database 1'
        assert 'file_path' not in output

    def test_format_with_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = logging.LogRecord(
                name='test', level=logging.ERROR, pathname='', lineno=0,
                msg='failed', args=(), exc_info=sys.exc_info()
            )
        output = json.loads(JSONFormatter().format(record))
        assert 'ValueError: boom' in output['exception']


class TestColoredFormatter:
    """Test colored log formatter."""

    def test_format_with_color(self):
        output = ColoredFormatter(use_color=True).format(_record(logging.ERROR, 'Error message'))
        assert output.startswith('\033[31m[ERROR]')
        assert 'Error message' in output

    def test_format_without_color(self):
        output = ColoredFormatter(use_color=False).format(_record(msg='Info message'))
        assert output == '[INFO] Info message'

    def test_context_suffix(self):
        record = _record(msg='Parsed')
        record.table_name = 'users'
        record.file_path = 'a.sql'
        output = ColoredFormatter(use_color=False).format(record)
        assert output == '[INFO] Parsed [table=users, file=a.sql]'

    def test_context_follows_field_order(self):
        record = _record(msg='Read')
        record.file_path = 'a.sql'
        record.operation = 'read'
        output = ColoredFormatter(use_color=False).format(record)
        assert output == '[INFO] Read [op=read, file=a.sql]'


class TestRecordContext:
    def test_only_present_fields(self):
        record = _record()
        record.source = 'Database 2'
        assert record_context(record) == {'source': 'Database 2'}

    def test_no_context(self):
        assert record_context(_record()) == {}
