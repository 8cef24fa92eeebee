"""
Tests for logging infrastructure.
"""

import logging
import json

import pytest

from blobsigner.core.config_manager import LoggingConfig
from blobsigner.core.logging_config import (
    setup_logging,
    apply_logging_config,
    log_with_context,
    JSONFormatter,
    SensitiveDataFilter,
    _parse_size
)


def _record(msg: str, level: int = logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=exc_info
    )


class TestLoggingSetup:
    """Test suite for logging setup."""
    
    def test_setup_logging_defaults(self):
        """Test setting up logging with defaults."""
        setup_logging()
        
        root_logger = logging.getLogger()
        assert root_logger.level == logging.INFO
        assert len(root_logger.handlers) > 0
    
    def test_setup_logging_with_level(self):
        """Test setting up logging with custom level."""
        setup_logging(level="DEBUG")
        
        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
    
    def test_setup_logging_with_file(self, tmp_path):
        """Test setting up logging with file output."""
        log_file = tmp_path / "logs" / "signer.log"
        setup_logging(log_file=str(log_file))
        
        logger = logging.getLogger(__name__)
        logger.info("Test message")
        
        assert log_file.exists()
        content = log_file.read_text()
        assert "Test message" in content
    
    def test_file_output_is_redacted(self, tmp_path):
        """Test that signatures never reach the log file."""
        log_file = tmp_path / "signer.log"
        setup_logging(format_type="text", log_file=str(log_file))
        
        logging.getLogger(__name__).info("GET https://a.blob.core.windows.net/c/b?sp=r&sig=c2VjcmV0")
        
        content = log_file.read_text()
        assert "c2VjcmV0" not in content
        assert "sig=***REDACTED***" in content
    
    def test_setup_logging_with_module_levels(self):
        """Test setting up logging with per-module log levels."""
        setup_logging(
            level="INFO",
            module_levels={
                "test.module.debug": "DEBUG",
                "test.module.error": "ERROR"
            }
        )
        
        root_logger = logging.getLogger()
        assert root_logger.level == logging.INFO
        
        assert logging.getLogger("test.module.debug").level == logging.DEBUG
        assert logging.getLogger("test.module.error").level == logging.ERROR


class TestApplyLoggingConfig:
    """Test suite for applying the loaded logging section."""
    
    def test_level_and_file(self, tmp_path):
        """Test that level, file and format come from the config."""
        log_file = tmp_path / "signer.log"
        config = LoggingConfig(level="DEBUG", format="json", file=str(log_file))
        
        apply_logging_config(config)
        logging.getLogger("blobsigner.test").debug("Configured from file")
        
        assert logging.getLogger().level == logging.DEBUG
        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["message"] == "Configured from file"
    
    def test_module_levels(self):
        """Test that per-module levels come from the config."""
        config = LoggingConfig(level="WARNING", module_levels={"blobsigner.blob.signer": "DEBUG"})
        
        apply_logging_config(config)
        
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("blobsigner.blob.signer").level == logging.DEBUG
        logging.getLogger("blobsigner.blob.signer").setLevel(logging.NOTSET)


class TestJSONFormatter:
    """Test suite for JSON formatter."""
    
    def test_format_basic_message(self):
        """Test formatting a basic log message."""
        data = json.loads(JSONFormatter().format(_record("Test message")))
        
        assert data["level"] == "INFO"
        assert data["module"] == "test"
        assert data["message"] == "Test message"
        assert "timestamp" in data
    
    def test_format_with_context(self):
        """Test that context attached by log_with_context is rendered."""
        record = _record("Signed GET request")
        record.context = {"resource": "/blob/a/c/b", "permission": "r"}
        
        data = json.loads(JSONFormatter().format(record))
        
        assert data["context"] == {"resource": "/blob/a/c/b", "permission": "r"}
    
    def test_format_with_exception(self):
        """Test formatting with exception info."""
        try:
            raise ValueError("Test error")
        except ValueError:
            import sys
            record = _record("Error occurred", logging.ERROR, sys.exc_info())
        
        data = json.loads(JSONFormatter().format(record))
        
        assert "ValueError" in data["exception"]
        assert "Test error" in data["exception"]


class TestSensitiveDataFilter:
    """Test suite for sensitive data filter."""
    
    @pytest.mark.parametrize("message,secret", [
        ("Authorization: SharedKey myaccount:c2lnbmF0dXJl", "c2lnbmF0dXJl"),
        ("DefaultEndpointsProtocol=https;AccountName=test;AccountKey=secretkey123;", "secretkey123"),
        ('{"account_key": "a2V5a2V5"}', "a2V5a2V5"),
        ("?sv=2017-04-17&sig=base64signature&se=2025-12-31", "base64signature"),
        ("BlobEndpoint=x;SharedAccessSignature=sv=1&sig=abc", "abc"),
    ])
    def test_redaction(self, message, secret):
        record = _record(message)
        
        SensitiveDataFilter().filter(record)
        
        assert secret not in record.msg
        assert "***REDACTED***" in record.msg
    
    def test_plain_message_untouched(self):
        record = _record("Signed DELETE request for /blob/a/c/b")
        
        SensitiveDataFilter().filter(record)
        
        assert record.msg == "Signed DELETE request for /blob/a/c/b"


class TestLogWithContext:
    """Test suite for log_with_context."""
    
    def test_context_attached(self, caplog):
        logger = logging.getLogger("test.context")
        
        with caplog.at_level(logging.INFO, logger="test.context"):
            log_with_context(logger, logging.INFO, "Test message", resource="/blob/a/c/b")
        
        assert caplog.records[-1].context == {"resource": "/blob/a/c/b"}
    
    def test_no_context(self, caplog):
        logger = logging.getLogger("test.context")
        
        with caplog.at_level(logging.INFO, logger="test.context"):
            log_with_context(logger, logging.INFO, "Bare message")
        
        assert not hasattr(caplog.records[-1], "context")


class TestParseSize:
    """Test suite for size parsing."""
    
    @pytest.mark.parametrize("value,expected", [
        ("100", 100),
        ("512B", 512),
        ("1KB", 1024),
        ("10MB", 10 * 1024 ** 2),
        ("1.5GB", int(1.5 * 1024 ** 3)),
    ])
    def test_parse(self, value, expected):
        assert _parse_size(value) == expected
