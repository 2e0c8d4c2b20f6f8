# =============================================================================
# STRUCTURED LOGGING TESTS
# =============================================================================

import pytest
import sys
import os
import json
import tempfile
import logging
from pathlib import Path
from unittest.mock import patch
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nest_translator.utils.structured_logger import (
    StructuredLogger, StructuredFormatter, log_gemini_api_call
)

class TestStructuredFormatter:
    def setup_method(self):
        self.formatter = StructuredFormatter()
    
    def _record(self, msg="Test message"):
        return logging.LogRecord(
            name="test_logger",
            level=logging.INFO,
            pathname="test.py",
            lineno=42,
            msg=msg,
            args=(),
            exc_info=None
        )
    
    def test_basic_json_formatting(self):
        log_data = json.loads(self.formatter.format(self._record()))
        
        assert log_data["level"] == "INFO"
        assert log_data["message"] == "Test message"
        assert log_data["logger"] == "test_logger"
        assert log_data["line"] == 42
        assert "timestamp" in log_data
    
    def test_structured_data_inclusion(self):
        record = self._record()
        record.structured_data = {"event": "translation_success", "post_id": "/p/hola", "duration_ms": 12.5}
        
        log_data = json.loads(self.formatter.format(record))
        
        assert log_data["event"] == "translation_success"
        assert log_data["post_id"] == "/p/hola"
        assert log_data["duration_ms"] == 12.5
    
    def test_non_ascii_is_kept(self):
        log_data = json.loads(self.formatter.format(self._record("Título traducido")))
        assert log_data["message"] == "Título traducido"
    
    def test_exception_formatting(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = self._record()
            record.exc_info = sys.exc_info()
        
        log_data = json.loads(self.formatter.format(record))
        assert log_data["exception"]["type"] == "ValueError"
        assert log_data["exception"]["message"] == "bad value"

class TestStructuredLogger:
    def setup_method(self):
        self.log_dir = Path(tempfile.mkdtemp())
        self.logger = StructuredLogger(name=f"test.events.{id(self)}", log_dir=self.log_dir)
        self.logger.logger.setLevel(logging.DEBUG)
    
    def teardown_method(self):
        for handler in list(self.logger.logger.handlers):
            handler.close()
            self.logger.logger.removeHandler(handler)
        import shutil
        shutil.rmtree(self.log_dir, ignore_errors=True)
    
    def _json_lines(self):
        lines = []
        for path in self.log_dir.glob('*.json'):
            lines.extend(json.loads(line) for line in path.read_text(encoding='utf-8').splitlines() if line)
        return lines
    
    def test_translation_success_event(self):
        self.logger.log_translation_success("/p/a", cache_hit=True, duration_ms=3.14159, content_length=120)
        
        entry = self._json_lines()[-1]
        assert entry["event"] == "translation_success"
        assert entry["post_id"] == "/p/a"
        assert entry["cache_hit"] is True
        assert entry["api_call_saved"] is True
        assert entry["duration_ms"] == 3.14
        assert entry["service"] == "nest_translator"
    
    def test_translation_failure_event(self):
        self.logger.log_translation_failure("/p/a", "GeminiUnavailableError", "503")
        
        entry = self._json_lines()[-1]
        assert entry["level"] == "ERROR"
        assert entry["event"] == "translation_failed"
        assert entry["error_type"] == "GeminiUnavailableError"
    
    def test_malformed_reply_event(self):
        self.logger.log_malformed_reply("/p/a", 42)
        
        entry = self._json_lines()[-1]
        assert entry["level"] == "WARNING"
        assert entry["event"] == "malformed_reply"
        assert entry["reply_length"] == 42
    
    def test_time_operation_success(self):
        with self.logger.time_operation("fetch_post", slug="a") as operation_id:
            assert operation_id.startswith("fetch_post_")
        
        events = [e.get("event") for e in self._json_lines()]
        assert "operation_start" in events
        assert "operation_completed" in events
    
    def test_time_operation_failure_reraises(self):
        with pytest.raises(RuntimeError):
            with self.logger.time_operation("fetch_post"):
                raise RuntimeError("boom")
        
        entry = self._json_lines()[-1]
        assert entry["event"] == "operation_failed"
        assert entry["error_type"] == "RuntimeError"
        assert entry["success"] is False
    
    def test_plain_message_without_fields(self):
        self.logger.info("plain")
        entry = self._json_lines()[-1]
        assert entry["message"] == "plain"
        assert "event" not in entry

class TestModuleHelpers:
    @patch('nest_translator.utils.structured_logger.structured_logger')
    def test_log_gemini_api_call(self, mock_logger):
        log_gemini_api_call("/p/a", prompt_tokens=10, response_tokens=20, duration_ms=123.456)
        
        args, kwargs = mock_logger.info.call_args
        assert kwargs["event"] == "gemini_api_call"
        assert kwargs["post_id"] == "/p/a"
        assert kwargs["duration_ms"] == 123.46
