# =============================================================================
# STRUCTURED JSON LOGGING SYSTEM
# =============================================================================
# JSON-formatted event logs for the translation pipeline
#
# - JSON lines file for machine processing
# - Human-readable console output
# - Event helpers for translation, cache and upstream calls
# - Operation timing context manager
# =============================================================================

import json
import os
import time
import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from pathlib import Path
from contextlib import contextmanager

class StructuredFormatter(logging.Formatter):
    """Custom formatter that outputs JSON structured logs"""
    
    def __init__(self):
        super().__init__()
        self.hostname = "nest-translator"
        
    def format(self, record):
        """Format log record as JSON structure"""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread": threading.current_thread().name,
            "hostname": self.hostname
        }
        
        # Add structured data if available
        if hasattr(record, 'structured_data'):
            log_entry.update(record.structured_data)
        
        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info)
            }
        
        return json.dumps(log_entry, ensure_ascii=False, default=str)

class StructuredLogger:
    """
    Logger that supports both traditional and structured JSON logging
    
    Every keyword passed to info/warning/error/debug ends up as a field
    of the JSON line, next to the standard record attributes.
    """
    
    def __init__(self, name="nest_translator.events", enable_json=True, log_dir=None):
        self.logger_name = name
        self.enable_json = enable_json
        self.log_dir = Path(log_dir or os.getenv('LOG_DIR', 'logs'))
        self.log_dir.mkdir(exist_ok=True)
        
        self.logger = logging.getLogger(name)
        self.logger.propagate = False
        if not self.logger.handlers:  # Avoid duplicate handlers
            self._setup_handlers()
        
    def _setup_handlers(self):
        """Set up logging handlers for both JSON and human-readable output"""
        self.logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
        
        today = datetime.now().strftime('%Y-%m-%d')
        
        if self.enable_json:
            json_handler = logging.FileHandler(self.log_dir / f'nest_translator_{today}.json')
            json_handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(json_handler)
        
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        self.logger.addHandler(console_handler)
    
    def _create_structured_record(self, level: str, message: str, **structured_data):
        """Create a log record with structured data"""
        enriched_data = {
            "event_id": f"{int(time.time() * 1000)}_{threading.current_thread().ident}",
            "service": "nest_translator",
            **structured_data
        }
        
        record = self.logger.makeRecord(
            name=self.logger.name,
            level=getattr(logging, level.upper()),
            fn='',
            lno=0,
            msg=message,
            args=(),
            exc_info=None
        )
        record.structured_data = enriched_data
        
        return record
    
    def _log(self, level: str, message: str, **structured_data):
        if not self.logger.isEnabledFor(getattr(logging, level)):
            return
        if structured_data:
            self.logger.handle(self._create_structured_record(level, message, **structured_data))
        else:
            self.logger.log(getattr(logging, level), message)
    
    def info(self, message: str, **structured_data):
        """Log info message with optional structured data"""
        self._log("INFO", message, **structured_data)
    
    def warning(self, message: str, **structured_data):
        """Log warning message with optional structured data"""
        self._log("WARNING", message, **structured_data)
    
    def error(self, message: str, **structured_data):
        """Log error message with optional structured data"""
        self._log("ERROR", message, **structured_data)
    
    def debug(self, message: str, **structured_data):
        """Log debug message with optional structured data"""
        self._log("DEBUG", message, **structured_data)
    
    # Structured logging methods for specific events
    
    def log_translation_success(self, post_id: str, cache_hit: bool,
                               duration_ms: float, content_length: int = 0):
        """Log successful translation"""
        self.info(
            f"Translation completed: {post_id}",
            event="translation_success",
            post_id=post_id,
            cache_hit=cache_hit,
            duration_ms=round(duration_ms, 2),
            content_length=content_length,
            api_call_saved=cache_hit
        )
    
    def log_translation_failure(self, post_id: str, error_type: str, error_message: str):
        """Log translation failure"""
        self.error(
            f"Translation failed: {post_id}",
            event="translation_failed",
            post_id=post_id,
            error_type=error_type,
            error_message=error_message
        )
    
    def log_malformed_reply(self, post_id: str, reply_length: int):
        """Log a reply with no recognizable header lines"""
        self.warning(
            f"Translation reply had no header lines: {post_id}",
            event="malformed_reply",
            post_id=post_id,
            reply_length=reply_length,
            fallback="source_title_subtitle"
        )
    
    def log_cache_performance(self, hit_rate: float, total_requests: int, cache_size: int):
        """Log cache performance metrics"""
        self.info(
            f"Cache performance: {hit_rate:.1f}% hit rate",
            event="cache_performance",
            hit_rate_percent=round(hit_rate, 2),
            total_requests=total_requests,
            cache_size=cache_size
        )
    
    @contextmanager
    def time_operation(self, operation_name: str, **context):
        """Context manager to time operations and log performance"""
        start_time = time.time()
        operation_id = f"{operation_name}_{int(start_time * 1000)}"
        
        self.debug(
            f"Operation started: {operation_name}",
            event="operation_start",
            operation=operation_name,
            operation_id=operation_id,
            **context
        )
        
        try:
            yield operation_id
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.error(
                f"Operation failed: {operation_name} after {duration_ms:.2f}ms",
                event="operation_failed",
                operation=operation_name,
                operation_id=operation_id,
                duration_ms=round(duration_ms, 2),
                success=False,
                error_type=type(e).__name__,
                error_message=str(e),
                **context
            )
            raise
        
        duration_ms = (time.time() - start_time) * 1000
        self.info(
            f"Operation completed: {operation_name} ({duration_ms:.2f}ms)",
            event="operation_completed",
            operation=operation_name,
            operation_id=operation_id,
            duration_ms=round(duration_ms, 2),
            success=True,
            **context
        )

# Global structured logger instance
structured_logger = StructuredLogger()

def log_gemini_api_call(post_id: str, prompt_tokens: int, response_tokens: int,
                       duration_ms: float):
    """Log Gemini API call details"""
    structured_logger.info(
        f"Gemini API call completed: {post_id}",
        event="gemini_api_call",
        post_id=post_id,
        prompt_tokens=prompt_tokens,
        response_tokens=response_tokens,
        duration_ms=round(duration_ms, 2)
    )
