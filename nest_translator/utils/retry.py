# =============================================================================
# RETRY LOGIC WITH EXPONENTIAL BACKOFF
# =============================================================================
# Retries transient upstream failures before they surface to the caller

import time
import random
import functools
from typing import Type, Tuple, Callable, Any, Optional
from ..utils.structured_logger import structured_logger


class RetryConfig:
    """Configuration for retry behavior"""
    
    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
        jitter_range: float = 0.1
    ):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self.jitter_range = jitter_range


def calculate_delay(attempt: int, config: RetryConfig, retry_after: Optional[float] = None) -> float:
    """
    Calculate delay for a given attempt with exponential backoff and jitter.
    
    A wait requested by the server (retry_after) replaces the backoff,
    still capped at max_delay and never jittered below what was asked.
    """
    if retry_after is not None and retry_after > 0:
        return min(retry_after, config.max_delay)
    
    delay = config.base_delay * (config.exponential_base ** (attempt - 1))
    delay = min(delay, config.max_delay)
    
    if config.jitter:
        jitter_amount = delay * config.jitter_range
        delay = max(0, delay + random.uniform(-jitter_amount, jitter_amount))
    
    return delay


def retry_with_backoff(
    retryable_exceptions: Tuple[Type[Exception], ...],
    config: Optional[RetryConfig] = None
):
    """
    Decorator for retrying functions with exponential backoff
    
    Args:
        retryable_exceptions: Exception types to retry on; anything else
            propagates on the first failure
        config: Retry configuration (defaults to RetryConfig())
    """
    retry_config = config or RetryConfig()
    
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            attempt = 0
            while True:
                attempt += 1
                try:
                    result = func(*args, **kwargs)
                except Exception as exc:
                    if not isinstance(exc, retryable_exceptions) or attempt >= retry_config.max_attempts:
                        structured_logger.error(
                            f"Function {func.__name__} failed permanently",
                            event="retry_failed_permanently",
                            function=func.__name__,
                            attempt=attempt,
                            error_type=exc.__class__.__name__,
                            error_message=str(exc)
                        )
                        raise
                    
                    delay = calculate_delay(attempt, retry_config, getattr(exc, 'retry_after', None))
                    structured_logger.warning(
                        f"Function {func.__name__} failed on attempt {attempt}, retrying in {delay:.1f}s",
                        event="retry_attempt",
                        function=func.__name__,
                        attempt=attempt,
                        max_attempts=retry_config.max_attempts,
                        delay_seconds=round(delay, 2),
                        error_type=exc.__class__.__name__,
                        error_message=str(exc)
                    )
                    time.sleep(delay)
                    continue
                
                if attempt > 1:
                    structured_logger.info(
                        f"Function {func.__name__} succeeded on attempt {attempt}",
                        event="retry_success",
                        function=func.__name__,
                        attempt=attempt
                    )
                return result
        
        return wrapper
    return decorator
