"""
Configuration validation for the translation server.
Checks the Gemini credentials, the source publication URL and server settings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError


class ValidationLevel(Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

@dataclass
class ValidationResult:
    level: ValidationLevel
    field: str
    message: str
    suggestion: Optional[str] = None

# =============================================================================
# PYDANTIC SCHEMAS FOR CONFIGURATION VALIDATION
# =============================================================================

class GeminiConfig(BaseModel):
    """Schema for Google Gemini API configuration"""
    api_key: str = Field(..., min_length=1, description="Google Gemini API key")
    model: str = Field(default="gemini-2.5-flash-lite", description="Gemini model to use")
    max_output_tokens: int = Field(default=8192, ge=256, le=65536)
    
    @field_validator('api_key')
    @classmethod
    def validate_gemini_key(cls, v):
        if v.startswith('your_') or v in ['', 'REPLACE_WITH_YOUR_KEY']:
            raise ValueError("API key appears to be a placeholder value")
        if len(v) < 30:
            raise ValueError("Gemini API key appears to be too short")
        return v

class ServerConfig(BaseModel):
    """Schema for HTTP server and source publication settings"""
    source_base_url: str = Field(..., min_length=1)
    port: int = Field(default=3000, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    fetch_timeout_seconds: float = Field(default=20, gt=0, le=120)
    
    @field_validator('source_base_url')
    @classmethod
    def validate_source_url(cls, v):
        if not v.startswith(('http://', 'https://')):
            raise ValueError("Source URL must start with http:// or https://")
        return v
    
    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


def _collect_errors(exc: PydanticValidationError, prefix: str, level: ValidationLevel) -> List[ValidationResult]:
    results = []
    for error in exc.errors():
        location = '.'.join(str(part) for part in error['loc'])
        results.append(ValidationResult(
            level=level,
            field=f"{prefix}.{location}" if location else prefix,
            message=error['msg']
        ))
    return results


def validate_configuration(config) -> Dict[str, Any]:
    """Validate a Settings instance and return {'valid': bool, 'results': [...]}"""
    results: List[ValidationResult] = []
    
    if not config.GOOGLE_API_KEY:
        results.append(ValidationResult(
            level=ValidationLevel.ERROR,
            field='gemini.api_key',
            message='GOOGLE_API_KEY is not set',
            suggestion='Get a key from https://makersuite.google.com/app/apikey'
        ))
    else:
        try:
            GeminiConfig(
                api_key=config.GOOGLE_API_KEY,
                model=config.GEMINI_MODEL,
                max_output_tokens=config.GEMINI_MAX_OUTPUT_TOKENS
            )
        except PydanticValidationError as e:
            results.extend(_collect_errors(e, 'gemini', ValidationLevel.ERROR))
    
    try:
        ServerConfig(
            source_base_url=config.SOURCE_BASE_URL,
            port=config.PORT,
            log_level=config.LOG_LEVEL,
            fetch_timeout_seconds=config.FETCH_TIMEOUT_SECONDS
        )
    except PydanticValidationError as e:
        results.extend(_collect_errors(e, 'server', ValidationLevel.ERROR))
    
    valid = not any(r.level == ValidationLevel.ERROR for r in results)
    return {'valid': valid, 'results': results}
