# =============================================================================
# CONFIGURATION SETTINGS
# =============================================================================
# Values come from the environment (or a local .env file):
# 1. GOOGLE_API_KEY from https://makersuite.google.com/app/apikey
# 2. SOURCE_BASE_URL pointing at the publication being translated
# =============================================================================

import os
import logging
from dotenv import load_dotenv
from typing import Dict, Any, Optional

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_BASE_URL = 'https://elcontenido.substack.com'


class Settings:
    def __init__(self):
        # Validation results
        self._validation_results: Optional[Dict[str, Any]] = None
        self._is_valid: Optional[bool] = None
        
        # Google Gemini API
        self.GOOGLE_API_KEY = os.getenv('GOOGLE_API_KEY')
        self.GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash-lite')
        self.GEMINI_MAX_OUTPUT_TOKENS = int(os.getenv('GEMINI_MAX_OUTPUT_TOKENS', 8192))
        
        # Source publication
        self.SOURCE_BASE_URL = (
            os.getenv('SOURCE_BASE_URL') or os.getenv('SUBSTACK_URL') or DEFAULT_SOURCE_BASE_URL
        ).rstrip('/')
        self.PUBLICATION_NAME = os.getenv('PUBLICATION_NAME', 'ConteNIDO')
        self.PUBLICATION_TAGLINE = os.getenv('PUBLICATION_TAGLINE', 'VC, AI & Tech en Latinoamérica')
        self.FETCH_TIMEOUT_SECONDS = float(os.getenv('FETCH_TIMEOUT_SECONDS', 20))
        
        # Server settings
        self.HOST = os.getenv('HOST', '0.0.0.0')
        self.PORT = int(os.getenv('PORT', 3000))
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    
    def gemini_configured(self) -> bool:
        """True when a real (non-placeholder) Gemini key is present"""
        return bool(self.GOOGLE_API_KEY) and not self.GOOGLE_API_KEY.startswith('your_')
    
    def validate_configuration_comprehensive(self) -> bool:
        """
        Run the pydantic-backed validator and remember the outcome.
        Returns True if configuration is valid, False otherwise.
        """
        from .validator import validate_configuration
        
        self._validation_results = validate_configuration(self)
        self._is_valid = self._validation_results['valid']
        
        for result in self._validation_results['results']:
            log = logger.error if result.level.value == 'ERROR' else logger.warning
            log(f"{result.field}: {result.message}")
        
        return self._is_valid
    
    def get_validation_results(self) -> Optional[Dict[str, Any]]:
        """Get the last validation results"""
        return self._validation_results
    
    def is_configuration_valid(self) -> bool:
        """
        Check if configuration is valid. 
        If validation hasn't been run, run it now.
        """
        if self._is_valid is None:
            return self.validate_configuration_comprehensive()
        return self._is_valid
    
    def get_configuration_summary(self) -> Dict[str, Any]:
        """Get a summary of the current configuration (secrets masked)"""
        masked_key = None
        if self.GOOGLE_API_KEY and len(self.GOOGLE_API_KEY) > 10:
            masked_key = self.GOOGLE_API_KEY[:6] + '*' * (len(self.GOOGLE_API_KEY) - 10) + self.GOOGLE_API_KEY[-4:]
        
        return {
            'gemini_configured': self.gemini_configured(),
            'gemini_api_key': masked_key,
            'gemini_model': self.GEMINI_MODEL,
            'source_base_url': self.SOURCE_BASE_URL,
            'publication_name': self.PUBLICATION_NAME,
            'host': self.HOST,
            'port': self.PORT,
            'log_level': self.LOG_LEVEL,
            'validation_status': self._is_valid
        }

# Global settings instance
settings = Settings()
