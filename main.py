#!/usr/bin/env python3
# =============================================================================
# NEST TRANSLATOR - MAIN APPLICATION
# =============================================================================
# Before running, make sure you have:
# 1. GOOGLE_API_KEY in .env file
# 2. SOURCE_BASE_URL (or SUBSTACK_URL) pointing at the publication
# =============================================================================

import sys
import json

from nest_translator.config.settings import settings
from nest_translator.utils.logger import logger
from nest_translator.web.server import TranslatorServer


def show_config():
    print("⚙️ Configuration:")
    print("=" * 50)
    print(json.dumps(settings.get_configuration_summary(), indent=2))


def main():
    if len(sys.argv) > 1:
        command = sys.argv[1]
        
        if command == 'config':
            show_config()
        elif command == 'validate':
            valid = settings.validate_configuration_comprehensive()
            print("✅ Configuration is valid" if valid else "❌ Configuration has errors")
            sys.exit(0 if valid else 1)
        else:
            print("Usage: python main.py [config|validate]")
            print("  config    - Show configuration (secrets masked)")
            print("  validate  - Run configuration validation (exit 0/1)")
            print("  (no args) - Start the translation server")
        return
    
    if not settings.validate_configuration_comprehensive():
        logger.warning("⚠️ Configuration has errors; translations will fail until they are fixed")
    
    logger.info("🚀 Starting Nest Translator")
    TranslatorServer().run()

if __name__ == "__main__":
    main()
