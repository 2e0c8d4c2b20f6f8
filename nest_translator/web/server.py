# =============================================================================
# NEST TRANSLATOR WEB SERVER
# =============================================================================
# Flask application exposing the translation pipeline:
# - POST /api/translate       translate (or serve cached) post fields
# - POST /api/pre-translate   warm the cache ahead of readers
# - GET  /health              liveness + cache statistics
# - GET  /p/<slug>            standalone Spanish article page
# =============================================================================

import time
from datetime import datetime, timezone
from typing import Optional
from flask import Flask, jsonify, request
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..config.settings import settings
from ..exceptions import (
    PostFetchError,
    UpstreamTranslationError,
    TranslationValidationError,
    ValidationError
)
from ..services.translation_pipeline import TranslationPipeline
from ..services.gemini_translator import GeminiTranslator
from ..services.post_reader import PostReader
from ..utils.content_normalizer import normalize_html
from ..utils.content_renderer import render_content
from ..utils.prompt_builder import PromptBuilder
from ..utils.logger import logger
from ..utils.structured_logger import structured_logger
from .templates import render_article_page, render_error_page


class TranslateRequest(BaseModel):
    """Body of /api/translate and /api/pre-translate"""
    model_config = ConfigDict(populate_by_name=True)
    
    id: str = Field(..., min_length=1, validation_alias=AliasChoices('id', 'postId'))
    title: str = ''
    subtitle: str = ''
    content: str = ''
    
    @field_validator('title', 'subtitle', 'content', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return '' if v is None else v
    
    @model_validator(mode='after')
    def require_title_or_content(self):
        if not self.title.strip() and not self.content.strip():
            raise ValueError('At least title or content is required')
        return self


def parse_translate_request(payload) -> TranslateRequest:
    """Validate a JSON body, raising TranslationValidationError with a readable message"""
    if not isinstance(payload, dict):
        raise TranslationValidationError("Request body must be a JSON object")
    
    try:
        return TranslateRequest.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = first['loc'][0] if first['loc'] else None
        if field == 'id':
            message = 'id is required'
        else:
            message = first['msg'].removeprefix('Value error, ')
        raise TranslationValidationError(message, field=field) from e


class TranslatorServer:
    """HTTP front end for the translation pipeline"""
    
    def __init__(self, pipeline: Optional[TranslationPipeline] = None,
                 reader: Optional[PostReader] = None):
        self.pipeline = pipeline or TranslationPipeline(
            GeminiTranslator(),
            prompt_builder=PromptBuilder(publication_name=settings.PUBLICATION_NAME)
        )
        self.reader = reader or PostReader()
        self.app = Flask(__name__)
        self.start_time = time.time()
        self._setup_routes()
    
    def _setup_routes(self):
        """Setup Flask routes for API endpoints"""
        
        @self.app.route('/health')
        def health_endpoint():
            return jsonify(self._get_health_status())
        
        @self.app.route('/api/translate', methods=['POST'])
        def translate_endpoint():
            try:
                req = parse_translate_request(request.get_json(silent=True))
                fields, from_cache = self.pipeline.translate_with_status(
                    req.id, req.title, req.subtitle, req.content
                )
            except TranslationValidationError as e:
                return jsonify({'error': e.message, 'detail': e.to_dict()}), 400
            except UpstreamTranslationError as e:
                logger.error(f"Translation error: {e.message}")
                return jsonify({'error': 'Translation failed', 'detail': e.message}), 502
            except Exception as e:
                logger.error(f"Unexpected translation error: {e}", exc_info=True)
                return jsonify({'error': 'Translation failed', 'detail': str(e)}), 500
            
            return jsonify({'id': req.id, 'cached': from_cache, **fields.to_dict()})
        
        @self.app.route('/api/pre-translate', methods=['POST'])
        def pre_translate_endpoint():
            try:
                req = parse_translate_request(request.get_json(silent=True))
                status = self.pipeline.prewarm(req.id, req.title, req.subtitle, req.content)
            except TranslationValidationError as e:
                return jsonify({'error': e.message, 'detail': e.to_dict()}), 400
            except UpstreamTranslationError as e:
                logger.error(f"Pre-translate error: {e.message}")
                return jsonify({'error': 'Pre-translation failed', 'detail': e.message}), 502
            except Exception as e:
                logger.error(f"Unexpected pre-translate error: {e}", exc_info=True)
                return jsonify({'error': 'Pre-translation failed', 'detail': str(e)}), 500
            
            return jsonify({'id': req.id, 'status': status})
        
        @self.app.route('/p/<slug>')
        def translated_post_page(slug):
            return self._render_translated_post(slug)
    
    def _render_translated_post(self, slug: str):
        try:
            post = self.reader.fetch_post(slug)
        except ValidationError as e:
            return render_error_page(e.message), 404
        except PostFetchError as e:
            logger.error(f"Failed to fetch post {slug}: {e.message}")
            return render_error_page("No se pudo obtener el artículo original.", e.url or ''), 502
        
        try:
            fields = self.pipeline.translate(post.id, post.title, post.subtitle, normalize_html(post.body_html))
        except TranslationValidationError:
            logger.warning(f"Post {post.id} has no title or body to translate")
            return render_error_page("El artículo no tiene contenido para traducir.", post.original_url), 502
        except UpstreamTranslationError as e:
            logger.error(f"Failed to translate post {post.id}: {e.message}")
            return render_error_page("La traducción no está disponible en este momento.", post.original_url), 502
        
        return render_article_page(post, fields, render_content(fields.content))
    
    def _get_health_status(self) -> dict:
        metrics = self.pipeline.get_metrics()
        cache_info = metrics.get('cache', {})
        if cache_info:
            structured_logger.log_cache_performance(
                hit_rate=cache_info.get('hit_rate_percent', 0.0),
                total_requests=cache_info.get('total_hits', 0) + cache_info.get('total_misses', 0),
                cache_size=cache_info.get('total_entries', 0)
            )
        return {
            'status': 'ok',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'uptime_seconds': round(time.time() - self.start_time, 1),
            'cache': metrics
        }
    
    def run(self, host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
        host = host or settings.HOST
        port = port or settings.PORT
        logger.info(f"🌐 Nest Translator listening on http://{host}:{port}")
        self.app.run(host=host, port=port, debug=debug, threaded=True)


def create_app(pipeline: Optional[TranslationPipeline] = None,
               reader: Optional[PostReader] = None) -> Flask:
    """Application factory for WSGI servers and tests"""
    return TranslatorServer(pipeline=pipeline, reader=reader).app
