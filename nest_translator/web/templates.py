# =============================================================================
# TRANSLATED ARTICLE PAGE
# =============================================================================
# Standalone Spanish page for /p/<slug>. Rendered with Flask's
# render_template_string so every value except the body is autoescaped.

from datetime import datetime
from flask import render_template_string

from ..config.settings import settings
from ..models.post import SourcePost, TranslatedFields

SPANISH_MONTHS = (
    'enero', 'febrero', 'marzo', 'abril', 'mayo', 'junio',
    'julio', 'agosto', 'septiembre', 'octubre', 'noviembre', 'diciembre'
)


def format_spanish_date(iso_date: str) -> str:
    """'2025-03-15T10:00:00Z' -> '15 de marzo de 2025'; unparseable input -> ''"""
    if not iso_date:
        return ''
    try:
        parsed = datetime.fromisoformat(iso_date.strip().replace('Z', '+00:00'))
    except ValueError:
        return ''
    return f"{parsed.day} de {SPANISH_MONTHS[parsed.month - 1]} de {parsed.year}"


ARTICLE_TEMPLATE = """<!DOCTYPE html>
<html lang="es">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ title }} | {{ publication_name }}</title>
  <meta name="description" content="{{ description }}">
  <meta property="og:title" content="{{ title }}">
  <meta property="og:description" content="{{ subtitle }}">
  <meta property="og:type" content="article">
  {% if image %}<meta property="og:image" content="{{ image }}">{% endif %}
  <link href="https://fonts.googleapis.com/css2?family=Newsreader:ital,opsz,wght@0,6..72,400;0,6..72,600;1,6..72,400&display=swap" rel="stylesheet">
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: 'Newsreader', Georgia, serif; color: #1a1a1a; line-height: 1.7; }
    .container { max-width: 680px; margin: 0 auto; padding: 40px 20px 80px; }
    .pub-header { text-align: center; padding: 30px 0 20px; border-bottom: 1px solid #e8e4df; margin-bottom: 32px; }
    .pub-header a { text-decoration: none; color: inherit; }
    .pub-name { font-size: 24px; font-weight: 600; }
    .pub-tagline { font-size: 15px; color: #7a756f; margin-top: 4px; font-family: -apple-system, sans-serif; }
    h1.post-title { font-size: 36px; font-weight: 600; line-height: 1.2; margin-bottom: 12px; }
    h3.subtitle { font-size: 20px; font-weight: 400; color: #6b6560; margin-bottom: 24px; }
    .post-meta { font-family: -apple-system, sans-serif; font-size: 14px; color: #7a756f;
                 margin-bottom: 32px; padding-bottom: 24px; border-bottom: 1px solid #e8e4df; }
    .post-meta .authors { font-weight: 600; color: #1a1a1a; }
    .post-body p, .post-body li { font-size: 18px; margin-bottom: 1.4em; }
    .post-body h1, .post-body h2, .post-body h3 { font-weight: 600; margin: 2em 0 0.6em; }
    .post-body a { color: #c4956a; text-underline-offset: 2px; }
    .post-footer { margin-top: 48px; padding-top: 24px; border-top: 1px solid #e8e4df; text-align: center;
                   font-family: -apple-system, sans-serif; font-size: 13px; color: #999; }
    .post-footer a { color: #c4956a; }
    .error { text-align: center; padding: 80px 20px; font-family: -apple-system, sans-serif; }
    @media (max-width: 600px) { h1.post-title { font-size: 28px; } }
  </style>
</head>
<body>
  <div class="container">
    <div class="pub-header">
      <a href="{{ original_url }}">
        <div class="pub-name">{{ publication_name }}</div>
        <div class="pub-tagline">{{ publication_tagline }}</div>
      </a>
    </div>

    <h1 class="post-title">{{ title }}</h1>
    {% if subtitle %}<h3 class="subtitle">{{ subtitle }}</h3>{% endif %}

    <div class="post-meta">
      <div class="authors">{{ authors }}</div>
      <div>{{ date }}</div>
    </div>

    <div class="post-body">{{ content_html|safe }}</div>

    <div class="post-footer">
      <a href="{{ original_url }}">Read the original in English &rarr;</a>
      <br>
      <span>Traducido por Nest Translator</span>
    </div>
  </div>
</body>
</html>"""

ERROR_TEMPLATE = """<!DOCTYPE html>
<html lang="es">
<head><meta charset="UTF-8"><title>{{ publication_name }}</title></head>
<body>
  <div class="error">
    <h1>No pudimos traducir este artículo</h1>
    <p>{{ message }}</p>
    {% if original_url %}<p><a href="{{ original_url }}">Read the original in English &rarr;</a></p>{% endif %}
  </div>
</body>
</html>"""


def render_article_page(post: SourcePost, translated: TranslatedFields, content_html: str) -> str:
    meta = post.metadata
    return render_template_string(
        ARTICLE_TEMPLATE,
        title=translated.title,
        subtitle=translated.subtitle,
        description=translated.subtitle or meta.description,
        image=meta.image,
        authors=meta.authors or settings.PUBLICATION_NAME,
        date=format_spanish_date(meta.date_published),
        content_html=content_html,
        original_url=post.original_url,
        publication_name=settings.PUBLICATION_NAME,
        publication_tagline=settings.PUBLICATION_TAGLINE
    )


def render_error_page(message: str, original_url: str = '') -> str:
    return render_template_string(
        ERROR_TEMPLATE,
        message=message,
        original_url=original_url,
        publication_name=settings.PUBLICATION_NAME
    )
