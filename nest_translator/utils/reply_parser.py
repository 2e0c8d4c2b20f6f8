# =============================================================================
# TRANSLATION REPLY PARSER
# =============================================================================
# The model answers in free text. The request block starts with an optional
# "# title" line and an optional "### subtitle" line, so the reply is scanned
# line by line to pull those two back out; everything from the first body
# line onwards is kept verbatim, even lines that happen to start with "#".

from typing import List, Tuple

from ..models.post import TranslatedFields

TITLE_PREFIX = '# '
SUBTITLE_PREFIX = '### '


def scan_reply(reply: str) -> Tuple[str, str, List[str]]:
    """Return (title, subtitle, body_lines) exactly as found in the reply"""
    title = ''
    subtitle = ''
    body_lines: List[str] = []
    past_headers = False
    
    for line in reply.split('\n'):
        if not past_headers and not title and line.startswith(TITLE_PREFIX):
            title = line[len(TITLE_PREFIX):]
        elif not past_headers and not subtitle and line.startswith(SUBTITLE_PREFIX):
            subtitle = line[len(SUBTITLE_PREFIX):]
        elif not past_headers and not body_lines and line.strip() == '':
            continue
        else:
            past_headers = True
            body_lines.append(line)
    
    return title, subtitle, body_lines


def has_header_lines(reply: str) -> bool:
    title, subtitle, _ = scan_reply(reply)
    return bool(title or subtitle)


def parse_translation_reply(reply: str, fallback_title: str = '', fallback_subtitle: str = '') -> TranslatedFields:
    """Split a translation reply into title / subtitle / content.
    
    Missing (or empty) header lines fall back to the untranslated values.
    """
    title, subtitle, body_lines = scan_reply(reply or '')
    
    return TranslatedFields(
        title=title or fallback_title or '',
        subtitle=subtitle or fallback_subtitle or '',
        content='\n'.join(body_lines).strip()
    )
