# =============================================================================
# GEMINI PROMPT BUILDER
# =============================================================================
# Builds the system directive (voice + rules) and the user prompt that wraps
# the "# title / ### subtitle / body" block sent for translation

from typing import Optional

SOURCE_LANGUAGE = "English"
TARGET_LANGUAGE = "Latin American Spanish"

class PromptBuilder:
    def __init__(self, publication_name: str = "ConteNIDO"):
        self.publication_name = publication_name
        self.system_template = """You are a translation engine for "{publication_name}", a newsletter about venture capital, AI, and technology in Latin America. Translate {source_language} newsletter posts into {target_language} while preserving the author's voice.

Author's writing style:
- Conversational and direct, like talking to a smart friend
- Analytical but accessible: uses data and frameworks without being dry
- Warm but confident, with strong opinions shared clearly
- Occasional rhetorical questions to engage readers
- Short punchy paragraphs mixed with longer analytical ones
- First person perspective ("I think", "I've seen")

Translation rules:
- Use {target_language} (ustedes, not vosotros)
- Keep proper nouns, company names and product names in English (e.g. "venture capital", "B2B", "startup", "seed stage")
- Common tech terms with natural Spanish equivalents should use Spanish (e.g. "inteligencia artificial", "cadena de suministro")
- Preserve all markdown formatting exactly (**, *, #, ##, ###, links)
- Keep the first "# " line as the translated title and the first "### " line as the translated subtitle
- Preserve emojis exactly
- Keep the same paragraph structure and line breaks
- "{publication_name}" stays as written (brand name)
- Translate idioms to equivalent Spanish idioms, not literally
- Do not add a sign-off at the end

Return ONLY the translated text. No preamble, no explanation."""
    
    def build_system_prompt(self) -> str:
        """Fixed style/voice directive for the model"""
        return self.system_template.format(
            publication_name=self.publication_name,
            source_language=SOURCE_LANGUAGE,
            target_language=TARGET_LANGUAGE
        )
    
    def build_translation_block(self, title: Optional[str], subtitle: Optional[str], body_text: Optional[str]) -> str:
        """Title as a "# " line, subtitle as a "### " line, then the body, blank-line separated"""
        parts = []
        if title:
            parts.append(f"# {title}")
        if subtitle:
            parts.append(f"### {subtitle}")
        if body_text:
            parts.append(body_text)
        return "\n\n".join(parts)
    
    def build_translation_prompt(self, block: str) -> str:
        """Fixed target-locale directive followed by the block to translate"""
        return (
            f"Translate the following newsletter post from {SOURCE_LANGUAGE} "
            f"to {TARGET_LANGUAGE}:\n\n{block}"
        )

# Global prompt builder instance
prompt_builder = PromptBuilder()
