"""
Gemini-backed helpers: an advisory safety scan for moderators and an
excerpt suggestion for writers. Neither one changes a blog by itself.
"""
import logging

import google.generativeai as genai

from core.errors import CollaboratorError
from core.text import clean_markdown, strip_tags

logger = logging.getLogger(__name__)

SAFE = 'SAFE'
UNSAFE = 'UNSAFE'
UNKNOWN = 'UNKNOWN'


def build_model(api_key, model_name):
    """Configured Gemini model, or None when no API key is set."""
    if not api_key:
        logger.warning("GEMINI_API_KEY not set, AI assistant disabled")
        return None
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


class AIService:
    def __init__(self, model, excerpt_max_length=200):
        self.model = model
        self.excerpt_max_length = excerpt_max_length

    def _generate(self, prompt):
        if self.model is None:
            raise CollaboratorError("AI assistant is not configured")
        response = self.model.generate_content(prompt)
        return response.text or ''

    def safety_check(self, blog):
        """
        Asks the model whether the blog is fine for all ages.
        A model failure gives UNKNOWN so moderators fall back to reading it.
        """
        text = f"{blog.get('title', '')}\n{strip_tags(blog.get('content', ''))}"
        prompt = f"Is this content safe for all ages? Reply ONLY SAFE or UNSAFE.\nText: {text}"
        try:
            answer = self._generate(prompt)
        except CollaboratorError:
            raise
        except Exception as e:
            logger.error("Gemini safety check failed: %s", e)
            return UNKNOWN
        return UNSAFE if UNSAFE in answer.upper() else SAFE

    def suggest_excerpt(self, content):
        plain = strip_tags(content)
        prompt = (
            f"Act as a professional blog editor. Summarise the article below in one or two "
            f"sentences, at most {self.excerpt_max_length} characters. "
            f"Return ONLY the summary, no markdown, no hashtags.\n"
            f"Article: {plain}"
        )
        try:
            answer = self._generate(prompt)
        except CollaboratorError:
            raise
        except Exception as e:
            logger.error("Gemini excerpt generation failed: %s", e)
            raise CollaboratorError("AI could not generate content.") from e

        excerpt = " ".join(clean_markdown(answer).split())
        if len(excerpt) > self.excerpt_max_length:
            excerpt = excerpt[:self.excerpt_max_length - 3].rstrip() + '...'
        return excerpt
