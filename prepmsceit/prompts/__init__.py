"""
AI prompt and message templates for prepMSCEIT

Contains:
- Assessment item generation
- Free-text question extraction
- Invitation and login-link emails
"""

from prepmsceit.prompts.generator import GeneratorPrompts
from prepmsceit.prompts.parser import ParserPrompts
from prepmsceit.prompts.emails import EmailTemplates

__all__ = [
    "GeneratorPrompts",
    "ParserPrompts",
    "EmailTemplates",
]
