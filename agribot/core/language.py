"""
Message language heuristic.

Distinguishes Algerian Darja (Arabic or Latin script), Modern Standard
Arabic, French and English with marker words. Used when the client does
not declare a language.

Dependencies: re (stdlib)
System role: Reply language selection
"""

import re

SUPPORTED_LANGUAGES = ("darja", "ar", "fr", "en")
DEFAULT_LANGUAGE = "darja"

ARABIC_SCRIPT = re.compile(r"[؀-ۿ]")
DARJA_ARABIC_MARKERS = re.compile(r"شحال|واش|كيفاش|راك|بزاف|نزرع|ندير")
DARJA_LATIN_MARKERS = re.compile(
    r"\b(?:wach|wesh|kifach|kifech|chhal|ch7al|rani|raki|bezzaf|bzaf|nzra3|ndir)\b"
    r"|[a-z][379]|[379][a-z]",
    re.IGNORECASE,
)
FRENCH_ACCENTS = re.compile(r"[éèêëàâçùûîïô]", re.IGNORECASE)
FRENCH_WORDS = re.compile(
    r"\b(?:quel|quelle|quels|temps|fera|le|la|les|pour|comment|est|des|du|une|je|mon|ma|"
    r"combien|prix|avec|dans|sur|il)\b",
    re.IGNORECASE,
)
ENGLISH_WORDS = re.compile(
    r"\b(?:what|how|the|is|are|price|weather|when|should|my|which|will|for|with|in|of)\b",
    re.IGNORECASE,
)

LANGUAGE_DIRECTIVES = {
    "darja": "Reply in Algerian Darja, matching the farmer's script (Arabic or Latin letters).",
    "ar": "Reply in Modern Standard Arabic.",
    "fr": "Reply in French.",
    "en": "Reply in English.",
}


def detect_language(text: str) -> str:
    """
    Guess the language of a message.

    Args:
        text: Raw user message

    Returns:
        str: One of "darja", "ar", "fr", "en"; "darja" when undecided
    """
    if not text or not text.strip():
        return DEFAULT_LANGUAGE

    if ARABIC_SCRIPT.search(text):
        return "darja" if DARJA_ARABIC_MARKERS.search(text) else "ar"

    if DARJA_LATIN_MARKERS.search(text):
        return "darja"

    french = len(FRENCH_WORDS.findall(text))
    english = len(ENGLISH_WORDS.findall(text))
    if FRENCH_ACCENTS.search(text) or (french and french >= english):
        return "fr"
    if english:
        return "en"
    return DEFAULT_LANGUAGE


def resolve_language(declared: str | None, text: str) -> str:
    """Declared language when supported, otherwise the detected one."""
    if declared and declared.lower() in SUPPORTED_LANGUAGES:
        return declared.lower()
    return detect_language(text)


def language_directive(language: str) -> str:
    """Prompt instruction for the reply language."""
    return LANGUAGE_DIRECTIVES.get(language, LANGUAGE_DIRECTIVES[DEFAULT_LANGUAGE])
