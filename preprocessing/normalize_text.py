"""
Text normalization preprocessing module for kwicextract.

Opinion texts come from OCR and typesetting pipelines and carry typographic
quotes, several kinds of dashes, accented letters and assorted symbols. Both
the KWIC search and the part-of-speech tagger work on plain ASCII, so every
text field is run through a fixed, ordered substitution table before use and
any character the table does not cover is dropped.
"""

import logging
import re
from typing import Tuple

logger = logging.getLogger(__name__)


class NormalizationError(Exception):
    """Exception raised when text normalization receives invalid input."""
    pass


# Applied in order. Multi-character replacements come before the generic
# accent folding so that e.g. the ligatures are not reduced to one letter.
SUBSTITUTIONS: Tuple[Tuple[str, str], ...] = (
    # quote unification
    ("“", '"'), ("”", '"'), ("„", '"'), ("‟", '"'),
    ("″", '"'), ("«", '"'), ("»", '"'),
    ("‘", "'"), ("’", "'"), ("‚", "'"), ("‛", "'"),
    ("′", "'"), ("´", "'"), ("`", "'"),
    # dash unification
    ("‐", "-"), ("‑", "-"), ("‒", "-"), ("–", "-"),
    ("—", "-"), ("―", "-"), ("−", "-"), ("\u00ad", ""),
    # spacing and ellipsis
    ("\u00a0", " "), ("\u2009", " "), ("\u202f", " "), ("\u2026", "..."),
    # ligatures and letters without a decomposition
    ("ﬁ", "fi"), ("ﬂ", "fl"), ("ß", "ss"),
    ("æ", "ae"), ("Æ", "AE"), ("œ", "oe"), ("Œ", "OE"),
    ("ø", "o"), ("Ø", "O"),
    # common accented letters
    ("à", "a"), ("á", "a"), ("â", "a"), ("ã", "a"),
    ("ä", "a"), ("å", "a"), ("À", "A"), ("Á", "A"),
    ("Â", "A"), ("Ã", "A"), ("Ä", "A"), ("Å", "A"),
    ("ç", "c"), ("Ç", "C"),
    ("è", "e"), ("é", "e"), ("ê", "e"), ("ë", "e"),
    ("È", "E"), ("É", "E"), ("Ê", "E"), ("Ë", "E"),
    ("ì", "i"), ("í", "i"), ("î", "i"), ("ï", "i"),
    ("Ì", "I"), ("Í", "I"), ("Î", "I"), ("Ï", "I"),
    ("ñ", "n"), ("Ñ", "N"),
    ("ò", "o"), ("ó", "o"), ("ô", "o"), ("õ", "o"),
    ("ö", "o"), ("Ò", "O"), ("Ó", "O"), ("Ô", "O"),
    ("Õ", "O"), ("Ö", "O"),
    ("ù", "u"), ("ú", "u"), ("û", "u"), ("ü", "u"),
    ("Ù", "U"), ("Ú", "U"), ("Û", "U"), ("Ü", "U"),
    ("ý", "y"), ("ÿ", "y"), ("Ý", "Y"),
    # angle brackets
    ("<", ""), (">", ""),
    # symbols
    ("§", ""), ("¶", ""), ("•", ""), ("·", ""),
    ("†", ""), ("‡", ""), ("©", ""), ("®", ""),
    ("™", ""), ("°", ""), ("�", ""),
)

_NON_ASCII = re.compile(r"[^\x00-\x7f]")
# Characters str.split() treats as word separators besides the usual ones.
_SEPARATOR_CHARS = re.compile(r"[\x0B\x0C\x1C-\x1F\x85]")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0E-\x1B\x7F]")


def sanitize_control_characters(input_text: str) -> str:
    """
    Remove ASCII control characters except TAB, LF and CR.

    Vertical tab, form feed, the information separators and NEL become a
    space so the words on either side stay apart.

    Args:
        input_text: The input string to sanitize

    Returns:
        Sanitized string with control characters removed

    Raises:
        NormalizationError: If input is not a string
    """
    if not isinstance(input_text, str):
        raise NormalizationError(f"Input must be a string, got {type(input_text)}")
    return _CONTROL_CHARS.sub("", _SEPARATOR_CHARS.sub(" ", input_text))


def apply_substitutions(input_text: str) -> str:
    """Apply the fixed substitution table, in order."""
    result = input_text
    for source, target in SUBSTITUTIONS:
        if source in result:
            result = result.replace(source, target)
    return result


def strip_non_ascii(input_text: str) -> str:
    """Drop every character outside the ASCII range."""
    return _NON_ASCII.sub("", input_text)


def normalize_text(input_text: str) -> str:
    """
    Normalize text to the plain ASCII form used for searching and tagging.

    The pass is deterministic and idempotent: normalizing already normalized
    text returns it unchanged.

    Args:
        input_text: The input string to normalize

    Returns:
        ASCII text with typographic characters substituted

    Raises:
        NormalizationError: If input is not a string
    """
    if not isinstance(input_text, str):
        raise NormalizationError(f"Input must be a string, got {type(input_text)}")

    if not input_text:
        return input_text

    normalized = strip_non_ascii(
        apply_substitutions(sanitize_control_characters(input_text))
    )

    if len(normalized) != len(input_text):
        logger.debug(
            "Normalization changed length from %d to %d characters",
            len(input_text), len(normalized),
        )
    return normalized
