"""Slug generation for page documents and attachment directories.

A slug is an ASCII-only, delimiter-free name derived from a page title and
used both as the document file name and as the page's attachment directory.

Conversion rules:
- Letters from TRANSLITERATIONS are replaced by their ASCII spelling
- Every run of characters outside [A-Za-z0-9] becomes a single space
- The first letter of every word is upper-cased, the rest is kept as is
- All whitespace is removed

Two titles that produce the same slug write to the same files; no collision
detection is done.

Examples:
    - "Home" -> "Home"
    - "release notes 2.0" -> "ReleaseNotes20"
    - "Übersicht für Anfänger" -> "UebersichtFuerAnfaenger"
"""

import re

TRANSLITERATIONS = (
    ("ä", "ae"),
    ("ö", "oe"),
    ("ü", "ue"),
    ("Ä", "Ae"),
    ("Ö", "Oe"),
    ("Ü", "Ue"),
    ("ß", "ss"),
)

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")


def to_ascii(text: str) -> str:
    """Replace letters from the transliteration table by ASCII sequences."""
    for source, replacement in TRANSLITERATIONS:
        text = text.replace(source, replacement)
    return text


def slugify(title: str) -> str:
    """Convert a page title to its slug.

    Args:
        title: Page title

    Returns:
        Slug made only of ASCII letters and digits (may be empty)
    """
    words = _NON_ALNUM.sub(" ", to_ascii(title)).split()
    return "".join(word[:1].upper() + word[1:] for word in words)
