"""Shared constants and text helpers for line-item parsing."""

import re
from decimal import Decimal, InvalidOperation

from splitscan.domain.receipt import TextFragment
from splitscan.receipt.parser_config import ParserConfig

# Strict price: optional "$", digits, a point, exactly two digits.
PRICE_PATTERN = re.compile(r"^\$?(\d+\.\d{2})$")

LEADING_NOISE_PATTERN = re.compile(r"^[\d\s()]+")


def parse_price(text: str) -> Decimal | None:
    """Return the exact price value of a trimmed fragment string, or None."""
    if not text:
        return None
    match = PRICE_PATTERN.match(text.strip())
    if match is None:
        return None
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return None


def _fragment_price(fragment: TextFragment) -> Decimal | None:
    return parse_price(fragment.text)


def _is_denylisted(text: str, config: ParserConfig) -> bool:
    """Return True if text carries a header/footer keyword (total, visa, ...)."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in config.denylist)


def _tax_code_pattern(config: ParserConfig) -> re.Pattern[str]:
    # Longest token first so "HMRJ" is never read as its "MRJ" suffix.
    tokens = sorted((token for token, _ in config.tax_codes), key=len, reverse=True)
    return re.compile("|".join(re.escape(token) for token in tokens), re.IGNORECASE)


def _is_tax_code_token(text: str, config: ParserConfig) -> bool:
    """Return True if the whole text is a single tax-code token."""
    stripped = text.strip().upper()
    return any(stripped == token.upper() for token, _ in config.tax_codes)


def _is_non_item_text(text: str, config: ParserConfig) -> bool:
    return _is_denylisted(text, config) or _is_tax_code_token(text, config)


def _letter_ratio(text: str) -> float:
    """Fraction of characters that are alphabetic."""
    if not text:
        return 0.0
    return sum(1 for c in text if c.isalpha()) / len(text)


def normalize_item_name(text: str, config: ParserConfig) -> str:
    """
    Clean a chosen name fragment.

    Strips a leading run of digits/whitespace/parentheses (SKU, "(2)"
    quantity prefixes) and a trailing tax-code token. Falls back to the
    original text when nothing would be left.
    """
    cleaned = LEADING_NOISE_PATTERN.sub("", text)
    tokens = sorted((token for token, _ in config.tax_codes), key=len, reverse=True)
    if tokens:
        trailing = re.compile(
            r"\s*(?:" + "|".join(re.escape(token) for token in tokens) + r")\s*$",
            re.IGNORECASE,
        )
        cleaned = trailing.sub("", cleaned)
    cleaned = cleaned.strip()
    if not cleaned:
        return text
    return cleaned
