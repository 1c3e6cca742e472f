"""Free-text prop query parsing and validation.

Handles inputs such as ``"Anthony Edwards over 26.5 points"``,
``"Edwards U 5.5 assists"`` and ``"LeBron O27.5 PTS"``. Parsing never raises;
unclear input lowers the confidence score instead.
"""

from __future__ import annotations

import re
from typing import Optional

from .config import OVER_TOKENS, PLAYER_ALIASES, SIDES, STAT_SYNONYMS, STAT_TYPES, UNDER_TOKENS
from .schemas import ParsedQuery, ValidationResult

MIN_CONFIDENCE = 0.6

_DECIMAL_RE = re.compile(r"\d+\.\d+")
_INTEGER_RE = re.compile(r"\d+")
_WHITESPACE_RE = re.compile(r"\s+")


def _word_pattern(words: tuple[str, ...] | list[str]) -> re.Pattern[str]:
    # Longest first so "over" wins over "o"; letters may not touch the token.
    ordered = sorted(words, key=len, reverse=True)
    return re.compile(r"(?<![a-z])(?:" + "|".join(re.escape(word) for word in ordered) + r")(?![a-z])")


def _side_pattern(tokens: tuple[str, ...]) -> re.Pattern[str]:
    words = tuple(token for token in tokens if token.isalpha())
    symbols = "".join(re.escape(token) for token in tokens if not token.isalpha())
    letter = words[0][0] if words else ""
    parts = [_word_pattern(words).pattern]
    if symbols:
        parts.append(f"[{symbols}]")
    if letter:
        # Compact forms such as "lebrono27.5" carry the side letter glued to the line.
        parts.append(rf"{letter}(?=\d)")
    return re.compile("|".join(parts))


_STAT_PATTERNS: dict[str, re.Pattern[str]] = {
    stat: _word_pattern([word for word, value in STAT_SYNONYMS.items() if value == stat])
    for stat in STAT_TYPES
}
_ANY_STAT_RE = _word_pattern(list(STAT_SYNONYMS))
_OVER_RE = _side_pattern(OVER_TOKENS)
_UNDER_RE = _side_pattern(UNDER_TOKENS)


def extract_stat_type(text: str) -> Optional[str]:
    """First stat category whose synonym appears as a whole word."""

    for stat, pattern in _STAT_PATTERNS.items():
        if pattern.search(text):
            return stat
    return None


def extract_side(text: str) -> Optional[str]:
    if _OVER_RE.search(text):
        return "OVER"
    if _UNDER_RE.search(text):
        return "UNDER"
    return None


def extract_line(text: str) -> tuple[float, Optional[str]]:
    """First decimal number, else first integer; ``(0, None)`` when neither is present."""

    match = _DECIMAL_RE.search(text) or _INTEGER_RE.search(text)
    if match is None:
        return 0.0, None
    return float(match.group(0)), match.group(0)


def extract_player_name(text: str, line_text: Optional[str]) -> str:
    """What remains after removing stat, side and line tokens, title-cased."""

    cleaned = _ANY_STAT_RE.sub(" ", text)
    cleaned = _OVER_RE.sub(" ", cleaned)
    cleaned = _UNDER_RE.sub(" ", cleaned)
    if line_text:
        cleaned = cleaned.replace(line_text, " ", 1)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    return " ".join(word[0].upper() + word[1:] for word in cleaned.split(" ") if word)


def resolve_player_alias(name: str) -> Optional[str]:
    """Canonical name for a known nickname (case-insensitive exact match)."""

    return PLAYER_ALIASES.get(name.strip().lower())


def parse_query_from_text(text: str) -> ParsedQuery:
    """Extract player, stat, line and side from free text."""

    normalized = _WHITESPACE_RE.sub(" ", (text or "").lower()).strip()

    stat_type = extract_stat_type(normalized)
    side = extract_side(normalized)
    line, line_text = extract_line(normalized)
    player_name = extract_player_name(normalized, line_text)

    confidence = 0.5
    if player_name:
        confidence += 0.2
    if stat_type:
        confidence += 0.2
    if side:
        confidence += 0.2
    if line > 0:
        confidence += 0.2

    return ParsedQuery(
        player_name=resolve_player_alias(player_name) or player_name,
        stat_type=stat_type or "PTS",
        line=line,
        side=side or "OVER",
        confidence=round(min(confidence, 1.0), 2),
    )


def validate_parsed_query(parsed: ParsedQuery) -> ValidationResult:
    """Check a parsed query, collecting every violated rule."""

    errors: list[str] = []

    if not parsed.player_name or len(parsed.player_name.strip()) < 2:
        errors.append("Player name is required and must be at least 2 characters")
    if parsed.stat_type not in STAT_TYPES:
        errors.append("Stat type must be PTS, REB, or AST")
    if not parsed.line or parsed.line <= 0:
        errors.append("Line must be a positive number")
    if parsed.side not in SIDES:
        errors.append("Side must be OVER or UNDER")
    if parsed.confidence < MIN_CONFIDENCE:
        errors.append("Low parsing confidence - please clarify the query")

    return ValidationResult(valid=not errors, errors=tuple(errors))
