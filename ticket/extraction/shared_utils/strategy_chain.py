"""
Strategy Chain - Ordered extraction strategies with first-non-empty precedence
"""
from typing import Callable, Iterable, Optional, Sequence

Strategy = Callable[[str], Optional[str]]


def find_best_match(candidates: Iterable[Optional[str]]) -> Optional[str]:
    """First candidate that is neither None nor blank, in the given order."""
    for candidate in candidates:
        if candidate is not None and candidate.strip() != "":
            return candidate
    return None


def first_valid(strategies: Sequence[Strategy], text: str,
                validator: Optional[Callable[[str], bool]] = None) -> Optional[str]:
    """
    Run strategies in priority order and stop at the first usable result.

    Later strategies are never consulted once an earlier one answers, so a
    prefix hit always wins over a regex or contextual guess.
    """
    for strategy in strategies:
        candidate = find_best_match([strategy(text)])
        if candidate is None:
            continue
        if validator is None or validator(candidate):
            return candidate
    return None


def extract_after_prefix(text: str, prefix: str, delimiters: Sequence[str] = (",", "|", "-"),
                         fallback_length: int = 10, skip_chars: str = "",
                         delimiter_offset: int = 0) -> Optional[str]:
    """
    Slice the value that follows the first occurrence of prefix.

    The value ends at the next line break. When the prefix sits on the last
    line, the nearest of the delimiters ends it instead, and failing that the
    value is capped at fallback_length characters.

    Args:
        text: Text to scan (callers lowercase it first)
        prefix: Label such as "date:"
        delimiters: Terminators used when no line break follows
        fallback_length: Maximum value length when nothing terminates it
        skip_chars: Characters skipped directly after the prefix
        delimiter_offset: Characters to skip before looking for delimiters
    """
    index = text.find(prefix)
    if index == -1:
        return None

    start = index + len(prefix)
    while skip_chars and start < len(text) and text[start] in skip_chars:
        start += 1

    end = text.find("\n", start)
    if end == -1:
        for delimiter in delimiters:
            delimiter_index = text.find(delimiter, start + delimiter_offset)
            if delimiter_index != -1 and (end == -1 or delimiter_index < end):
                end = delimiter_index
        if end == -1:
            end = min(start + fallback_length, len(text))

    return text[start:end].strip()
