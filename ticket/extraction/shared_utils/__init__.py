"""
Shared Utilities Package
"""
from .text_cleaner import TextCleaner
from .pattern_matcher import PatternMatcher, get_pattern_matcher
from .strategy_chain import find_best_match, first_valid, extract_after_prefix

__all__ = [
    'TextCleaner',
    'PatternMatcher',
    'get_pattern_matcher',
    'find_best_match',
    'first_valid',
    'extract_after_prefix'
]
