"""Weighted English-vs-Hindi language scoring"""

from typing import List, Optional

import structlog

from . import lexicon
from .models import Lang, LanguageResult, LexicalScore

logger = structlog.get_logger(__name__)


def tokenize(text: str) -> List[str]:
    """Lowercase word tokens, punctuation dropped"""
    return lexicon.TOKEN_RE.findall(text.lower())


class LanguageScorer:
    """Additive lexicon scoring with grammar-marker bonuses

    Holds no per-call state, so one instance can serve concurrent requests.
    """

    def __init__(self, default_language: Lang = Lang.ENGLISH):
        self.default_language = default_language

    def score(self, normalized_text: str, default_language: Optional[Lang] = None) -> LanguageResult:
        """Pick the language with the higher total; ties go to ``default_language``"""
        tie_breaker = default_language or self.default_language

        tokens = tokenize(normalized_text or "")
        scores = self.lexical_score(tokens, normalized_text or "")

        if lexicon.DEVANAGARI_RE.search(normalized_text or ""):
            # Script is definitive
            return LanguageResult(language=Lang.HINDI, confidence=1.0, scores=scores)

        if scores.english > scores.target:
            language = Lang.ENGLISH
        elif scores.target > scores.english:
            language = Lang.HINDI
        else:
            language = tie_breaker

        total = scores.english + scores.target
        confidence = abs(scores.english - scores.target) / total if total else 0.0
        logger.debug("Language scored", language=language.value, english=scores.english, target=scores.target)

        return LanguageResult(
            language=language,
            confidence=round(confidence, 4),
            scores=scores,
        )

    def lexical_score(self, tokens: List[str], text: str = "") -> LexicalScore:
        """Sum word weights and grammar-marker bonuses for both languages"""
        english = 0.0
        target = 0.0
        english_strong = False
        target_strong = False

        for token in tokens:
            if token in lexicon.HINDI_STRONG_WORDS:
                target += lexicon.STRONG_WEIGHT
                target_strong = True
            elif token in lexicon.HINDI_COMMON_WORDS:
                target += lexicon.COMMON_WEIGHT

            if token in lexicon.ENGLISH_STRONG_WORDS:
                english += lexicon.STRONG_WEIGHT
                english_strong = True
            elif token in lexicon.ENGLISH_COMMON_WORDS:
                english += lexicon.COMMON_WEIGHT

        target += self._target_grammar_bonus(tokens)
        english += self._english_grammar_bonus(tokens)

        if not english_strong and not target_strong and self._mostly_latin(text):
            english += lexicon.LATIN_BASELINE_BONUS

        return LexicalScore(english=english, target=target)

    @staticmethod
    def _target_grammar_bonus(tokens: List[str]) -> float:
        bonus = 0.0
        if any(token in lexicon.POSSESSIVE_MARKERS for token in tokens):
            bonus += lexicon.POSSESSIVE_BONUS

        # "ram ne shyam ko ..." - the two parts may sit anywhere, in order
        first, second = lexicon.ERGATIVE_MARKER
        if first in tokens and second in tokens[tokens.index(first) + 1:]:
            bonus += lexicon.ERGATIVE_BONUS

        if lexicon.LOCATIVE_MARKER in tokens:
            bonus += lexicon.LOCATIVE_BONUS

        if tokens and tokens[-1] in lexicon.HINDI_FINAL_WORDS:
            bonus += lexicon.HINDI_FINAL_BONUS
        return bonus

    @staticmethod
    def _english_grammar_bonus(tokens: List[str]) -> float:
        bonus = 0.0
        if "to" in tokens and "ko" not in tokens:
            bonus += lexicon.ENGLISH_TO_BONUS
        if tokens and tokens[0] in lexicon.ENGLISH_LEADING_WORDS:
            bonus += lexicon.ENGLISH_LEADING_BONUS
        return bonus

    @staticmethod
    def _mostly_latin(text: str) -> bool:
        letters = [ch for ch in text if ch.isalpha()]
        if not letters:
            return False
        latin = len(lexicon.LATIN_LETTER_RE.findall(text))
        return latin * 2 > len(letters)
