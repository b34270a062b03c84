"""
Part-of-speech tagging for noun-phrase extraction.

Thin wrapper over nltk.pos_tag. The averaged perceptron model is not bundled
with nltk; when it is missing, tag() returns None and callers fall back to
regex patterns. Models are installed with scripts/fetch_nltk_data.py, never
downloaded from here.
"""

from typing import List, Optional, Sequence, Tuple

import nltk

from skillfit.contexts.extraction.logger import log_tagger_fallback


class PosTagger:
    """
    Lazily-probed POS tagger.

    Attributes:
        enabled: False disables tagging outright (forces the regex fallback)
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._available: Optional[bool] = None if enabled else False
        self.unavailable_reason: Optional[str] = None if enabled else "disabled"

    @property
    def available(self) -> bool:
        """True once a probe tag succeeded; probes on first access."""
        if self._available is None:
            self._available = self.tag(["probe"]) is not None
        return self._available

    def tag(self, tokens: Sequence[str]) -> Optional[List[Tuple[str, str]]]:
        """
        Tag tokens with Penn Treebank tags.

        Args:
            tokens: Pre-tokenized words

        Returns:
            List of (token, tag), or None if the tagger model is unavailable
        """
        if self._available is False:
            return None
        if not tokens:
            return []

        try:
            tagged = nltk.pos_tag(list(tokens))
        except LookupError:
            self._available = False
            self.unavailable_reason = "tagger model not installed (run scripts/fetch_nltk_data.py)"
            log_tagger_fallback(self.unavailable_reason)
            return None

        self._available = True
        return tagged
