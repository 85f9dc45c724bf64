# src/flatsrc/utils/tokenizer.py
from typing import Callable

import tiktoken

from flatsrc.config import TOKEN_SYMBOLS

# Any callable mapping text to a non-negative token count can size the budget
TokenEstimator = Callable[[str], int]


def estimate_tokens(text: str) -> int:
    """
    Approximates the token count of source text without a model tokenizer.
    words + symbols/2 + newlines, but never less than a quarter of the length.
    """
    words = len(text.split())
    symbols = sum(1 for ch in text if ch in TOKEN_SYMBOLS)
    newlines = text.count("\n")

    tokens = words + symbols // 2 + newlines
    return max(tokens, len(text) // 4)


class Tokenizer:
    _encoding = None

    @classmethod
    def get_encoding(cls):
        if cls._encoding is None:
            try:
                cls._encoding = tiktoken.get_encoding("cl100k_base")
            except Exception:
                # Fallback
                cls._encoding = tiktoken.get_encoding("p50k_base")
        return cls._encoding

    @staticmethod
    def count(text: str) -> int:
        """Counts tokens with the tiktoken encoding."""
        return len(Tokenizer.get_encoding().encode(text))


ESTIMATORS = {
    "heuristic": estimate_tokens,
    "tiktoken": Tokenizer.count,
}
