"""Query segmentation for search scoring."""

from __future__ import annotations

from collections.abc import Callable

import jieba

Segmenter = Callable[[str], list[str]]


def jieba_segment(text: str) -> list[str]:
    """Split mixed Chinese/English text into words, dropping whitespace tokens."""
    return [token for token in jieba.lcut(text) if token.strip()]
