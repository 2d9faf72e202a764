"""
Sentence segmentation for free-text comments.

The split is a heuristic: a period or semicolon followed by a space ends a
sentence. Abbreviations ("e.g. foo") are occasionally mis-split; that is
accepted rather than handled with a full sentence parser.
"""

import re
from typing import List, Optional

from docoracle.config import get_config


def split_sentences(text: str, config: Optional[dict] = None) -> List[str]:
    """
    Split comment text into candidate sentences.

    Sentences shorter than the configured minimum length (after trimming)
    are discarded as noise.

    Args:
        text: Raw comment text
        config: Optional configuration dictionary (defaults to get_config())

    Returns:
        Retained sentences, trimmed, in comment order

    Example:
        >>> split_sentences("Returns the size. Same as size(); never null")
        ['Returns the size', 'Same as size()', 'never null']
    """
    config = config or get_config()
    pattern = config["sentences"]["split_pattern"]
    min_length = config["sentences"]["min_length"]

    if not text:
        return []

    # Comments extracted from source often carry line breaks mid-sentence
    normalized = re.sub(r"\s+", " ", text)

    sentences = []
    for raw in re.split(pattern, normalized):
        sentence = raw.strip()
        if len(sentence) >= min_length:
            sentences.append(sentence)
    return sentences
