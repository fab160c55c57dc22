"""Text analysis mirroring Tantivy's ``default`` tokenizer.

Name patterns are normalized in Python before becoming term or prefix
queries, so they must go through the same steps the index applies to the
``name`` field:

1. split on every non-alphanumeric character
2. drop tokens of NAME_TOKEN_MAX_BYTES UTF-8 bytes or more
3. lowercase
"""

from __future__ import annotations

import re

from codeindexer.config.constants import NAME_TOKEN_MAX_BYTES

_TOKEN_RE = re.compile(r"[^\W_]+")


def analyze(text: str) -> list[str]:
    """Split ``text`` into index terms, in order."""
    tokens: list[str] = []
    for match in _TOKEN_RE.finditer(text):
        token = match.group(0)
        if len(token.encode("utf-8")) >= NAME_TOKEN_MAX_BYTES:
            continue
        tokens.append(token.lower())
    return tokens
