"""Word counting and natural-boundary splitting.

Sizes are measured in whitespace-delimited words, not model tokens.
"""

from __future__ import annotations

import re

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
_FENCE_LINE = re.compile(r"^\s*(```|~~~)", re.MULTILINE)


def count_words(text: str) -> int:
    return len(text.split())


def _has_fence(text: str) -> bool:
    return _FENCE_LINE.search(text) is not None


def _merge_code_fences(paragraphs: list[str]) -> list[str]:
    """Rejoin paragraphs that a blank line inside a fenced block tore apart."""
    merged: list[str] = []
    pending: list[str] = []
    in_fence = False

    for para in paragraphs:
        pending.append(para)
        if len(_FENCE_LINE.findall(para)) % 2 == 1:
            in_fence = not in_fence
        if not in_fence:
            merged.append("\n\n".join(pending))
            pending = []

    # Unterminated fence: keep the tail as one block
    if pending:
        merged.append("\n\n".join(pending))
    return merged


def _split_words(line: str, max_words: int) -> list[str]:
    words = line.split()
    return [" ".join(words[i : i + max_words]) for i in range(0, len(words), max_words)]


def _hard_split(sentence: str, max_words: int) -> list[str]:
    """Split an over-budget run of text at line breaks, then at word boundaries.

    Lists and tables carry no sentence punctuation, so they arrive here as
    one long "sentence".
    """
    pieces: list[str] = []
    current = ""
    for line in sentence.split("\n"):
        line_words = count_words(line)
        if line_words == 0:
            continue
        if count_words(current) + line_words <= max_words:
            current += ("\n" if current else "") + line
            continue
        if current:
            pieces.append(current)
            current = ""
        if line_words > max_words:
            *full, current = _split_words(line, max_words)
            pieces.extend(full)
        else:
            current = line
    if current:
        pieces.append(current)
    return pieces


def _split_sentences(paragraph: str, max_words: int, chunks: list[str]) -> str:
    """Greedily pack sentences; flush full chunks and return the remainder."""
    current = ""
    for sentence in _SENTENCE_BREAK.split(paragraph):
        if count_words(sentence) > max_words:
            if current:
                chunks.append(current.strip())
            *full, current = _hard_split(sentence, max_words)
            chunks.extend(p.strip() for p in full)
        elif count_words(current) + count_words(sentence) <= max_words:
            current += (" " if current else "") + sentence
        else:
            if current:
                chunks.append(current.strip())
            current = sentence
    return current


def split_at_natural_boundaries(
    text: str,
    max_words: int,
    respect_code_blocks: bool = True,
) -> list[str]:
    """Split text into pieces of at most ``max_words`` words where possible.

    Paragraphs (blank-line separated) are packed greedily. A paragraph that
    alone exceeds the budget is split at sentence ends using the same greedy
    packing, and its last partial piece keeps accumulating following
    paragraphs. A single sentence that still exceeds the budget (an
    unpunctuated list or table) is cut at line breaks, then at word
    boundaries. With ``respect_code_blocks`` a fenced code block is never
    divided: blank lines inside it do not end a paragraph and it is not split
    at all, so it is the only piece that may exceed ``max_words``.

    Args:
        text: Section body.
        max_words: Word budget per piece.
        respect_code_blocks: Keep fenced code blocks whole.

    Returns:
        Non-empty pieces in document order.
    """
    paragraphs = _PARAGRAPH_BREAK.split(text)
    if respect_code_blocks:
        paragraphs = _merge_code_fences(paragraphs)

    chunks: list[str] = []
    current = ""

    for para in paragraphs:
        para_words = count_words(para)

        if count_words(current) + para_words <= max_words:
            current += ("\n\n" if current else "") + para
            continue

        if current:
            chunks.append(current.strip())

        if para_words > max_words and not (respect_code_blocks and _has_fence(para)):
            current = _split_sentences(para, max_words, chunks)
        else:
            current = para

    if current:
        chunks.append(current.strip())

    return [c for c in chunks if c]
