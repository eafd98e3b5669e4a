"""Object-segment token parser — the inverse of the allocator's object tokens."""

from __future__ import annotations

from dataclasses import dataclass

from percepta.engine.symbols import vocabulary as vocab


@dataclass(frozen=True)
class ObjectToken:
    text: str
    category: str  # category letter
    modifiers: str
    position: int  # 3×3 grid cell, row-major
    well_formed: bool

    @property
    def letters(self) -> int:
        return 1 + len(self.modifiers)


def expected_modifiers(category: str, letters: int) -> str:
    alphabet = vocab.CATEGORY_ALPHABET
    base = alphabet.index(category)
    return "".join(alphabet[(base + i) % len(alphabet)] for i in range(1, letters))


def parse_object_tokens(segment: str) -> tuple[list[ObjectToken], int]:
    """Split an object segment into tokens.

    Letters are read until a position letter closes the token. Returns the
    tokens and the number of trailing characters that formed no token
    (padding excluded).
    """
    tokens: list[ObjectToken] = []
    body = segment.rstrip(vocab.OBJECT_PAD)
    current = ""
    for ch in body:
        if ch in vocab.POSITION_ALPHABET and current:
            category, modifiers = current[0], current[1:]
            well_formed = (
                category in vocab.CATEGORY_ALPHABET
                and len(current) <= 3
                and modifiers == expected_modifiers(category, len(current))
            )
            tokens.append(
                ObjectToken(
                    text=current + ch,
                    category=category,
                    modifiers=modifiers,
                    position=vocab.POSITION_ALPHABET.index(ch),
                    well_formed=well_formed,
                )
            )
            current = ""
        else:
            current += ch
    return tokens, len(current)
