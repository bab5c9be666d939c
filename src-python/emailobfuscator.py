# emailobfuscator.py
# EmailObfuscator 1.x - Base Library
#
# Obfuscates email addresses for embedding in web pages:
#  1) The address is split into one token per character (letter / @ / . / symbol)
#  2) Optionally, letters are rotated through a fixed substitution alphabet
#     (Caesar shift 4 or ROT13), with early-stop rules around '@' and '.'
#  3) '@' and '.' are rewritten to the markers "(at)" and "(dot)"
#
# Ciphering happens before the marker rewrite, so a scraper that only reverts
# "(at)"/"(dot)" still ends up with scrambled letters.
#
# NOTE: This is NOT encryption. It only raises the bar for naive scrapers.

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

EMAIL_OBFUSCATOR_VERSION = "1.0"


# ============================================================
# Errors
# ============================================================

class EmailObfuscatorError(ValueError):
    pass


class UnknownEncryptionMethod(EmailObfuscatorError):
    def __init__(self, name: object):
        self.name = name
        super().__init__(f"Unknown encryption method {name!r}")


class MalformedObfuscatedText(EmailObfuscatorError):
    """Raised when a '(' does not open a valid "(at)" or "(dot)" marker."""

    def __init__(self, position: int, reason: str = "not an obfuscated email"):
        self.position = position
        super().__init__(f"Malformed obfuscated text at position {position}: {reason}")


# ============================================================
# Tokens
# ============================================================

class TokenKind(Enum):
    LETTER = "LETTER"
    AT = "AT_SYMBOL"
    DOT = "DOT"
    SYMBOL = "SYMBOL"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str


AT_MARKER = "(at)"
DOT_MARKER = "(dot)"


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"

def is_ascii_upper(ch: str) -> bool:
    return "A" <= ch <= "Z"

def is_ascii_lower(ch: str) -> bool:
    return "a" <= ch <= "z"

def is_alnum_ascii(ch: str) -> bool:
    return is_ascii_lower(ch) or is_ascii_upper(ch) or is_digit(ch)


def classify(ch: str) -> TokenKind:
    if is_alnum_ascii(ch):
        return TokenKind.LETTER
    if ch == "@":
        return TokenKind.AT
    if ch == ".":
        return TokenKind.DOT
    return TokenKind.SYMBOL


def tokenize(text: str) -> List[Token]:
    """One token per character, no lookahead. Markers are not recognized here."""
    return [Token(classify(c), c) for c in text]


def merge_tokens(tokens: Sequence[Token]) -> str:
    return "".join(t.value for t in tokens)


# ============================================================
# Substitution alphabet
# The i/j and P/Q orderings are part of the wire format: keep them.
# ============================================================

ALPHABET = "abcdefghjiklmnopqrstuvwxyz1234567890ABCDEFGHIJKLMNOPRQSTUVWXYZ"
if len(set(ALPHABET)) != len(ALPHABET):
    raise RuntimeError("ALPHABET must not contain duplicate symbols")

_ALPHABET_INV = {ch: i for i, ch in enumerate(ALPHABET)}


def substitute(ch: str, shift: int) -> str:
    idx = _ALPHABET_INV.get(ch)
    if idx is None:
        raise ValueError(f"Character not in substitution alphabet: {ch!r}")
    return ALPHABET[(idx + shift) % len(ALPHABET)]


# ============================================================
# Settings + cipher strategies
# ============================================================

@dataclass(frozen=True)
class Settings:
    # Stop ciphering at the first '.': "example@example.com" keeps its "com".
    stop_after_dot: bool = True
    # Leave everything between '@' and the next '.' unciphered.
    stop_after_at: bool = False


DEFAULT_SETTINGS = Settings()


class EncryptionMethod(str, Enum):
    CAESAR_CYPHER = "CAESAR_CYPHER"
    ROT13 = "ROT13"


def apply_cipher(tokens: Sequence[Token], shift: int, settings: Settings = DEFAULT_SETTINGS) -> List[Token]:
    """
    Rotates every LETTER token by `shift`, honoring the early-stop settings.
    Returns a new list; the input sequence is left untouched.

    - AT with stop_after_at: the cursor jumps to the next DOT (or the end);
      the DOT is then handled like any other DOT.
    - DOT with stop_after_dot: ciphering stops, the DOT and the rest are copied as-is.
    """
    out: List[Token] = list(tokens)
    n = len(out)
    i = 0

    while i < n:
        tok = out[i]

        if tok.kind is TokenKind.LETTER:
            out[i] = replace(tok, value=substitute(tok.value, shift))
        elif tok.kind is TokenKind.AT and settings.stop_after_at:
            z = i + 1
            while z < n and out[z].kind is not TokenKind.DOT:
                z += 1
            i = z
            continue
        elif tok.kind is TokenKind.DOT and settings.stop_after_dot:
            logger.debug("cipher stopped at dot (token %d)", i)
            break

        i += 1

    return out


@dataclass(frozen=True)
class CipherStrategy:
    name: str
    shift: int

    def encrypt(self, tokens: Sequence[Token], settings: Settings = DEFAULT_SETTINGS) -> List[Token]:
        return apply_cipher(tokens, self.shift, settings)

    def decrypt(self, tokens: Sequence[Token], settings: Settings = DEFAULT_SETTINGS) -> List[Token]:
        return apply_cipher(tokens, -self.shift, settings)


CIPHERS: Dict[EncryptionMethod, CipherStrategy] = {
    EncryptionMethod.CAESAR_CYPHER: CipherStrategy("Caesar", 4),
    EncryptionMethod.ROT13: CipherStrategy("ROT13", 13),
}

MethodLike = Union[EncryptionMethod, str, None]


def resolve_method(method: MethodLike) -> Optional[CipherStrategy]:
    if method is None:
        return None
    try:
        return CIPHERS[EncryptionMethod(method)]
    except (ValueError, KeyError):
        raise UnknownEncryptionMethod(method) from None


# ============================================================
# Markers
# ============================================================

def rewrite_markers(tokens: Sequence[Token]) -> List[Token]:
    out: List[Token] = []
    for t in tokens:
        if t.kind is TokenKind.AT:
            out.append(replace(t, value=AT_MARKER))
        elif t.kind is TokenKind.DOT:
            out.append(replace(t, value=DOT_MARKER))
        else:
            out.append(t)
    return out


def _spells(tokens: Sequence[Token], start: int, expected: str) -> bool:
    got = "".join(t.value for t in tokens[start : start + len(expected)])
    return got.lower() == expected


def collapse_markers(tokens: Sequence[Token]) -> List[Token]:
    """
    Folds "(at)" / "(dot)" token runs back into single AT / DOT tokens.
    Any other '(' is rejected. Token indices equal character offsets here,
    since `tokens` comes straight from tokenize().
    """
    out: List[Token] = []
    n = len(tokens)
    i = 0

    while i < n:
        tok = tokens[i]
        if tok.value != "(":
            out.append(tok)
            i += 1
            continue

        # "(at)" is the shortest marker: need at least 3 more tokens
        if i + 3 >= n:
            raise MalformedObfuscatedText(i, "truncated marker")

        opener = tokens[i + 1].value.lower()
        if opener == "a":
            if not _spells(tokens, i + 2, "t)"):
                raise MalformedObfuscatedText(i, "expected (at)")
            out.append(Token(TokenKind.AT, "@"))
            i += len(AT_MARKER)
        elif opener == "d":
            if i + 4 >= n:
                raise MalformedObfuscatedText(i, "truncated marker")
            if not _spells(tokens, i + 2, "ot)"):
                raise MalformedObfuscatedText(i, "expected (dot)")
            out.append(Token(TokenKind.DOT, "."))
            i += len(DOT_MARKER)
        else:
            raise MalformedObfuscatedText(i, f"unknown marker opener {tokens[i + 1].value!r}")

    return out


# ============================================================
# Public API
# ============================================================

class EmailObfuscator:
    """
    Obfuscates / unobfuscates single email addresses.

    The same `settings` must be used on both sides: the decrypt traversal
    stops and skips at the same tokens the encrypt traversal did.
    """

    ENCRYPTION_METHOD = EncryptionMethod

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings if settings is not None else DEFAULT_SETTINGS

    def obfuscate(self, email: str, encryption: MethodLike = None) -> str:
        tokens = tokenize(email)

        strategy = resolve_method(encryption)
        if strategy is not None:
            logger.debug("obfuscate: applying %s (shift %d)", strategy.name, strategy.shift)
            tokens = strategy.encrypt(tokens, self.settings)
        else:
            logger.warning(
                "No encryption method was passed in. The obfuscated email may be easy for bots to recover."
            )

        return merge_tokens(rewrite_markers(tokens))

    def unobfuscate(self, text: str, encryption: MethodLike = None) -> str:
        strategy = resolve_method(encryption)

        tokens = collapse_markers(tokenize(text))

        if strategy is not None:
            logger.debug("unobfuscate: reverting %s (shift %d)", strategy.name, strategy.shift)
            tokens = strategy.decrypt(tokens, self.settings)

        return merge_tokens(tokens)


def obfuscate(email: str, method: MethodLike = None, settings: Optional[Settings] = None) -> str:
    return EmailObfuscator(settings).obfuscate(email, method)


def unobfuscate(text: str, method: MethodLike = None, settings: Optional[Settings] = None) -> str:
    return EmailObfuscator(settings).unobfuscate(text, method)
