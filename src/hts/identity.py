# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Deterministic label identity synthesis."""

import hashlib
import logging
import re

from hts.model import LabelIdentity, Occurrence

logger = logging.getLogger(__name__)

_NON_KEY_CHARS = re.compile(r"[^a-z0-9]+")


class IdentityError(ValueError):
    """Represent text that cannot produce a label key."""


def normalize_key(raw_text: str) -> str:
    """Derive a label key from candidate text.

    The text is lowercased and every run of characters outside ``[a-z0-9]``
    collapses to one underscore. Text with letters or digits outside ASCII
    gets a short md5 suffix so distinct strings keep distinct keys; text
    with no ASCII slug at all becomes ``text_<md5>``. A key starting with a
    digit is prefixed with ``text_`` to stay a valid identifier.

    Args:
        raw_text: Exact occurrence text.

    Returns:
        Identifier-safe key.

    Raises:
        IdentityError: If the text has no letters or digits.
    """
    slug = _NON_KEY_CHARS.sub("_", raw_text.lower()).strip("_")
    has_non_ascii = any(not char.isascii() and char.isalnum() for char in raw_text)
    if has_non_ascii:
        digest = hashlib.md5(raw_text.encode("utf-8")).hexdigest()[:8]
        slug = f"{slug}_{digest}" if slug else f"text_{digest}"
    if not slug:
        raise IdentityError(f"Text has no letters or digits: {raw_text!r}")
    if slug[0].isdigit():
        slug = f"text_{slug}"
    return slug


def scope_for(context_name: str | None, default_scope: str = "common") -> str:
    """Derive the label scope from an enclosing declaration name."""
    if not context_name:
        return default_scope
    return context_name[0].lower() + context_name[1:] + "View"


class LabelIdentitySynthesizer:
    """Map occurrences onto ``(scope, key)`` label identities."""

    def __init__(self, default_scope: str = "common") -> None:
        """Initialize the synthesizer.

        Args:
            default_scope: Scope for occurrences without an enclosing name.
        """
        self._default_scope = default_scope

    def synthesize(self, occurrence: Occurrence) -> LabelIdentity:
        """Derive the identity of one occurrence.

        Raises:
            IdentityError: If the occurrence text yields no key.
        """
        return LabelIdentity(
            scope=scope_for(occurrence.context_name, self._default_scope),
            key=normalize_key(occurrence.raw_text),
        )
