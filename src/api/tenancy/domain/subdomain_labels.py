"""Subdomain label derivation for new stores.

A store's label is derived from a seed (usually the store or owner name):
lowercased, reduced to ``[a-z0-9]``, and suffixed with a counter until a
free one is found. ``"Anjum's"`` becomes ``anjums``, then ``anjums2``,
``anjums3`` and so on.
"""

from __future__ import annotations

import re
import secrets
from typing import Iterable, Iterator

from tenancy.domain.hostname import MAX_LABEL_LENGTH, is_valid_label

FALLBACK_BASE = "store"
RANDOM_SUFFIX_BYTES = 3

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def label_base(seed: str) -> str:
    """Reduce a seed to the alphanumeric base of a label."""
    base = _NON_ALNUM.sub("", (seed or "").lower())
    return base[:MAX_LABEL_LENGTH] or FALLBACK_BASE


def _with_suffix(base: str, suffix: str) -> str:
    return base[: MAX_LABEL_LENGTH - len(suffix)] + suffix


def candidate_labels(
    seed: str,
    forbidden: Iterable[str],
    max_attempts: int,
    random_attempts: int,
) -> Iterator[str]:
    """Yield labels to try, in order, for a new store.

    ``base``, ``base2`` ... up to ``max_attempts`` sequential candidates,
    then ``random_attempts`` candidates with a random hex suffix. Forbidden
    labels (reserved and bare platform labels) are skipped.
    """
    blocked = set(forbidden)
    base = label_base(seed)

    for n in range(1, max_attempts + 1):
        label = base if n == 1 else _with_suffix(base, str(n))
        if label not in blocked:
            yield label

    for _ in range(random_attempts):
        label = _with_suffix(base, secrets.token_hex(RANDOM_SUFFIX_BYTES))
        if label not in blocked:
            yield label


def check_explicit_label(label: str) -> str:
    """Normalize a label requested by a store owner.

    Raises:
        ValueError: If the label is not a single lowercase DNS label.
    """
    normalized = (label or "").strip().lower()
    if not is_valid_label(normalized):
        raise ValueError(
            f"Invalid subdomain label '{label}': use 1-63 letters, digits or "
            "hyphens, not starting or ending with a hyphen"
        )
    return normalized
