"""Card resolution from reader-supplied UIDs.

Readers are heterogeneous: some emit the full UID, some truncate it, some
byte-swap it, some zero-pad it. Resolution runs an ordered cascade of match
rules from strict to fuzzy and stops at the first rule that yields a card.

Each rule is a pure description: how to derive a lookup key from the
normalized forms of the raw UID, how stored cards are compared with that
key, and whether non-active cards may match. Adding support for a new
reader quirk means appending a rule, not editing the existing ones.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from farepay.database.base import Database, UidMatch, UidPattern
from farepay.domain.entities import Card
from farepay.domain.errors import CardNotFound
from farepay.utils.uid_normalizer import (
    FOUR_BYTE_PREFIX,
    first_n_bytes,
    normalize_hex,
    reverse_byte_order,
    strip_trailing_zeros,
)

logger = logging.getLogger(__name__)

# Shortest key a prefix rule will search with (one byte)
MIN_PREFIX_KEY_LENGTH = 2

# Prefix keys shorter than one 4-byte UID must match exactly one card
SHORT_KEY_LENGTH = FOUR_BYTE_PREFIX


@dataclass(frozen=True)
class UidForms:
    """The comparable forms of one raw UID."""

    raw: str
    normalized: str
    stripped: str

    @classmethod
    def from_raw(cls, raw_uid: str) -> "UidForms":
        normalized = normalize_hex(raw_uid)
        return cls(raw=raw_uid, normalized=normalized, stripped=strip_trailing_zeros(normalized))

    @property
    def suggestion(self) -> str:
        """Best canonical form to register an unknown card under."""
        return self.normalized or self.raw.strip()


@dataclass(frozen=True)
class MatchRule:
    """One step of the resolution cascade."""

    name: str
    kind: UidMatch
    key: Callable[[UidForms], Optional[str]]
    active_only: bool


def _reversed_key(forms: UidForms) -> Optional[str]:
    return reverse_byte_order(forms.stripped)


def _four_byte_key(forms: UidForms) -> Optional[str]:
    if len(forms.stripped) < FOUR_BYTE_PREFIX:
        return None
    return first_n_bytes(forms.stripped, FOUR_BYTE_PREFIX)


DEFAULT_RULES: tuple[MatchRule, ...] = (
    MatchRule("raw", UidMatch.RAW, lambda forms: forms.raw, active_only=False),
    MatchRule("normalized", UidMatch.EXACT, lambda forms: forms.normalized, active_only=False),
    MatchRule("zero_stripped", UidMatch.EXACT, lambda forms: forms.stripped, active_only=False),
    MatchRule("prefix", UidMatch.PREFIX, lambda forms: forms.stripped, active_only=True),
    MatchRule("reversed", UidMatch.PREFIX, _reversed_key, active_only=True),
    MatchRule("four_byte_prefix", UidMatch.PREFIX, _four_byte_key, active_only=True),
)


def matches(rule: MatchRule, key: str, card: Card) -> bool:
    """Whether a stored card satisfies a rule for the given key."""
    if rule.active_only and not card.is_active:
        return False
    if rule.kind is UidMatch.RAW:
        return card.uid == key
    if rule.kind is UidMatch.EXACT:
        return card.uid_normalized == key
    stored = card.uid_normalized
    return bool(stored) and (stored.startswith(key) or key.startswith(stored))


def rank(card: Card) -> tuple:
    """Sort key: longest stored UID first, active cards first, then lowest ID."""
    return (-len(card.uid_normalized), not card.is_active, card.id)


@dataclass(frozen=True)
class Resolution:
    """A resolved card and the rule that found it."""

    card: Card
    rule: str
    key: str


class CardResolver:
    """Resolve raw reader UIDs to exactly one card."""

    def __init__(self, db: Database, rules: tuple[MatchRule, ...] = DEFAULT_RULES):
        """Initialize card resolver.

        Args:
            db: Database instance
            rules: Match rules, evaluated in order
        """
        self.db = db
        self.rules = rules

    def resolve(self, raw_uid: str) -> Resolution:
        """Resolve a raw UID.

        Rules that allow non-active cards can return a blocked, expired or
        lost card so the caller can report its status precisely.

        Args:
            raw_uid: UID string as sent by the reader

        Returns:
            Resolution with the matched card

        Raises:
            CardNotFound: If no rule matched; carries the suggested UID
        """
        forms = UidForms.from_raw(raw_uid)
        tried: set[tuple[UidMatch, str]] = set()

        for rule in self.rules:
            key = rule.key(forms)
            if not key or (rule.kind, key) in tried:
                continue
            if rule.kind is UidMatch.PREFIX and len(key) < MIN_PREFIX_KEY_LENGTH:
                continue
            tried.add((rule.kind, key))

            pattern = UidPattern(kind=rule.kind, value=key)
            candidates = [
                card
                for card in self.db.find_cards_by_uid(pattern, active_only=rule.active_only)
                if matches(rule, key, card)
            ]
            if not candidates:
                continue

            if rule.kind is UidMatch.PREFIX and len(key) < SHORT_KEY_LENGTH and len(candidates) > 1:
                logger.warning(
                    "Short UID key %r matched cards %s by rule %s; refusing to guess",
                    key,
                    [card.id for card in candidates],
                    rule.name,
                )
                continue

            candidates.sort(key=rank)
            chosen = candidates[0]
            if len(candidates) > 1:
                self._warn_ambiguous(rule, key, chosen, candidates)
            logger.debug("UID %r resolved to card %s by rule %s", raw_uid, chosen.id, rule.name)
            return Resolution(card=chosen, rule=rule.name, key=key)

        raise CardNotFound(raw_uid, forms.suggestion)

    @staticmethod
    def _warn_ambiguous(rule: MatchRule, key: str, chosen: Card, candidates: list[Card]) -> None:
        logger.warning(
            "UID key %r matched %d cards by rule %s; chose card %s over %s",
            key,
            len(candidates),
            rule.name,
            chosen.id,
            [card.id for card in candidates[1:]],
        )
