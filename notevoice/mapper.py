"""
Clinical-to-natural vocabulary mapping.

Builds the substitution table that lets generated notes say "showed" where a
clinical template would say "demonstrated", choosing the user's own word when
their profile contains one.
"""
import re
from typing import Literal

from pydantic import BaseModel, Field

from notevoice.models.profile_models import VocabularyMapping, VocabularyProfile


class MappingRule(BaseModel):
    """How to pick a natural equivalent for one clinical term.

    The first candidate found in the profile's verbs (kind='action') or
    descriptors (kind='descriptor') wins; otherwise the fallback; otherwise the
    clinical term maps to itself.
    """
    model_config = {"frozen": True}

    clinical: str = Field(..., min_length=1)
    kind: Literal["action", "descriptor"]
    candidates: tuple[str, ...] = Field(default_factory=tuple)
    fallback: str | None = None


def _rule(clinical: str, kind: str, candidates: tuple, fallback: str | None) -> MappingRule:
    return MappingRule(clinical=clinical, kind=kind, candidates=candidates, fallback=fallback)


DEFAULT_RULES = (
    # Action verbs
    _rule('demonstrated', 'action', ('showed', 'did'), 'did'),
    _rule('exhibited', 'action', ('showed', 'had'), 'had'),
    _rule('participated', 'action', ('joined', 'did'), 'did'),
    _rule('completed', 'action', ('finished',), None),
    _rule('initiated', 'action', ('started',), 'started'),
    _rule('engaged in', 'action', ('did',), 'did'),
    _rule('performed', 'action', ('did', 'made'), 'did'),
    _rule('proceeded', 'action', ('went',), 'went'),
    _rule('commenced', 'action', ('started',), 'started'),
    _rule('executed', 'action', ('did',), 'did'),
    _rule('administered', 'action', ('gave',), 'gave'),
    _rule('facilitated', 'action', ('helped',), 'helped'),

    # Descriptors
    _rule('successful', 'descriptor', ('good', 'great'), 'good'),
    _rule('effective', 'descriptor', ('good', 'helpful'), 'good'),
    _rule('appropriate', 'descriptor', ('good', 'nice'), 'good'),
    _rule('significant', 'descriptor', ('big',), 'big'),
    _rule('optimal', 'descriptor', ('best', 'good'), 'good'),
    _rule('efficiently', 'descriptor', ('well', 'quickly'), None),
    _rule('thoroughly', 'descriptor', ('well', 'careful'), None),
    _rule('promptly', 'descriptor', ('quickly',), None),
    _rule('comprehensive', 'descriptor', ('complete', 'detailed'), 'complete'),
)

REGISTER_SUBSTITUTIONS = {
    'facilitate': 'help',
    'utilize': 'use',
    'commence': 'start',
    'conclude': 'finish',
    'obtain': 'get',
    'acquire': 'get',
    'maintain': 'keep',
    'ensure': 'make sure',
    'provide': 'give',
    'receive': 'get',
    'accomplish': 'do',
    'achieve': 'do',
    'establish': 'set up',
    'implement': 'do',
    'coordinate': 'work with',
    'collaborate': 'work with',
    'independently': 'on their own',
    'autonomously': 'on their own',
    'subsequently': 'then',
    'following this': 'after that',
    'upon completion': 'once finished',
    'proceeded to': 'went to',
    'waste receptacle': 'garbage can',
    'designated laundry hamper': 'laundry basket',
    'verbal prompt': 'reminder',
}

REFERENTIAL_SUBSTITUTIONS = {
    'the individual': 'they',
    'the participant': 'they',
    'the client': 'they',
}


class ClinicalToNaturalMapper:
    """Derive a VocabularyMapping from a profile.

    The rule set is checked once at construction; build_mapping re-checks
    each mapping because profile-driven choices can differ per user.
    """

    def __init__(
        self,
        rules: tuple[MappingRule, ...] = DEFAULT_RULES,
        fixed: dict[str, str] | None = None,
        referential: dict[str, str] | None = None
    ):
        """
        Args:
            rules: Profile-dependent rules
            fixed: Profile-independent substitutions (defaults to REGISTER_SUBSTITUTIONS)
            referential: Role phrase substitutions (defaults to REFERENTIAL_SUBSTITUTIONS)

        Raises:
            ValueError: If a rule key is repeated or any possible natural value
                contains a clinical key, which would make substitution non-idempotent
        """
        self.rules = tuple(rules)
        self.fixed = dict(REGISTER_SUBSTITUTIONS if fixed is None else fixed)
        self.referential = dict(REFERENTIAL_SUBSTITUTIONS if referential is None else referential)

        keys = [r.clinical for r in self.rules] + list(self.fixed)
        duplicates = {k for k in keys if keys.count(k) > 1}
        if duplicates:
            raise ValueError(f"Duplicate clinical terms in mapping rules: {sorted(duplicates)}")

        possible = {}
        for rule in self.rules:
            for value in rule.candidates + ((rule.fallback,) if rule.fallback else ()):
                possible[f"{rule.clinical} -> {value}"] = value
        for key, value in {**self.fixed, **self.referential}.items():
            possible[f"{key} -> {value}"] = value
        _check_idempotent(keys + list(self.referential), possible)

    def build_mapping(self, profile: VocabularyProfile) -> VocabularyMapping:
        """
        Build the clinical-to-natural table for one profile.

        Args:
            profile: Extracted style profile

        Returns:
            VocabularyMapping with an entry for every rule and fixed substitution
        """
        verbs = set(profile.action_verbs)
        descriptors = set(profile.descriptive_words)

        entries = {}
        for rule in self.rules:
            pool = verbs if rule.kind == 'action' else descriptors
            chosen = next((c for c in rule.candidates if c in pool), None)
            entries[rule.clinical] = chosen or rule.fallback or rule.clinical
        entries.update(self.fixed)

        return VocabularyMapping(entries=entries, referential=dict(self.referential))


def _check_idempotent(keys: list[str], values: dict[str, str]):
    """Reject tables where a replacement would itself be rewritten on a second pass."""
    patterns = {
        key: re.compile(r"\b" + r"\s+".join(map(re.escape, key.split())) + r"\b", re.IGNORECASE)
        for key in keys
    }
    for label, value in values.items():
        clinical = label.split(" -> ")[0]
        for key, pattern in patterns.items():
            if key == value == clinical:
                continue
            if pattern.search(value):
                raise ValueError(
                    f"Mapping '{label}' produces text containing clinical term '{key}'"
                )
