"""Phrase matcher: finds subtitle entries that mention a target phrase."""

from typing import Sequence

from phraseclip.models import PhraseMatch, SubtitleEntry

# Spelling variants seen across fansub releases.
AYANO_VARIANTS = (
    "Sugiura Ayano",
    "Sugiura Ayanou",
)

TOSHINO_VARIANTS = (
    "Toshino Kyouko",
    "Toshino Kyoko",
    "Toshinou Kyouko",
    "Toshinou Kyoko",
)

PHRASE_SETS: dict[str, tuple[str, ...]] = {
    "ayano": AYANO_VARIANTS,
    "toshino": TOSHINO_VARIANTS,
}

DEFAULT_PHRASE_SET = "ayano"

CLIP_LABEL = "TOSHINO_KYOUKO"


def get_phrase_set(name: str) -> tuple[str, ...]:
    """Look up a preset variant list by name."""
    try:
        return PHRASE_SETS[name]
    except KeyError:
        known = ", ".join(sorted(PHRASE_SETS))
        raise ValueError(f"Unknown phrase set {name!r} (expected one of: {known})") from None


def find_matches(
    entries: Sequence[SubtitleEntry], variants: Sequence[str]
) -> list[PhraseMatch]:
    """Return one match per entry whose text contains any of *variants*.

    Variants are tried in order and the first hit wins, so an entry never
    yields more than one match.  Matching is a case-sensitive substring test.
    """
    matches: list[PhraseMatch] = []
    for entry in entries:
        phrase = next((v for v in variants if v in entry.text), None)
        if phrase is not None:
            matches.append(PhraseMatch(start=entry.start, end=entry.end, phrase=phrase))
    return matches
