"""Stop-word based language guess for extracted text."""

from __future__ import annotations

import re
from collections import Counter
from typing import Dict, FrozenSet, Optional

_WORD = re.compile(r"[^\W\d_]+", re.UNICODE)

STOPWORDS: Dict[str, FrozenSet[str]] = {
    "en": frozenset("the and of to in is that for it with as was on are be by this not or have from at which an but".split()),
    "de": frozenset("der die und das ist nicht ein eine zu den mit von sich des auf für im dem auch als es wird sind".split()),
    "fr": frozenset("le la les et des est un une du que pas pour dans en qui sur au avec ce il sont par plus".split()),
    "es": frozenset("el la los las y de que en un una es por con para no se del al lo como más su pero".split()),
    "it": frozenset("il lo la gli le e di che un una è per non con del della in sono si al da come anche".split()),
    "nl": frozenset("de het een en van is dat niet op te zijn met voor die aan er ook als bij om wordt".split()),
    "pt": frozenset("o a os as e de que em um uma é para não com do da no na por se mais como dos".split()),
}

MIN_HITS = 3        # stop-word hits required before any language is reported
MIN_MARGIN = 1.25   # best score must beat the runner-up by this factor


def detect_language(text: str, min_words: int = 5) -> Optional[str]:
    """Return an ISO 639-1 code, or ``None`` when the evidence is too thin.

    Each language scores the number of words found in its stop-word list.
    Short texts and near-ties yield ``None``.
    """
    words = [w.lower() for w in _WORD.findall(text)]
    if len(words) < max(1, min_words):
        return None

    counts = Counter(words)
    scores = {
        lang: sum(counts[w] for w in stopwords)
        for lang, stopwords in STOPWORDS.items()
    }
    ranked = sorted(scores.items(), key=lambda kv: kv[1], reverse=True)
    (best, best_score), (_, runner_up) = ranked[0], ranked[1]
    if best_score < MIN_HITS:
        return None
    if runner_up and best_score < runner_up * MIN_MARGIN:
        return None
    return best
