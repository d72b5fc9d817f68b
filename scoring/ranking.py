from typing import List, Mapping, Optional, Sequence, Tuple

from core.result import CategoryScore


def rank_categories(scores: Mapping[str, CategoryScore], declared_order: Sequence[str]) -> List[str]:
    """
    Categories ordered best first.

    Ties on percentage go to the higher raw sum, then to whichever
    category was declared first.
    """
    position = {category: i for i, category in enumerate(declared_order)}

    def sort_key(category: str):
        score = scores[category]
        return (-score.percentage, -score.raw, position.get(category, len(position)))

    return sorted(scores, key=sort_key)


def top_three(ranking: Sequence[str]) -> Tuple[str, Optional[str], Optional[str]]:
    padded = list(ranking[:3]) + [None] * (3 - min(len(ranking), 3))
    return padded[0], padded[1], padded[2]
