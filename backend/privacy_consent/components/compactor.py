"""
Grouping compactor: turns a boolean category x purpose matrix into the smallest
list of wire groups obtained by merging purposes that share the same set of
categories.

Output order is part of the wire format: groups are sorted by the length of
their rendered text, then by the text itself, so a given matrix always encodes
to the same header value.
"""
from typing import Dict, List, Tuple

from privacy_consent.components.contracts import ConsentMatrix
from privacy_consent.components.matrix import Group, true_cells


def render_group(group: Group) -> str:
    """``{<categories> <purposes>}`` with single spaces"""
    categories, purposes = group
    return "{" + " ".join(categories + purposes) + "}"


def compact(matrix: ConsentMatrix) -> List[Group]:
    """Merge purposes with identical category sets into ordered groups"""
    categories_by_purpose: Dict[str, List[str]] = {}
    for category, purpose in true_cells(matrix):
        categories_by_purpose.setdefault(purpose, []).append(category)

    purposes_by_key: Dict[Tuple[str, ...], List[str]] = {}
    for purpose, categories in categories_by_purpose.items():
        key = tuple(sorted(categories))
        purposes_by_key.setdefault(key, []).append(purpose)

    groups = [
        (categories, tuple(sorted(purposes)))
        for categories, purposes in purposes_by_key.items()
    ]
    groups.sort(key=lambda group: _sort_key(render_group(group)))
    return groups


def _sort_key(text: str) -> Tuple[int, str]:
    return len(text), text


def render_groups(groups: List[Group]) -> str:
    return "".join(render_group(group) for group in groups)
