"""
Free functions over ConsentMatrix values
"""
from typing import Iterable, Iterator, Optional, Sequence, Set, Tuple

from privacy_consent.components.contracts import ConsentMatrix
from privacy_consent.core.errors import (InvalidConsentPair, InvalidVocabularyReference,
                                         MalformedState, TokenKind)
from privacy_consent.core.vocabulary import Vocabulary

Pair = Tuple[str, str]
Group = Tuple[Tuple[str, ...], Tuple[str, ...]]


def empty_matrix(vocabulary: Vocabulary) -> ConsentMatrix:
    """All-false matrix sized from the vocabulary"""
    row = (False,) * len(vocabulary.purposes)
    return ConsentMatrix(
        categories=vocabulary.categories,
        purposes=vocabulary.purposes,
        cells=(row,) * len(vocabulary.categories),
    )


def require_pair(vocabulary: Vocabulary, category: str, purpose: str, context: Optional[str] = None):
    """Raise InvalidVocabularyReference unless both tokens are known"""
    if not vocabulary.is_category(category):
        raise InvalidVocabularyReference(TokenKind.CATEGORY, category, context)
    if not vocabulary.is_purpose(purpose):
        raise InvalidVocabularyReference(TokenKind.PURPOSE, purpose, context)


def matrix_from_cells(
    vocabulary: Vocabulary,
    pairs: Iterable[Pair],
    context: Optional[str] = None,
) -> ConsentMatrix:
    """Build a matrix with exactly the given (category, purpose) cells set"""
    grid = [[False] * len(vocabulary.purposes) for _ in vocabulary.categories]
    for category, purpose in pairs:
        require_pair(vocabulary, category, purpose, context)
        grid[vocabulary.category_index(category)][vocabulary.purpose_index(purpose)] = True
    return ConsentMatrix(
        categories=vocabulary.categories,
        purposes=vocabulary.purposes,
        cells=tuple(tuple(row) for row in grid),
    )


def true_cells(matrix: ConsentMatrix) -> Iterator[Pair]:
    """Yield every set cell in vocabulary order"""
    for category, row in zip(matrix.categories, matrix.cells):
        for purpose, value in zip(matrix.purposes, row):
            if value is True:
                yield category, purpose


def contains_true(matrix: ConsentMatrix) -> bool:
    return any(True for _ in true_cells(matrix))


def cell(matrix: ConsentMatrix, category: str, purpose: str) -> bool:
    """Look up one cell, raising MalformedState if the matrix cannot answer"""
    if not isinstance(matrix, ConsentMatrix):
        raise MalformedState(f"expected a consent matrix, got {type(matrix).__name__}")
    try:
        row_index = matrix.categories.index(category)
        column_index = matrix.purposes.index(purpose)
    except (ValueError, AttributeError):
        raise MalformedState(
            f"matrix has no cell for ({category}, {purpose})",
            category=category,
            purpose=purpose,
        )
    try:
        value = matrix.cells[row_index][column_index]
    except (IndexError, TypeError):
        raise MalformedState(f"row '{category}' is missing or too short", category=category)
    if not isinstance(value, bool):
        raise MalformedState(
            f"cell ({category}, {purpose}) is {type(value).__name__}, not bool",
            category=category,
            purpose=purpose,
        )
    return value


def expand_groups(groups: Iterable[Group]) -> Set[Pair]:
    """Cross-product expansion of (category-set, purpose-set) groups"""
    return {
        (category, purpose)
        for categories, purposes in groups
        for category in categories
        for purpose in purposes
    }


def split_pair(pair: Sequence[str]) -> Pair:
    """Unpack a (category, purpose) pair, rejecting any other arity"""
    if isinstance(pair, str) or not isinstance(pair, Sequence) or len(pair) != 2:
        raise InvalidConsentPair(pair)
    return pair[0], pair[1]
