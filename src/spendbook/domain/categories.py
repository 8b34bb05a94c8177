"""Category relation handling.

Joined subcategory rows carry their parent category in one of three shapes:
missing, a single object, or a list. ``category_relation_from_raw`` is the
only place that looks at the raw shape; everything else works with the
tagged ``CategoryRelation`` union.
"""

from typing import Any, Mapping, Optional

from spendbook.domain.entities import (
    CategoryInfo,
    CategoryRelation,
    ManyCategories,
    SingleCategory,
    TransactionNature,
)
from spendbook.domain.nature import normalize_nature


def _info_from_mapping(raw: Mapping[str, Any]) -> CategoryInfo:
    return CategoryInfo(
        name=raw.get("name"),
        transaction_nature=raw.get("transaction_nature"),
    )


def category_relation_from_raw(raw: Any) -> CategoryRelation:
    """Turn a loosely shaped joined parent category into a CategoryRelation.

    Args:
        raw: None, a mapping or CategoryInfo, or a list of those

    Returns:
        None, SingleCategory or ManyCategories
    """
    if raw is None:
        return None
    if isinstance(raw, CategoryInfo):
        return SingleCategory(raw)
    if isinstance(raw, Mapping):
        return SingleCategory(_info_from_mapping(raw))
    if isinstance(raw, (list, tuple)):
        infos = tuple(
            item if isinstance(item, CategoryInfo) else _info_from_mapping(item)
            for item in raw
            if item is not None
        )
        return ManyCategories(infos)
    raise TypeError(f"Unsupported category relation: {type(raw).__name__}")


def resolve_category_relation(relation: CategoryRelation) -> Optional[CategoryInfo]:
    """Return the single parent category a relation points at.

    A list relation resolves to its first entry; an empty list or a missing
    relation resolves to None.
    """
    if relation is None:
        return None
    if isinstance(relation, SingleCategory):
        return relation.category
    if relation.categories:
        return relation.categories[0]
    return None


def resolve_subcategory_nature(
    own_nature: Optional[str], relation: CategoryRelation
) -> Optional[TransactionNature]:
    """Resolve a subcategory's nature, preferring its own over the parent's."""
    nature = normalize_nature(own_nature)
    if nature is not None:
        return nature
    parent = resolve_category_relation(relation)
    if parent is None:
        return None
    return normalize_nature(parent.transaction_nature)
