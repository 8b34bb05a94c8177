"""Category domain service."""

from typing import Optional

from spendbook.database.base import RecordStore
from spendbook.domain.categories import resolve_subcategory_nature
from spendbook.domain.entities import Category, Subcategory, TransactionNature
from spendbook.domain.errors import ValidationError
from spendbook.domain.filters import (
    CATEGORY_COLUMNS,
    SortState,
    matches_search,
    sort_records,
)
from spendbook.domain.nature import is_transfer_nature, normalize_nature, resolve_nature

DEFAULT_TRANSFER_CATEGORY = Category(
    id="a6f07c8d-4ec6-4c2b-8a7e-d2a5f8d5c1f0",
    name="General Transfer",
    transaction_nature=TransactionNature.TRANSFER,
)


def _clean(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return value.strip() or None


class CategoryService:
    """Service for managing categories and subcategories."""

    def __init__(self, db: RecordStore):
        """Initialize category service.

        Args:
            db: Record store instance
        """
        self.db = db

    def create_category(
        self,
        name: str,
        transaction_nature=None,
        image_url: Optional[str] = None,
        is_shop: bool = False,
    ) -> str:
        """Create a top-level category.

        Args:
            name: Category name, trimmed
            transaction_nature: Nature code or alias; unknown values fall
                back to expense
            image_url: Optional image URL, blank treated as none
            is_shop: Whether the category groups shops

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is blank
        """
        name = _clean(name)
        if name is None:
            raise ValidationError("Category name is required.")
        return self.db.create_category(
            name=name,
            transaction_nature=resolve_nature(transaction_nature, TransactionNature.EXPENSE),
            image_url=_clean(image_url),
            is_shop=is_shop,
        )

    def create_subcategory(
        self,
        name: str,
        category_id: Optional[str] = None,
        transaction_nature=None,
        image_url: Optional[str] = None,
    ) -> str:
        """Create a subcategory, optionally under a parent category.

        Without an explicit nature, a subcategory under a parent inherits the
        parent's nature; a parentless one defaults to expense.

        Raises:
            ValidationError: If the name is blank
        """
        name = _clean(name)
        if name is None:
            raise ValidationError("Category name is required.")
        nature = normalize_nature(transaction_nature)
        if nature is None and not category_id:
            nature = TransactionNature.EXPENSE
        return self.db.create_subcategory(
            name=name,
            category_id=category_id,
            transaction_nature=nature,
            image_url=_clean(image_url),
        )

    def list_categories(
        self,
        search: str = "",
        nature: Optional[TransactionNature] = None,
        sort: Optional[SortState] = None,
    ) -> list[Category]:
        """List categories, with a default transfer category when none exists.

        Args:
            search: Text matched against the category name
            nature: Only categories of this nature
            sort: Column and direction; defaults to name ascending

        Returns:
            List of category entities
        """
        categories = list(self.db.list_categories())
        if not any(is_transfer_nature(c.transaction_nature) for c in categories):
            categories.append(DEFAULT_TRANSFER_CATEGORY)

        categories = [
            category
            for category in categories
            if matches_search(search, category.name)
            and (nature is None or category.transaction_nature == nature)
        ]
        return sort_records(categories, sort or SortState("name"), CATEGORY_COLUMNS)

    def list_subcategories(
        self, nature: Optional[TransactionNature] = None
    ) -> list[Subcategory]:
        """List subcategories, optionally only those resolving to ``nature``."""
        subcategories = self.db.list_subcategories()
        if nature is None:
            return subcategories
        return [
            sub
            for sub in subcategories
            if resolve_subcategory_nature(sub.transaction_nature, sub.relation) == nature
        ]
