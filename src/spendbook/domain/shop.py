"""Shop domain service."""

from typing import Optional

from spendbook.database.base import RecordStore
from spendbook.domain.errors import ValidationError
from spendbook.domain.filters import (
    SHOP_COLUMNS,
    Page,
    SortState,
    matches_search,
    paginate,
    sort_records,
)


class ShopService:
    """Service for managing shops."""

    def __init__(self, db: RecordStore):
        self.db = db

    def create_shop(
        self, name: str, type: Optional[str] = None, image_url: Optional[str] = None
    ) -> str:
        """Create a shop.

        Args:
            name: Shop name, trimmed
            type: Optional shop type (ecommerce, bank, ...)
            image_url: Optional image URL

        Returns:
            Shop ID

        Raises:
            ValidationError: If the name is blank
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Shop name is required.")
        return self.db.create_shop(
            name=name,
            type=(type or "").strip() or None,
            image_url=(image_url or "").strip() or None,
        )

    def list_shops(
        self,
        search: str = "",
        sort: Optional[SortState] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page:
        """List shops matching ``search`` on name or type, sorted and paginated."""
        shops = [
            shop for shop in self.db.list_shops() if matches_search(search, shop.name, shop.type)
        ]
        shops = sort_records(shops, sort or SortState("name"), SHOP_COLUMNS)
        return paginate(shops, page, page_size)
