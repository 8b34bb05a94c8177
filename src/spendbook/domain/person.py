"""Person domain service."""

from typing import Optional

from spendbook.database.base import RecordStore
from spendbook.domain.entities import PersonAggregate
from spendbook.domain.errors import ValidationError
from spendbook.domain.filters import (
    PEOPLE_COLUMNS,
    Page,
    SortState,
    TransactionFilters,
    filter_transactions,
    matches_search,
    paginate,
    sort_records,
)
from spendbook.domain.people import aggregate_people


class PersonService:
    """Service for managing people and their transaction summaries."""

    def __init__(self, db: RecordStore):
        """Initialize person service.

        Args:
            db: Record store instance
        """
        self.db = db

    def create_person(
        self, name: str, image_url: Optional[str] = None, is_group: bool = False
    ) -> str:
        """Create a person or group.

        Raises:
            ValidationError: If the name is blank
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Person name is required.")
        return self.db.create_person(
            name=name, image_url=(image_url or "").strip() or None, is_group=is_group
        )

    def summarize(
        self, filters: Optional[TransactionFilters] = None
    ) -> list[PersonAggregate]:
        """Aggregate the transactions matching ``filters`` per person.

        Args:
            filters: Transaction filters; the search text filters people by
                name instead of transactions, and paging is ignored

        Returns:
            List of PersonAggregate ordered by name
        """
        filters = filters or TransactionFilters()
        transactions = self.db.list_transactions(
            date_from=filters.date_from,
            date_to=filters.date_to,
            account_id=filters.account_id,
            person_id=filters.person_id,
            nature=filters.nature,
        )
        search = filters.search
        matched = filter_transactions(
            transactions,
            TransactionFilters(
                nature=filters.nature,
                account_id=filters.account_id,
                category_id=filters.category_id,
                person_id=filters.person_id,
                status=filters.status,
                date_from=filters.date_from,
                date_to=filters.date_to,
            ),
        )
        return [
            aggregate
            for aggregate in aggregate_people(matched)
            if matches_search(search, aggregate.name)
        ]

    def list_people(
        self,
        filters: Optional[TransactionFilters] = None,
        sort: Optional[SortState] = None,
    ) -> Page:
        """Summaries per person, sorted and paginated with the filters' page."""
        filters = filters or TransactionFilters()
        aggregates = self.summarize(filters)
        if sort is not None:
            aggregates = sort_records(aggregates, sort, PEOPLE_COLUMNS)
        return paginate(aggregates, filters.page, filters.page_size)
