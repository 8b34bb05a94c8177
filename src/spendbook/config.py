"""Runtime configuration read from the environment."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from spendbook.domain.entities import BulkDeletePolicy

DEFAULT_PAGE_SIZE = 10
PAGE_SIZE_OPTIONS = (5, 10, 25, 50)


def _page_size(raw: Optional[str]) -> int:
    try:
        value = int(raw) if raw else DEFAULT_PAGE_SIZE
    except ValueError:
        return DEFAULT_PAGE_SIZE
    return value if value in PAGE_SIZE_OPTIONS else DEFAULT_PAGE_SIZE


def _bulk_delete_policy(raw: Optional[str]) -> BulkDeletePolicy:
    if not raw:
        return BulkDeletePolicy.STOP_ON_FIRST_FAILURE
    try:
        return BulkDeletePolicy(raw.strip().lower())
    except ValueError:
        raise ValueError(
            f"Unknown bulk delete policy '{raw}'. Supported: "
            + ", ".join(policy.value for policy in BulkDeletePolicy)
        )


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for spendbook.

    ``database_url`` of None means no store is configured and the demo
    dataset is used.
    """

    database_url: Optional[str] = None
    log_level: str = "WARNING"
    bulk_delete_policy: BulkDeletePolicy = BulkDeletePolicy.STOP_ON_FIRST_FAILURE
    page_size: int = DEFAULT_PAGE_SIZE
    page_size_options: tuple[int, ...] = field(default=PAGE_SIZE_OPTIONS)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from SPENDBOOK_* environment variables.

        Raises:
            ValueError: If SPENDBOOK_BULK_DELETE_POLICY names an unknown policy
        """
        env = os.environ if environ is None else environ
        return cls(
            database_url=env.get("SPENDBOOK_DATABASE_URL") or None,
            log_level=env.get("SPENDBOOK_LOG_LEVEL", "WARNING"),
            bulk_delete_policy=_bulk_delete_policy(env.get("SPENDBOOK_BULK_DELETE_POLICY")),
            page_size=_page_size(env.get("SPENDBOOK_PAGE_SIZE")),
        )
