"""Query parameters for the crate listing endpoint."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Sort(str, Enum):
    """Ordering applied by the registry to the crate listing."""

    ALPHABETICAL = "alpha"
    RELEVANCE = "relevance"
    DOWNLOADS = "downloads"
    RECENT_DOWNLOADS = "recent-downloads"
    RECENT_UPDATES = "recent-updates"
    NEW = "new"


class CratesQuery(BaseModel):
    """Filter and paging options for ``GET crates``.

    ``page`` is 1-based. A paginated stream starts at ``page`` and moves
    forward one page per fetch.
    """

    page: int = Field(1, ge=1, description="1-based page number.")
    per_page: int = Field(30, ge=1, le=100, description="Items per page.")
    sort: Sort | None = Field(None, description="Result ordering.")
    search: str | None = Field(None, description="Free text search (sent as q).")
    category: str | None = Field(None, description="Category slug filter.")
    user_id: int | None = Field(None, description="Only crates owned by this user.")
    ids: list[str] | None = Field(None, description="Only crates with these names.")

    def to_params(self) -> list[tuple[str, str]]:
        """Serialize to ordered query parameters."""

        params: list[tuple[str, str]] = [
            ("page", str(self.page)),
            ("per_page", str(self.per_page)),
        ]
        if self.sort is not None:
            params.append(("sort", self.sort.value))
        if self.search:
            params.append(("q", self.search))
        if self.category:
            params.append(("category", self.category))
        if self.user_id is not None:
            params.append(("user_id", str(self.user_id)))
        for crate_id in self.ids or []:
            params.append(("ids[]", crate_id))
        return params

    def for_page(self, page: int) -> "CratesQuery":
        return self.model_copy(update={"page": page})
