import datetime

from pydantic import BaseModel, Field

from mapjournal.entities import SortOrder
from mapjournal.post_entities import PostSchema
from mapjournal.repository import Repository

DEFAULT_PER_PAGE = 10


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches as a literal substring"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def month_bounds(year: int, month: int) -> tuple[datetime.date, datetime.date]:
    """Half-open [first day, first day of next month) range for a calendar month"""
    start = datetime.date(year, month, 1)
    if month == 12:
        return start, datetime.date(year + 1, 1, 1)
    return start, datetime.date(year, month + 1, 1)


class PostFilter(BaseModel):
    """Filter, sort and page settings for an owner's posts.

    The owner scope is applied first and unconditionally; every other refinement
    is layered beneath it.
    """

    owner_id: int
    search: str | None = None
    year: int | None = None
    month: int | None = Field(default=None, ge=1, le=12)
    page: int | None = None
    per_page: int = DEFAULT_PER_PAGE
    order: SortOrder = SortOrder.DESC

    def apply(self, repository: Repository) -> Repository:
        scoped = repository.scope(PostSchema.user_id, self.owner_id)

        if self.search is not None:
            pattern = f"%{escape_like(self.search)}%"
            scoped = scoped.where(
                lambda qb: qb.where(str(PostSchema.title), "LIKE", pattern).or_where(
                    str(PostSchema.address), "LIKE", pattern
                )
            )

        if self.year is not None and self.month is not None:
            start, end = month_bounds(self.year, self.month)
            scoped = scoped.where(PostSchema.date, ">=", start).where(
                PostSchema.date, "<", end
            )

        # id breaks ties so pages are stable across equal dates
        if self.order == SortOrder.DESC:
            scoped = scoped.order_by_desc(PostSchema.date).order_by_desc(PostSchema.id)
        else:
            scoped = scoped.order_by_asc(PostSchema.date).order_by_asc(PostSchema.id)

        if self.page is not None:
            scoped = scoped.paginate(self.page, self.per_page)

        return scoped
