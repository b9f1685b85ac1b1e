"""
Pagination and sorting helpers for list endpoints.

Usage:
    paginator = Paginator(default_limit=20, max_limit=100)
    skip, limit = paginator.parse(skip, limit)
    previous, next = paginator.urls(request.url, skip, limit, count)

    sorter = Sorter("created", "updated")
    sort = sorter.parse("-created")  # [("created", True)]
"""

from starlette.datastructures import URL

SKIP_PARAM = "skip"
LIMIT_PARAM = "limit"


class Paginator:
    """Skip/limit pagination with previous/next link generation."""

    def __init__(self, default_limit: int = 20, max_limit: int = 100):
        self.default_limit = default_limit
        self.max_limit = max_limit

    def parse(self, skip: int | None, limit: int | None) -> tuple[int, int]:
        """
        Clamp raw skip/limit values.

        Negative skip becomes 0, a missing or non-positive limit becomes the
        default, and limits above the maximum are capped.
        """
        skip = max(skip or 0, 0)
        if not limit or limit <= 0:
            limit = self.default_limit
        return skip, min(limit, self.max_limit)

    def urls(self, url: URL | str, skip: int, limit: int, count: int) -> tuple[str | None, str | None]:
        """
        Build previous/next page links from the current request URL.

        Other query parameters (filters, ordering) are preserved.

        Returns:
            Tuple of (previous, next); either is None at the edges
        """
        if not isinstance(url, URL):
            url = URL(url)

        previous = None
        if skip > 0:
            previous = str(url.include_query_params(**{SKIP_PARAM: max(skip - limit, 0), LIMIT_PARAM: limit}))

        next_url = None
        if skip + limit < count:
            next_url = str(url.include_query_params(**{SKIP_PARAM: skip + limit, LIMIT_PARAM: limit}))

        return previous, next_url


class Sorter:
    """
    Parse an ``ordering`` parameter against an allow-list of fields.

    The value is a comma separated list of field names; a leading ``-``
    sorts that field descending.
    """

    def __init__(self, *fields: str):
        self.fields = tuple(fields)

    def parse(self, value: str | None) -> list[tuple[str, bool]]:
        """
        Returns:
            List of (field, descending) pairs in the given order

        Raises:
            ValueError: If a field is not in the allow-list
        """
        if not value:
            return []

        sort: list[tuple[str, bool]] = []
        for raw in value.split(","):
            raw = raw.strip()
            if not raw:
                continue
            descending = raw.startswith("-")
            name = raw.lstrip("-+")
            if name not in self.fields:
                raise ValueError(
                    f"Unknown ordering field '{name}', expected one of: {', '.join(self.fields)}"
                )
            sort.append((name, descending))
        return sort

    @property
    def description(self) -> str:
        return f"Sort by {', '.join(self.fields)}; prefix with '-' for descending"


__all__ = ["Paginator", "Sorter", "SKIP_PARAM", "LIMIT_PARAM"]
