"""
Tests for pagination and sorting helpers.
"""

import pytest

from core import pagination
from core.pagination import Paginator, Sorter


class TestPaginator:
    @pytest.mark.parametrize(
        "skip,limit,expected",
        [
            (None, None, (0, 20)),
            (-5, 10, (0, 10)),
            (40, 0, (40, 20)),
            (0, -3, (0, 20)),
            (0, 500, (0, 100)),
        ],
    )
    def test_parse_clamps(self, skip, limit, expected):
        assert Paginator(default_limit=20, max_limit=100).parse(skip, limit) == expected

    def test_first_page_has_only_next(self):
        previous, next_url = Paginator().urls("http://api/issues?severity=high", 0, 10, 25)

        assert previous is None
        assert next_url == "http://api/issues?severity=high&skip=10&limit=10"

    def test_middle_page(self):
        previous, next_url = Paginator().urls("http://api/issues?skip=10&limit=10", 10, 10, 25)

        assert previous == "http://api/issues?skip=0&limit=10"
        assert next_url == "http://api/issues?skip=20&limit=10"

    def test_last_page_has_only_previous(self):
        previous, next_url = Paginator().urls("http://api/issues", 20, 10, 25)

        assert previous == "http://api/issues?skip=10&limit=10"
        assert next_url is None

    def test_previous_never_goes_negative(self):
        previous, _ = Paginator().urls("http://api/issues", 3, 10, 25)
        assert previous == "http://api/issues?skip=0&limit=10"


class TestSorter:
    def test_parse(self):
        sorter = Sorter("created", "updated")

        assert sorter.parse(None) == []
        assert sorter.parse("created") == [("created", False)]
        assert sorter.parse("-updated, created") == [("updated", True), ("created", False)]

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown ordering field 'severity'"):
            Sorter("created", "updated").parse("-severity")


def test_public_names():
    assert sorted(pagination.__all__) == ["LIMIT_PARAM", "Paginator", "SKIP_PARAM", "Sorter"]
    assert not hasattr(pagination, "ORDERING_PARAM")
