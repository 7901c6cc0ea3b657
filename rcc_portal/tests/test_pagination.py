"""
Test the page-link window used by paginated listings.
"""
import pytest

from rcc_portal.core.pagination import (
    ELLIPSIS,
    MAX_PAGES_TO_SHOW,
    PageNav,
    compute_window,
    total_pages_for,
)


class TestTotalPages:
    """Test page count arithmetic."""

    @pytest.mark.parametrize(
        "total_items, page_size, expected",
        [(0, 9, 0), (1, 9, 1), (9, 9, 1), (10, 9, 2), (27, 9, 3), (5, 0, 0)],
    )
    def test_total_pages_for(self, total_items, page_size, expected):
        assert total_pages_for(total_items, page_size) == expected


class TestComputeWindow:
    """Test window shapes around the current page."""

    def test_no_pages(self):
        window = compute_window(1, 0)
        assert window.entries == ()
        assert window.total_pages == 0
        assert window.previous == PageNav(page=1, enabled=False)
        assert window.next == PageNav(page=1, enabled=False)

    def test_single_page(self):
        window = compute_window(1, 1)
        assert window.labels() == [1]
        assert window.previous.enabled is False
        assert window.next.enabled is False

    def test_fewer_pages_than_window(self):
        assert compute_window(2, 3).labels() == [1, 2, 3]

    def test_first_page_of_many(self):
        window = compute_window(1, 10)
        assert window.labels() == [1, 2, 3, 4, 5, "…", 10]
        assert window.previous == PageNav(page=1, enabled=False)
        assert window.next == PageNav(page=2, enabled=True)

    def test_middle_page_has_both_ellipses(self):
        window = compute_window(5, 10)
        assert window.labels() == [1, "…", 3, 4, 5, 6, 7, "…", 10]
        assert window.previous == PageNav(page=4, enabled=True)
        assert window.next == PageNav(page=6, enabled=True)

    def test_last_page_shifts_window_left(self):
        window = compute_window(10, 10)
        assert window.labels() == [1, "…", 6, 7, 8, 9, 10]
        assert window.next == PageNav(page=10, enabled=False)

    def test_no_ellipsis_when_gap_is_one_page(self):
        # window 2..6 touches page 1 directly
        assert compute_window(4, 10).labels() == [1, 2, 3, 4, 5, 6, "…", 10]
        # window 4..8 ends right before the last page
        assert compute_window(6, 9).labels() == [1, "…", 4, 5, 6, 7, 8, 9]

    def test_exactly_one_current_entry(self):
        for total in range(1, 15):
            for current in range(1, total + 1):
                window = compute_window(current, total)
                current_entries = [e for e in window.entries if e.is_current]
                assert len(current_entries) == 1
                assert current_entries[0].page == current

    def test_contiguous_run_never_exceeds_max(self):
        for total in range(1, 30):
            for current in range(1, total + 1):
                numbers = compute_window(current, total).numbers()
                assert numbers == sorted(set(numbers))
                assert numbers[0] == 1
                assert numbers[-1] == total
                assert len(numbers) <= MAX_PAGES_TO_SHOW + 2

    def test_run_of_max_pages_contains_current(self):
        """Past MAX_PAGES_TO_SHOW pages, a full run surrounds current; only 1 and total sit outside it."""
        for total in range(MAX_PAGES_TO_SHOW + 1, 31):
            for current in range(1, total + 1):
                numbers = set(compute_window(current, total).numbers())
                runs = [
                    set(range(start, start + MAX_PAGES_TO_SHOW))
                    for start in range(current - MAX_PAGES_TO_SHOW + 1, current + 1)
                ]
                matching = [run for run in runs if run <= numbers and numbers - run <= {1, total}]
                assert matching, (current, total, sorted(numbers))

    def test_ellipsis_marks_every_gap(self):
        for total in range(1, 31):
            for current in range(1, total + 1):
                entries = compute_window(current, total).entries
                for before, after in zip(entries, entries[1:]):
                    assert not (before.kind == ELLIPSIS and after.kind == ELLIPSIS)
                    if before.kind == "page" and after.kind == "page":
                        assert after.page == before.page + 1
                for before, marker, after in zip(entries, entries[1:], entries[2:]):
                    if marker.kind == ELLIPSIS:
                        assert after.page - before.page >= 2

    def test_ellipsis_entries_have_no_page(self):
        window = compute_window(5, 10)
        ellipses = [e for e in window.entries if e.kind == ELLIPSIS]
        assert len(ellipses) == 2
        assert all(e.page is None and not e.is_current for e in ellipses)

    def test_out_of_range_page_is_clamped(self):
        assert compute_window(50, 4).current_page == 4
        assert compute_window(-3, 4).current_page == 1

    def test_deep_page_of_long_listing(self):
        assert compute_window(7, 20).labels() == [1, "…", 5, 6, 7, 8, 9, "…", 20]

    def test_idempotent(self):
        assert compute_window(7, 20) == compute_window(7, 20)
