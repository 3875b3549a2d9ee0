"""Tests for page window arithmetic."""

from index_client.paginator import compute_page_window


class TestPageWindow:
    """Tests for compute_page_window."""

    def test_early_page(self):
        """Test a page near the start shows the first nine pages."""
        window = compute_page_window(237, start=40)
        assert window.current_page == 5
        assert window.max_page == 24
        assert (window.count_from, window.count_to) == (1, 9)

    def test_late_page(self):
        """Test the window is clipped at the last page."""
        window = compute_page_window(237, start=200)
        assert window.current_page == 21
        assert (window.count_from, window.count_to) == (17, 24)

    def test_middle_page(self):
        """Test a four-page lookback in the middle of the result set."""
        window = compute_page_window(500, start=100)
        assert window.current_page == 11
        assert window.pages() == list(range(7, 16))

    def test_first_page_has_no_previous(self):
        """Test there is no previous target on page one."""
        window = compute_page_window(237, start=0)
        assert window.previous_start is None
        assert window.next_start == 10

    def test_last_page_has_no_next(self):
        """Test there is no next target on the last page."""
        window = compute_page_window(237, start=230)
        assert window.current_page == 24
        assert window.next_start is None
        assert window.previous_start == 220

    def test_previous_target(self):
        """Test the previous target is the page before the current one."""
        assert compute_page_window(237, start=40).previous_start == 30
        assert compute_page_window(237, start=45).previous_start == 30

    def test_window_contains_current_page(self):
        """Test the current page is always inside the window."""
        for start in range(0, 240, 10):
            window = compute_page_window(237, start=start)
            assert window.count_from <= window.current_page <= window.count_to
            assert len(window.pages()) <= 9

    def test_single_page(self):
        """Test a result set that fits on one page."""
        window = compute_page_window(5, start=0)
        assert window.max_page == 1
        assert window.pages() == [1]
        assert window.previous_start is None
        assert window.next_start is None

    def test_page_offsets(self):
        """Test the row window for a page number."""
        window = compute_page_window(237, start=0)
        assert window.page_offsets(3) == (20, 30)
