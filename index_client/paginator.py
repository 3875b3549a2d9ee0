"""Page-number window arithmetic for result navigation."""

from .models import PAGE_SIZE, PageWindow

WINDOW_SPAN = 9
LOOKBACK = 4


def compute_page_window(
    total_hits: int,
    start: int,
    page_size: int = PAGE_SIZE,
    span: int = WINDOW_SPAN,
    lookback: int = LOOKBACK,
) -> PageWindow:
    """Compute which page numbers to offer around the page showing row ``start``.

    At most ``span`` pages are shown, starting ``lookback`` pages before the
    current one. Previous/next targets are row offsets of 10-row pages and
    are ``None`` when there is no such page.
    """
    current = start // page_size + 1
    max_page = -(-total_hits // page_size)
    count_from = max(1, current - lookback)
    count_to = min(max_page, count_from + span - 1)

    previous_start = None
    if current > 1:
        previous_start = max(0, int((start - (page_size - 1)) / page_size) * page_size)
    next_start = current * page_size if current < max_page else None

    return PageWindow(
        current_page=current,
        count_from=count_from,
        count_to=count_to,
        max_page=max_page,
        previous_start=previous_start,
        next_start=next_start,
        page_size=page_size,
    )
