import pytest

from agentsesame.results_list import (
    ResultsState,
    SortColumn,
    compute_column_widths,
    hit_test_header,
)


@pytest.mark.parametrize("width", [60, 75, 90, 100, 120, 200])
def test_columns_fill_width_with_dir(width):
    w = compute_column_widths(width)
    assert w.show_dir
    assert w.agent_w + w.title_w + w.dir_w + w.turns_w + w.date_w + 4 == width


@pytest.mark.parametrize("width", [27, 40, 59])
def test_columns_fill_width_without_dir(width):
    w = compute_column_widths(width)
    assert not w.show_dir
    assert w.agent_w + w.title_w + w.turns_w + w.date_w + 3 == width


def test_column_tiers_from_source():
    wide = compute_column_widths(120)
    assert (wide.agent_w, wide.dir_w, wide.turns_w, wide.date_w) == (10, 28, 6, 14)
    mid = compute_column_widths(90)
    assert (mid.dir_w, mid.turns_w, mid.date_w) == (22, 5, 12)


def test_title_width_never_negative():
    assert compute_column_widths(5).title_w == 0


def test_hit_test_agent_and_title():
    w = compute_column_widths(120)
    assert hit_test_header(0, w) == SortColumn.AGENT
    assert hit_test_header(w.agent_w - 1, w) == SortColumn.AGENT
    assert hit_test_header(w.agent_w + 1, w) == SortColumn.TITLE


def test_hit_test_past_end():
    w = compute_column_widths(120)
    assert hit_test_header(120, w) is None


def test_hit_test_order_with_dir():
    w = compute_column_widths(120)
    seen = []
    for col in range(120):
        hit = hit_test_header(col, w)
        if hit is not None and (not seen or seen[-1] != hit):
            seen.append(hit)
    assert seen == [
        SortColumn.AGENT,
        SortColumn.TITLE,
        SortColumn.DIRECTORY,
        SortColumn.TURNS,
        SortColumn.DATE,
    ]


def test_hit_test_no_directory_when_hidden():
    w = compute_column_widths(50)
    hits = {hit_test_header(col, w) for col in range(50)}
    assert SortColumn.DIRECTORY not in hits
    assert SortColumn.DATE in hits


def test_select_next_clamps():
    state = ResultsState()
    state.select_next(2)
    state.select_next(2)
    assert state.selected == 1
    empty = ResultsState(selected=0)
    empty.select_next(0)
    assert empty.selected == 0


def test_select_prev_saturates():
    state = ResultsState(selected=1)
    state.select_prev()
    state.select_prev()
    assert state.selected == 0


def test_paging():
    state = ResultsState()
    state.page_down(10, 25)
    assert state.selected == 10
    state.page_down(10, 15)
    assert state.selected == 14
    state.page_up(10)
    assert state.selected == 4
    state.page_up(10)
    assert state.selected == 0


def test_select_first():
    state = ResultsState(selected=7, offset=3)
    state.select_first()
    assert state.selected == 0


def test_ensure_visible_scrolls_down_and_up():
    state = ResultsState(selected=15, offset=0)
    state.ensure_visible(10)
    assert state.offset <= state.selected < state.offset + 10
    state.selected = 2
    state.ensure_visible(10)
    assert state.offset == 2


def test_ensure_visible_keeps_offset_when_visible():
    state = ResultsState(selected=5, offset=3)
    state.ensure_visible(10)
    assert state.offset == 3


def test_ensure_visible_rejects_zero_rows():
    with pytest.raises(ValueError):
        ResultsState().ensure_visible(0)