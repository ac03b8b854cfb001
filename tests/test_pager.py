import pytest

from unitdash.pager import Pager


def _assert_invariants(p: Pager) -> None:
    assert 0 <= p.current_page <= p.last_page
    if p.length == 0:
        assert p.selected_index == 0
        assert not p.has_selection
        assert p.absolute_index() is None
    else:
        assert 0 <= p.selected_index < min(p.page_size, p.length - p.current_page * p.page_size)
        assert p.absolute_index() < p.length


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        Pager(0)


def test_empty_list_has_no_selection():
    p = Pager(10)
    assert p.total_pages == 1
    assert p.page_bounds() == (0, 0)
    assert p.move_selection(1) is False
    assert p.change_page(1) is False
    _assert_invariants(p)


def test_selection_clamps_at_page_edges():
    p = Pager(10, length=25)
    assert p.move_selection(-1) is False
    assert p.selected_index == 0
    for _ in range(15):
        p.move_selection(1)
    assert p.selected_index == 9
    assert p.current_page == 0


def test_selection_on_partial_last_page():
    p = Pager(10, length=25)
    p.change_page(1)
    p.change_page(1)
    assert p.current_page == 2
    assert p.page_bounds() == (20, 25)
    p.move_selection(100)
    assert p.selected_index == 4
    assert p.absolute_index() == 24


def test_change_page_resets_selection_and_clamps():
    p = Pager(10, length=25)
    p.move_selection(3)
    assert p.change_page(5) is True
    assert p.current_page == 1
    assert p.selected_index == 0
    p.move_selection(2)
    assert p.change_page(-1) is True
    assert p.selected_index == 0
    assert p.change_page(-1) is False
    assert p.current_page == 0


def test_next_page_is_noop_when_single_page():
    p = Pager(10, length=1)
    assert p.change_page(1) is False
    assert p.current_page == 0
    assert p.selected_index == 0


def test_reclamp_moves_back_from_vanished_page():
    p = Pager(10, length=25)
    p.change_page(1)
    p.change_page(1)
    p.move_selection(2)
    p.reclamp(5)
    assert p.current_page == 0
    assert p.selected_index == 0


def test_reclamp_keeps_valid_position():
    p = Pager(10, length=25)
    p.change_page(1)
    p.move_selection(3)
    p.reclamp(18)
    assert (p.current_page, p.selected_index) == (1, 3)
    p.reclamp(13)
    assert (p.current_page, p.selected_index) == (1, 0)


def test_reclamp_to_empty():
    p = Pager(4, length=9)
    p.change_page(1)
    p.move_selection(2)
    p.reclamp(0)
    assert (p.current_page, p.selected_index) == (0, 0)
    _assert_invariants(p)


@pytest.mark.parametrize("page_size", [1, 3, 10])
def test_reclamp_always_restores_invariants(page_size):
    for start_len in range(0, 26):
        for new_len in range(0, 26):
            p = Pager(page_size, length=start_len)
            for _ in range(start_len):
                p.change_page(1)
            p.move_selection(page_size)
            p.reclamp(new_len)
            _assert_invariants(p)
