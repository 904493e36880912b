from cutdeck.core.history import HistoryStack


def test_empty_stack_is_noop():
    h = HistoryStack()
    assert h.undo("current") is None
    assert h.redo("current") is None
    assert not h.can_undo and not h.can_redo


def test_undo_redo_swap_states():
    h = HistoryStack()
    h.record("s0")
    h.record("s1")
    assert h.undo("s2") == "s1"
    assert h.can_redo
    assert h.undo("s1") == "s0"
    assert not h.can_undo
    assert h.redo("s0") == "s1"
    assert h.redo("s1") == "s2"
    assert not h.can_redo
    assert len(h) == 2


def test_record_clears_redo():
    h = HistoryStack()
    h.record("s0")
    assert h.undo("s1") == "s0"
    h.record("s0")
    assert not h.can_redo
    assert h.redo("s1b") is None


def test_clear():
    h = HistoryStack()
    h.record("a")
    h.undo("b")
    h.clear()
    assert len(h) == 0
