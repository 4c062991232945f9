"""
Tests for the scrollback buffer.

Run with:  python -m pytest retroshell_console/test_scrollback.py -v
"""

import string

import pytest

from retroshell_console.scrollback import ScrollbackBuffer


def filled(count, num_rows=10, capacity=100):
    """Buffer holding L0 .. L<count-1> followed by an empty current line."""
    buffer = ScrollbackBuffer(num_rows=num_rows, num_cols=80, capacity=capacity)
    for i in range(count):
        buffer.print(f"L{i}\n")
    return buffer


class TestAppending:
    """Tests for writing text into the buffer."""

    def test_starts_with_one_empty_line(self):
        buffer = ScrollbackBuffer()
        assert buffer.lines == [""]
        assert buffer.dirty

    def test_wraps_at_column_limit(self):
        buffer = ScrollbackBuffer(num_cols=10)
        buffer.append_text("abcdefghijk")
        assert buffer.lines == ["abcdefghij", "k"]

    def test_exact_multiple_does_not_open_extra_line(self):
        buffer = ScrollbackBuffer(num_cols=10)
        buffer.append_text("a" * 20)
        assert buffer.lines == ["a" * 10, "a" * 10]

    def test_continues_current_line(self):
        buffer = ScrollbackBuffer(num_cols=10)
        buffer.append_text("abc")
        buffer.append_text("defghijklm")
        assert buffer.lines == ["abcdefghij", "klm"]

    def test_text_survives_wrapping(self):
        for length in range(0, 36):
            text = string.ascii_letters[:length]
            buffer = ScrollbackBuffer(num_cols=10)
            buffer.append_text(text)

            assert "".join(buffer.lines) == text
            assert len(buffer) == max(1, -(-length // 10))
            assert all(len(line) <= 10 for line in buffer.lines)

    def test_append_char_wraps_full_line(self):
        buffer = ScrollbackBuffer(num_cols=3)
        for c in "abcd":
            buffer.append_char(c)
        assert buffer.lines == ["abc", "d"]

    def test_newline_and_carriage_return(self):
        buffer = ScrollbackBuffer()
        buffer.append_text("first")
        buffer.append_char("\n")
        buffer.append_text("second")
        buffer.append_char("\r")
        assert buffer.lines == ["first", ""]

    def test_print_splits_lines(self):
        buffer = ScrollbackBuffer()
        buffer.print("one\n\nthree\n")
        assert buffer.lines == ["one", "", "three", ""]

    def test_tab_pads_to_column(self):
        buffer = ScrollbackBuffer()
        buffer.append_text("ab")
        buffer.tab(5)
        assert buffer.last_line == "ab   "
        buffer.tab(1)
        assert buffer.last_line == "ab   "

    def test_replace_last_line_is_truncated(self):
        buffer = ScrollbackBuffer(num_cols=10)
        buffer.replace_last_line("abcdefghij", "> ")
        assert buffer.last_line == "> abcdefgh"

    def test_clear(self):
        buffer = filled(30)
        buffer.scroll_to(5)
        buffer.clear()
        assert buffer.lines == [""]
        assert buffer.scroll_offset == 0
        assert buffer.first_line_number == 31


class TestCapacity:
    """Tests for dropping old lines."""

    def test_oldest_lines_are_dropped(self):
        buffer = filled(150)
        assert len(buffer) == 100
        assert buffer.lines[0] == "L51"
        assert buffer.last_line == ""
        assert buffer.first_line_number == 51

    def test_offset_follows_its_line(self):
        buffer = filled(99)
        assert len(buffer) == 100
        buffer.scroll_to(60)
        assert buffer.lines[60] == "L60"

        for i in range(99, 104):
            buffer.print(f"L{i}\n")

        assert buffer.scroll_offset == 55
        assert buffer.lines[buffer.scroll_offset] == "L60"

    def test_offset_never_negative(self):
        buffer = filled(99)
        buffer.scroll_to(2)
        for i in range(99, 104):
            buffer.print(f"L{i}\n")
        assert buffer.scroll_offset == 0

    def test_invalid_sizes(self):
        with pytest.raises(ValueError):
            ScrollbackBuffer(num_rows=0)
        with pytest.raises(ValueError):
            ScrollbackBuffer(num_cols=0)
        with pytest.raises(ValueError):
            ScrollbackBuffer(capacity=0)


class TestScrolling:
    """Tests for the scroll offset and dirty flag."""

    def test_scroll_to_is_clamped(self):
        buffer = filled(30)
        buffer.scroll_to(-5)
        assert buffer.scroll_offset == 0
        buffer.scroll_to(1000)
        assert buffer.scroll_offset == len(buffer) - 1

    def test_dirty_only_on_change(self):
        buffer = filled(30)
        buffer.consume_dirty()
        buffer.scroll_to(0)
        assert not buffer.dirty
        buffer.scroll_down(3)
        assert buffer.consume_dirty()
        assert not buffer.consume_dirty()

    def test_scroll_to_bottom(self):
        buffer = filled(30)
        buffer.scroll_to_bottom()
        assert buffer.scroll_offset == 21
        assert buffer.last_line_is_visible()
        assert buffer.row_of_last_line() == 9

    def test_scroll_to_bottom_short_buffer(self):
        buffer = filled(4)
        buffer.scroll_to_bottom()
        assert buffer.scroll_offset == 0

    def test_visible_lines(self):
        buffer = filled(30)
        buffer.scroll_to(3)
        assert buffer.visible_lines() == [f"L{i}" for i in range(3, 13)]

    def test_make_last_line_visible(self):
        buffer = filled(30)
        buffer.scroll_to_top()
        assert not buffer.last_line_is_visible()
        buffer.make_last_line_visible()
        assert buffer.last_line_is_visible()

    def test_scroll_up_and_down(self):
        buffer = filled(30)
        buffer.scroll_to_bottom()
        buffer.scroll_up(5)
        assert buffer.scroll_offset == 16
        buffer.scroll_down(2)
        assert buffer.scroll_offset == 18

    def test_resize(self):
        buffer = filled(30)
        buffer.set_num_rows(5)
        assert len(buffer.visible_lines()) == 5
        with pytest.raises(ValueError):
            buffer.set_num_rows(0)
        with pytest.raises(ValueError):
            buffer.set_num_cols(0)

    def test_narrowing_wraps_next_append(self):
        buffer = ScrollbackBuffer(num_cols=20)
        buffer.append_text("x" * 15)
        buffer.set_num_cols(10)
        buffer.append_text("abcdefghijkl")
        assert buffer.lines == ["x" * 15, "abcdefghij", "kl"]

    def test_narrowing_wraps_next_char(self):
        buffer = ScrollbackBuffer(num_cols=20)
        buffer.append_text("x" * 15)
        buffer.set_num_cols(10)
        buffer.append_char("a")
        assert buffer.lines == ["x" * 15, "a"]
