"""
Tests for overlay_translator.core.grouping - OCR word clustering.
"""
from conftest import make_word

from overlay_translator.core.grouping import group_bbox, group_text, group_words


class TestGroupWords:
    def test_close_words_merge_and_far_word_splits(self):
        """Gap 2 < 25 merges, gap 178 > 25 starts a new group"""
        words = [
            make_word("a", 0, 0, 10, 10),
            make_word("b", 12, 0, 22, 10),
            make_word("c", 200, 0, 210, 10),
        ]

        groups = group_words(words)

        assert [[w.text for w in g] for g in groups] == [["a", "b"], ["c"]]

    def test_low_confidence_word_is_ignored(self):
        words = [
            make_word("a", 0, 0, 10, 10),
            make_word("noise", 11, 0, 15, 10, confidence=49.9),
            make_word("b", 12, 0, 22, 10),
            make_word("c", 200, 0, 210, 10),
        ]
        without = [w for w in words if w.text != "noise"]

        assert group_words(words) == group_words(without)

    def test_blank_words_are_ignored(self):
        words = [make_word("  ", 0, 0, 10, 10), make_word("a", 12, 0, 22, 10)]
        assert [[w.text for w in g] for g in group_words(words)] == [["a"]]

    def test_confidence_of_exactly_50_is_kept(self):
        assert len(group_words([make_word("a", 0, 0, 10, 10, confidence=50)])) == 1

    def test_new_line_starts_new_group(self):
        words = [make_word("top", 0, 0, 30, 10), make_word("next", 0, 20, 30, 30)]
        assert len(group_words(words)) == 2

    def test_compares_against_last_word_not_first(self):
        """A chain of small gaps keeps merging even far from the first word"""
        words = [make_word(str(i), i * 20, 0, i * 20 + 10, 10) for i in range(10)]
        groups = group_words(words)
        assert len(groups) == 1
        assert len(groups[0]) == 10

    def test_empty_input(self):
        assert group_words([]) == []


class TestGroupShape:
    def test_text_is_space_joined(self):
        group = [make_word("Hello", 0, 0, 10, 10), make_word("world", 12, 0, 22, 10)]
        assert group_text(group) == "Hello world"

    def test_bbox_horizontal_from_ends_vertical_from_all(self):
        group = [
            make_word("Ag", 0, 2, 10, 12),
            make_word("y", 12, 0, 18, 14),
            make_word("x", 20, 3, 26, 11),
        ]
        box = group_bbox(group)
        assert (box.x0, box.y0, box.x1, box.y1) == (0, 0, 26, 14)
