"""
Tests for the tokenizer, Myers differ and operation compactor.
"""

import random

import pytest

from semdiff.models import OperationKind, TokenKind
from semdiff.services.differ import (
    EditDistanceExceeded,
    compact_operations,
    diff_tokens,
    diff_words,
    diff_words_with_fallback,
    extract_spans,
)
from semdiff.services.tokenizer import count_words, tokenize

SAMPLES = [
    ("", ""),
    ("", "Hello world."),
    ("Hello world.", ""),
    ("The quick fox", "The slow fox"),
    ("The quick brown fox jumps over the lazy dog.", "A quick brown dog jumps over the lazy fox!"),
    ("one two three", "three two one"),
    ("We love it.\nSecond line here.", "We like it.\n\nSecond line, here."),
    ("a  b\tc", "a b c"),
]

# Pieces for generated pairs: words, whitespace runs, punctuation, newlines
PIECES = ["a", "b", "cat", "dog", " ", "  ", "\t", ",", ".", "!", "\n"]


def _random_pairs(seed, count=200, max_pieces=12):
    rng = random.Random(seed)

    def text():
        return "".join(rng.choice(PIECES) for _ in range(rng.randint(0, max_pieces)))

    return [(text(), text()) for _ in range(count)]


RANDOM_PAIRS = _random_pairs(seed=2024)


def _old_side(ops):
    return "".join(op.text for op in ops if op.kind != OperationKind.INSERT)


def _new_side(ops):
    return "".join(op.text for op in ops if op.kind != OperationKind.DELETE)


def _token_cost(ops):
    """Edit cost counted in tokens, so compaction does not change it."""
    return sum(len(tokenize(op.text)) for op in ops if op.kind != OperationKind.EQUAL)


class TestTokenize:

    def test_tokens_rebuild_the_source(self):
        text = "Hello,  world! It's 2024\n\tnew line..."
        assert "".join(t.text for t in tokenize(text)) == text

    def test_token_kinds(self):
        tokens = tokenize("Hi, you")
        assert [(t.kind, t.text) for t in tokens] == [
            (TokenKind.WORD, "Hi"),
            (TokenKind.PUNCTUATION, ","),
            (TokenKind.WHITESPACE, " "),
            (TokenKind.WORD, "you"),
        ]

    def test_each_punctuation_mark_is_its_own_token(self):
        assert [t.text for t in tokenize("?!")] == ["?", "!"]

    def test_offsets(self):
        tokens = tokenize("ab cd")
        assert [t.start for t in tokens] == [0, 2, 3]

    def test_empty(self):
        assert tokenize("") == []

    def test_count_words(self):
        assert count_words("  one two\nthree ") == 3
        assert count_words("") == 0


class TestDiffWords:

    def test_replaced_word(self):
        ops = diff_words("The quick fox", "The slow fox")
        assert [(op.kind, op.text) for op in ops] == [
            (OperationKind.EQUAL, "The "),
            (OperationKind.DELETE, "quick"),
            (OperationKind.INSERT, "slow"),
            (OperationKind.EQUAL, " fox"),
        ]

    @pytest.mark.parametrize("old, new", SAMPLES)
    def test_round_trip(self, old, new):
        ops = diff_words(old, new)
        assert _old_side(ops) == old
        assert _new_side(ops) == new

    @pytest.mark.parametrize("old, new", SAMPLES + [(".,", ",.a")])
    def test_token_cost_is_symmetric(self, old, new):
        assert _token_cost(diff_words(old, new)) == _token_cost(diff_words(new, old))

    def test_token_cost_counts_tokens_not_operations(self):
        forward, backward = diff_words(".,", ",.a"), diff_words(",.a", ".,")
        assert _token_cost(forward) == _token_cost(backward) == 3

    @pytest.mark.parametrize("text", ["", "same", "Some text, with punctuation.\n"])
    def test_identical_inputs_give_one_equal(self, text):
        ops = diff_words(text, text)
        assert len(ops) == 1
        assert ops[0].kind == OperationKind.EQUAL
        assert ops[0].text == text

    def test_empty_old_is_all_insert(self):
        ops = diff_words("", "new text")
        assert {op.kind for op in ops} == {OperationKind.INSERT}

    def test_empty_new_is_all_delete(self):
        ops = diff_words("old text", "")
        assert {op.kind for op in ops} == {OperationKind.DELETE}

    def test_output_is_compacted(self):
        ops = diff_words("a b c", "x y z")
        kinds = [op.kind for op in ops]
        assert all(a != b for a, b in zip(kinds, kinds[1:]))


class TestDiffTokens:

    @pytest.mark.parametrize("old, new", SAMPLES)
    def test_edit_cost_is_symmetric(self, old, new):
        forward = diff_tokens(tokenize(old), tokenize(new))
        backward = diff_tokens(tokenize(new), tokenize(old))
        cost = lambda ops: sum(op.kind != OperationKind.EQUAL for op in ops)
        assert cost(forward) == cost(backward)

    def test_every_token_appears_once(self):
        old, new = tokenize("a b c d"), tokenize("a c d e")
        ops = diff_tokens(old, new)
        old_indices = [op.source_index for op in ops if op.kind != OperationKind.INSERT]
        new_count = sum(op.kind != OperationKind.DELETE for op in ops)
        assert old_indices == list(range(len(old)))
        assert new_count == len(new)

    def test_insert_source_index_points_into_new(self):
        ops = diff_tokens(tokenize("a"), tokenize("a b"))
        inserts = [op for op in ops if op.kind == OperationKind.INSERT]
        assert [op.source_index for op in inserts] == [1, 2]

    def test_minimal_edit_distance(self):
        ops = diff_tokens(tokenize("a b c"), tokenize("a c"))
        assert sum(op.kind != OperationKind.EQUAL for op in ops) == 2

    def test_cap_raises(self):
        with pytest.raises(EditDistanceExceeded):
            diff_tokens(tokenize("a b c d"), tokenize("w x y z"), max_edits=2)


class TestGeneratedPairs:

    def test_round_trip(self):
        for old, new in RANDOM_PAIRS:
            ops = diff_words(old, new)
            assert _old_side(ops) == old, (old, new)
            assert _new_side(ops) == new, (old, new)

    def test_identity(self):
        for old, _ in RANDOM_PAIRS:
            ops = diff_words(old, old)
            assert [(op.kind, op.text) for op in ops] == [(OperationKind.EQUAL, old)]

    def test_every_token_appears_once(self):
        for old, new in RANDOM_PAIRS:
            old_tokens, new_tokens = tokenize(old), tokenize(new)
            ops = diff_tokens(old_tokens, new_tokens)
            old_indices = [op.source_index for op in ops if op.kind != OperationKind.INSERT]
            new_indices = [op.source_index for op in ops if op.kind == OperationKind.INSERT]
            assert old_indices == list(range(len(old_tokens))), (old, new)
            assert len(new_indices) + sum(op.kind == OperationKind.EQUAL for op in ops) == len(new_tokens)

    def test_token_cost_is_symmetric(self):
        for old, new in RANDOM_PAIRS:
            assert _token_cost(diff_words(old, new)) == _token_cost(diff_words(new, old)), (old, new)


class TestFallback:

    def test_line_fallback_keeps_round_trip(self):
        old = "first line\nsecond line\nthird line\n"
        new = "first line\nchanged entirely now\nthird line\n"
        ops, fell_back = diff_words_with_fallback(old, new, max_edits=2)
        assert fell_back
        assert _old_side(ops) == old
        assert _new_side(ops) == new
        assert (OperationKind.EQUAL, "first line\n") == (ops[0].kind, ops[0].text)

    def test_whole_text_fallback(self):
        ops, fell_back = diff_words_with_fallback("a b c", "x y z", max_edits=1)
        assert fell_back
        assert [(op.kind, op.text) for op in ops] == [
            (OperationKind.DELETE, "a b c"),
            (OperationKind.INSERT, "x y z"),
        ]

    def test_no_fallback_under_cap(self):
        _, fell_back = diff_words_with_fallback("a b", "a c")
        assert not fell_back


class TestCompaction:

    def test_merges_runs_and_keeps_first_index(self):
        ops = diff_tokens(tokenize("a."), tokenize("x!"))
        assert len(ops) == 4
        compacted = compact_operations(ops)
        assert [(op.kind, op.text, op.source_index) for op in compacted] == [
            (OperationKind.DELETE, "a.", 0),
            (OperationKind.INSERT, "x!", 0),
        ]

    def test_does_not_modify_input(self):
        ops = diff_tokens(tokenize("a b"), tokenize("x y"))
        before = list(ops)
        compact_operations(ops)
        assert ops == before

    def test_empty(self):
        assert compact_operations([]) == []


class TestSpans:

    def test_replacement_and_lone_spans(self):
        spans = extract_spans(diff_words("The quick fox ran", "The slow fox ran fast"))
        assert [(s.original, s.modified) for s in spans] == [("quick", "slow"), ("", " fast")]

    def test_span_offsets(self):
        spans = extract_spans(diff_words("The quick fox", "The slow fox"))
        assert spans[0].old_offset == 4
        assert spans[0].new_offset == 4

    def test_no_spans_for_identical_text(self):
        assert extract_spans(diff_words("same", "same")) == []
