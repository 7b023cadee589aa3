"""
Tests for change classification, impact scoring and tone detection.
"""

import pytest

from semdiff.models import ChangeType, ImpactLevel, Location
from semdiff.services.classifier import (
    classify,
    detect_change_type,
    detect_semantic_shift,
    detect_tone_change,
    tone_family,
)

BODY = Location(1, "Body")


class TestChangeType:

    def test_word_choice(self):
        change = classify("quick", "fast", BODY)
        assert change.type == ChangeType.WORD_CHOICE
        assert change.impact == ImpactLevel.NORMAL
        assert change.length == 1

    def test_large_deletion_is_critical(self):
        original = " ".join(f"word{i}" for i in range(25))
        change = classify(original, "", BODY)
        assert change.type == ChangeType.DELETION
        assert change.impact == ImpactLevel.CRITICAL
        assert change.length == 25
        assert change.explanation.startswith("Significant content removed")

    def test_small_deletion(self):
        change = classify("a few words", "", BODY)
        assert change.type == ChangeType.DELETION
        assert change.impact == ImpactLevel.NORMAL
        assert change.explanation == "Content removed."

    def test_addition(self):
        change = classify("", "new words", BODY)
        assert change.type == ChangeType.ADDITION
        assert change.impact == ImpactLevel.NORMAL
        assert change.length == 2

    def test_long_addition_is_important(self):
        added = " ".join(["more"] * 12)
        assert classify("", added, BODY).impact == ImpactLevel.IMPORTANT

    def test_punctuation(self):
        change = classify("Hello world", "Hello, world!", BODY)
        assert change.type == ChangeType.PUNCTUATION
        assert change.impact == ImpactLevel.LOW

    def test_spelling(self):
        change = classify("recieve the package", "receive the package", BODY)
        assert change.type == ChangeType.SPELLING
        assert change.impact == ImpactLevel.LOW

    def test_two_differing_words_are_not_spelling(self):
        assert detect_change_type("recieve teh package", "receive the package") != ChangeType.SPELLING

    def test_structure(self):
        modified = "short " + " ".join(["padding"] * 14)
        change = classify("short", modified, BODY)
        assert change.type == ChangeType.STRUCTURE
        assert change.impact == ImpactLevel.CRITICAL

    def test_tone_from_first_person(self):
        change = classify("The team built this.", "We built this.", BODY)
        assert change.type == ChangeType.TONE
        assert change.impact == ImpactLevel.IMPORTANT
        assert change.explanation == "Subtle tone adjustment."

    def test_tone_from_emotional_words(self):
        assert detect_change_type("This is amazing", "This is fine") == ChangeType.TONE

    def test_tone_in_introduction_is_critical(self):
        change = classify("The team built this.", "We built this.", Location(0, "Introduction"))
        assert change.impact == ImpactLevel.CRITICAL

    def test_modification(self):
        change = classify("The cat sat", "The cat sat on the warm mat today", BODY)
        assert change.type == ChangeType.MODIFICATION
        assert change.impact == ImpactLevel.NORMAL

    def test_modification_in_conclusion_is_critical(self):
        change = classify("The cat sat", "The cat sat on the warm mat today", Location(4, "Conclusion"))
        assert change.impact == ImpactLevel.CRITICAL

    def test_long_word_choice_is_important(self):
        change = classify(
            "alpha beta gamma delta epsilon zeta",
            "one two three four five six",
            BODY,
        )
        assert change.type == ChangeType.WORD_CHOICE
        assert change.impact == ImpactLevel.IMPORTANT

    @pytest.mark.parametrize("original, modified", [
        ("", ""),
        ("...", "!!!"),
        ("   ", "x"),
        ("Ünïcode wörds", "unicode words"),
        ("one", "one two three four five six seven eight nine ten eleven twelve"),
    ])
    def test_always_returns_a_type_and_impact(self, original, modified):
        change = classify(original, modified, BODY)
        assert isinstance(change.type, ChangeType)
        assert isinstance(change.impact, ImpactLevel)

    def test_result_is_partial(self):
        change = classify("quick", "fast", BODY)
        assert change.id == ""
        assert change.alternatives == []
        assert change.location == BODY


class TestTone:

    def test_whole_word_matching(self):
        # "mine" and "ours" only contain keywords as substrings
        assert not detect_tone_change("This is mine", "This is ours")

    def test_no_tone_change_when_both_personal(self):
        assert not detect_tone_change("We built it", "I built it")

    def test_tone_family(self):
        assert tone_family("Our team") == "personal"
        assert tone_family("The company will provide it") == "professional"
        assert tone_family("That stuff is pretty good") == "casual"
        assert tone_family("Therefore it holds") == "formal"
        assert tone_family("Nothing to see") == ""

    def test_semantic_shift(self):
        assert detect_semantic_shift(
            "Our company will provide support.",
            "The organization will provide support.",
        )

    def test_no_shift_without_a_family_on_both_sides(self):
        assert not detect_semantic_shift("We did it", "It was done")

    def test_semantic_shift_flows_into_explanation(self):
        change = classify(
            "Our company will provide support.",
            "The organization will provide support.",
            BODY,
        )
        assert change.type == ChangeType.TONE
        assert change.semantic_shift
        assert change.explanation.startswith("Significant tone shift")
