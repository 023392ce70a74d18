"""Keyword categorizer tests."""

import pytest

from learnpath.tasks.categorization import SUBJECT_CATEGORIES, SUBJECT_KEYWORDS, categorize_task


class TestCategorizeTask:

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Algebra homework", "Mathematics"),
            ("Chemistry experiment", "Science"),
            ("Ancient Rome timeline", "History"),
            ("Write an essay on Hamlet", "English"),
            ("Morning yoga", "Physical Activity"),
            ("Do the laundry", "Life Skills"),
            ("Guitar music practice", "Interest / Passion"),
        ],
    )
    def test_title_keywords(self, title, expected):
        assert categorize_task(title) == expected

    def test_description_is_considered(self):
        assert categorize_task("Weekend", "bake and practise cooking") == "Life Skills"

    def test_case_insensitive(self):
        assert categorize_task("GEOMETRY PROOFS") == "Mathematics"

    def test_first_matching_subject_wins(self):
        """A title matching several subjects takes the earliest in table order."""
        assert categorize_task("Read about the physics of music") == "Science"

    def test_no_match(self):
        assert categorize_task("Misc item") is None

    def test_every_keyword_subject_is_known(self):
        assert set(SUBJECT_KEYWORDS) == set(SUBJECT_CATEGORIES)
