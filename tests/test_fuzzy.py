"""Tests for fuzzy matching."""

from muxpicker.picker.fuzzy import FuzzyMatch, fuzzy_match


class TestMatching:
    """Tests for which candidates match."""

    def test_empty_query_matches_everything(self):
        """Should match with a zero score and no positions."""
        assert fuzzy_match("", "anything") == FuzzyMatch(0, ())
        assert fuzzy_match("", "") == FuzzyMatch(0, ())

    def test_subsequence_matches(self):
        """Should match characters in order, not necessarily adjacent."""
        match = fuzzy_match("pjt", "project")

        assert match is not None
        assert match.positions == (0, 3, 6)

    def test_missing_character(self):
        """Should reject candidates lacking a query character."""
        assert fuzzy_match("pro", "backend") is None

    def test_out_of_order(self):
        """Should reject characters present only in the wrong order."""
        assert fuzzy_match("ba", "abc") is None

    def test_query_longer_than_candidate(self):
        """Should reject queries longer than the candidate."""
        assert fuzzy_match("abcd", "abc") is None

    def test_case_insensitive(self):
        """Should ignore case on both sides."""
        assert fuzzy_match("PRO", "project") is not None
        assert fuzzy_match("pro", "PROJECT") is not None

    def test_positions_index_candidate(self):
        """Should report positions that point at the matched characters."""
        candidate = "my-Project"
        match = fuzzy_match("mpr", candidate)

        assert [candidate[i].lower() for i in match.positions] == ["m", "p", "r"]


class TestScoring:
    """Tests for relative scores."""

    def test_identical_shapes_tie(self):
        """Should score equally shaped candidates the same."""
        assert fuzzy_match("pro", "project-a").score == fuzzy_match("pro", "project-b").score

    def test_contiguous_beats_scattered(self):
        """Should prefer a contiguous run."""
        assert fuzzy_match("abc", "abcxyz").score > fuzzy_match("abc", "axbycz").score

    def test_word_boundary_bonus(self):
        """Should prefer matches at the start of a word."""
        assert fuzzy_match("b", "a-b").score > fuzzy_match("b", "aab").score

    def test_camel_case_boundary(self):
        """Should treat a lower-to-upper change as a boundary."""
        assert fuzzy_match("b", "aB").score > fuzzy_match("b", "ab").score

    def test_shorter_candidate_wins(self):
        """Should prefer the shorter of two otherwise equal candidates."""
        assert fuzzy_match("web", "web").score > fuzzy_match("web", "web-frontend-service").score

    def test_best_alignment_chosen(self):
        """Should pick a tight late alignment over a stretched early one."""
        candidate = "a" + "x" * 25 + "ab"

        match = fuzzy_match("ab", candidate)

        assert match.positions == (26, 27)
