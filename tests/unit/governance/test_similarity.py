"""Unit tests for near-duplicate page detection"""
import pytest

from rbm.governance.content.similarity import (
    PageSection,
    PageText,
    SimilarityStatus,
    classify,
    find_best_matches,
    signature,
    similarity,
    tokenize,
)


def make_page(slug, h1="", intro="", sections=None, display_name=None):
    return PageText(
        slug=slug,
        display_name=display_name,
        h1=h1,
        intro=intro,
        sections=[PageSection(title=t, intent=i) for t, i in (sections or [])],
    )


class TestSignature:
    """Tests for signature and tokenize"""

    def test_signature_lowercases_and_collapses_whitespace(self):
        page = make_page("a", h1="  Emergency   Plumber ", intro="Fast\nRepairs", sections=[("Boilers", "Fix it")])

        assert signature(page) == "emergency plumber fast repairs boilers fix it"

    def test_tokenize_drops_short_tokens(self):
        assert tokenize("an ox ate the hay in leeds") == {"ate", "the", "hay", "leeds"}

    def test_tokenize_is_a_set(self):
        assert tokenize("leeds leeds leeds") == {"leeds"}


class TestSimilarity:
    """Tests for Jaccard similarity and classification"""

    def test_identical_signatures(self):
        assert similarity("plumbing services leeds", "plumbing services leeds") == 1.0

    def test_empty_signatures(self):
        assert similarity("", "") == 0.0
        assert similarity("an ox", "to be") == 0.0

    def test_symmetric_and_bounded(self):
        pairs = [
            ("plumbing services leeds", "plumbing services york"),
            ("alpha beta gamma", "delta"),
            ("one two three four", "three four five"),
        ]
        for a, b in pairs:
            score = similarity(a, b)
            assert score == similarity(b, a)
            assert 0.0 <= score <= 1.0

    def test_seven_of_ten_is_fail(self):
        shared = "one two three four five six seven"
        score = similarity(f"{shared} eight nine", f"{shared} ten")

        assert score == pytest.approx(0.7)
        assert classify(score) == SimilarityStatus.FAIL

    def test_half_is_warn(self):
        score = similarity("alpha beta", "alpha")

        assert score == 0.5
        assert classify(score) == SimilarityStatus.WARN

    def test_band_boundaries(self):
        assert classify(0.7) == SimilarityStatus.FAIL
        assert classify(0.699999) == SimilarityStatus.WARN
        assert classify(0.5) == SimilarityStatus.WARN
        assert classify(0.499999) == SimilarityStatus.PASS
        assert classify(0.0) == SimilarityStatus.PASS


class TestFindBestMatches:
    """Tests for batch matching"""

    def test_place_name_swap_warns(self):
        pages = [
            make_page("leeds", h1="Plumbers Leeds", intro="Fast repairs", display_name="Leeds"),
            make_page("york", h1="Plumbers York", intro="Fast repairs", display_name="York"),
        ]

        results = find_best_matches(pages)

        assert [r.slug for r in results] == ["leeds", "york"]
        assert results[0].matched_slug == "york"
        assert results[0].matched_display_name == "York"
        assert results[1].matched_slug == "leeds"
        assert results[0].score == pytest.approx(0.6)
        assert results[0].status == SimilarityStatus.WARN

    def test_plumbing_pages_match_each_other(self):
        pages = [
            make_page("leeds", h1="Plumbing in Leeds", intro="fast plumbing repair"),
            make_page("york", h1="Plumbing in York", intro="fast plumbing repair"),
        ]

        results = find_best_matches(pages)

        assert results[0].matched_slug == "york"
        assert results[1].matched_slug == "leeds"
        # shared {plumbing, fast, repair} over {plumbing, leeds, york, fast, repair}
        assert results[0].score == pytest.approx(0.6)
        assert results[0].status in (SimilarityStatus.WARN, SimilarityStatus.FAIL)

    def test_ties_go_to_lowest_index(self):
        pages = [
            make_page("a", h1="apple banana"),
            make_page("b", h1="cherry"),
            make_page("c", h1="durian"),
        ]

        results = find_best_matches(pages)

        # No overlap anywhere: every page matches the first other page at 0
        assert results[0].matched_slug == "b"
        assert results[1].matched_slug == "a"
        assert results[2].matched_slug == "a"
        assert all(r.score == 0.0 for r in results)
        assert all(r.status == SimilarityStatus.PASS for r in results)

    def test_picks_highest_score(self):
        pages = [
            make_page("a", h1="roof repair leeds"),
            make_page("b", h1="gutter cleaning york"),
            make_page("c", h1="roof repair york"),
        ]

        results = find_best_matches(pages)

        assert results[0].matched_slug == "c"
        assert results[1].matched_slug == "c"

    def test_single_page_has_no_match(self):
        results = find_best_matches([make_page("only", h1="just one page")])

        assert len(results) == 1
        assert results[0].matched_slug is None
        assert results[0].matched_display_name is None
        assert results[0].score == 0.0
        assert results[0].status == SimilarityStatus.PASS

    def test_display_name_defaults_to_slug(self):
        results = find_best_matches([make_page("a", h1="x"), make_page("b", h1="y")])

        assert results[0].display_name == "a"
        assert results[0].matched_display_name == "b"

    def test_to_dict_uses_plain_status(self):
        result = find_best_matches([make_page("a"), make_page("b")])[0]

        assert result.to_dict()["status"] == "pass"
