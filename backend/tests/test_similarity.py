import pytest

from services.similarity import extract_tfidf_keywords, tfidf_cosine_similarity

BACKEND_RESUME = "Backend engineer, six years of Go and PostgreSQL, designed gRPC services on Kubernetes"
BACKEND_JOB = "We need a backend engineer fluent in Go with PostgreSQL and Kubernetes in production"
NURSE_RESUME = "Registered nurse with intensive care and patient triage experience"


class TestTfidfCosineSimilarity:
    def test_same_text(self):
        assert tfidf_cosine_similarity(BACKEND_RESUME, BACKEND_RESUME) == pytest.approx(1.0, abs=0.01)

    def test_matching_profile_beats_unrelated_profile(self):
        related = tfidf_cosine_similarity(BACKEND_RESUME, BACKEND_JOB)
        unrelated = tfidf_cosine_similarity(NURSE_RESUME, BACKEND_JOB)
        assert related > unrelated
        assert unrelated < 0.1

    def test_symmetric(self):
        assert tfidf_cosine_similarity(BACKEND_RESUME, BACKEND_JOB) == pytest.approx(
            tfidf_cosine_similarity(BACKEND_JOB, BACKEND_RESUME)
        )

    @pytest.mark.parametrize("a,b", [("", BACKEND_JOB), (BACKEND_RESUME, "   ")])
    def test_blank_side(self, a, b):
        assert tfidf_cosine_similarity(a, b) == 0.0

    def test_only_stop_words(self):
        assert tfidf_cosine_similarity("and the of", BACKEND_JOB) == 0.0


class TestExtractTfidfKeywords:
    def test_job_terms_without_stop_words(self):
        keywords = extract_tfidf_keywords(BACKEND_JOB, top_n=50)
        assert 0 < len(keywords) <= 50
        assert "the" not in keywords
        assert "postgresql" in keywords
        assert "kubernetes" in keywords

    def test_empty(self):
        assert extract_tfidf_keywords("") == []
        assert extract_tfidf_keywords("the of and") == []
