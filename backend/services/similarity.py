"""TF-IDF similarity and keyword discovery for résumé/job matching."""

import logging

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity as sklearn_cosine

logger = logging.getLogger(__name__)

# Generic job-posting filler; gives distinctive terms a higher IDF
_REFERENCE_CORPUS = [
    "the candidate should have experience and skills in relevant areas",
    "looking for a professional with strong background and qualifications",
    "requirements include working with teams and delivering results",
]


def tfidf_cosine_similarity(text_a: str, text_b: str) -> float:
    """Cosine similarity between two texts using TF-IDF vectors."""
    if not text_a.strip() or not text_b.strip():
        return 0.0

    vectorizer = TfidfVectorizer(
        stop_words="english",
        max_features=5000,
        sublinear_tf=True,
        ngram_range=(1, 2),
    )
    try:
        tfidf_matrix = vectorizer.fit_transform([text_a, text_b])
    except ValueError:
        # only stop words on one side
        return 0.0
    return float(sklearn_cosine(tfidf_matrix[0:1], tfidf_matrix[1:2])[0][0])


def extract_tfidf_keywords(text: str, top_n: int = 20) -> list[str]:
    """Top TF-IDF terms of ``text`` contrasted with a small reference corpus."""
    if not text.strip():
        return []

    vectorizer = TfidfVectorizer(
        stop_words="english",
        max_features=3000,
        sublinear_tf=True,
        ngram_range=(1, 2),
    )
    try:
        tfidf_matrix = vectorizer.fit_transform([text] + _REFERENCE_CORPUS)
    except ValueError:
        logger.debug("No usable terms for TF-IDF keyword extraction")
        return []

    feature_names = vectorizer.get_feature_names_out()
    scores = tfidf_matrix[0].toarray().flatten()
    top_indices = np.argsort(scores)[::-1][:top_n]
    return [
        feature_names[i]
        for i in top_indices
        if scores[i] > 0 and len(feature_names[i]) > 1
    ]
