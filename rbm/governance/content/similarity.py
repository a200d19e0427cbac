"""Near-duplicate detection for batches of generated pages.

Token-set Jaccard similarity over a text signature of each page. Used by the
build flow to warn before publishing location/service pages that only swap a
place name.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Set


class SimilarityStatus(str, Enum):
    """Similarity band for a page's closest match."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


FAIL_THRESHOLD = 0.7
WARN_THRESHOLD = 0.5
MIN_TOKEN_LENGTH = 3


@dataclass
class PageSection:
    title: str = ""
    intent: str = ""


@dataclass
class PageText:
    """Text fields of a generated page that take part in the signature."""

    slug: str = "page"
    display_name: Optional[str] = None
    h1: str = ""
    intro: str = ""
    sections: List[PageSection] = field(default_factory=list)


@dataclass
class SimilarityResult:
    """A page's closest match within its batch."""

    slug: str
    display_name: str
    matched_slug: Optional[str]
    matched_display_name: Optional[str]
    score: float
    status: SimilarityStatus

    def to_dict(self) -> dict:
        return {
            "slug": self.slug,
            "display_name": self.display_name,
            "matched_slug": self.matched_slug,
            "matched_display_name": self.matched_display_name,
            "score": self.score,
            "status": self.status.value,
        }


def signature(page: PageText) -> str:
    """Lowercased, whitespace-normalised h1 + intro + section titles/intents."""
    parts = [page.h1 or "", page.intro or ""]
    parts.extend(f"{s.title or ''} {s.intent or ''}" for s in page.sections)
    return " ".join(" ".join(parts).split()).lower()


def tokenize(text: str) -> Set[str]:
    """Whitespace tokens longer than two characters."""
    return {token for token in text.split() if len(token) >= MIN_TOKEN_LENGTH}


def similarity(sig_a: str, sig_b: str) -> float:
    """
    Jaccard index of the two signatures' token sets.

    Returns 0.0 when both token sets are empty.
    """
    tokens_a = tokenize(sig_a)
    tokens_b = tokenize(sig_b)
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


def classify(score: float) -> SimilarityStatus:
    """Map a score onto pass/warn/fail; each band includes its lower bound."""
    if score >= FAIL_THRESHOLD:
        return SimilarityStatus.FAIL
    if score >= WARN_THRESHOLD:
        return SimilarityStatus.WARN
    return SimilarityStatus.PASS


def find_best_matches(pages: Sequence[PageText]) -> List[SimilarityResult]:
    """
    Find each page's most similar other page in the batch.

    Ties go to the lowest batch index, so a page with no overlap at all is
    matched to the first other page with score 0. A batch of one page has
    nothing to compare against and matches nothing.
    """
    signatures = [signature(page) for page in pages]
    results = []

    for index, page in enumerate(pages):
        best_score = 0.0
        best_index = None
        for other_index, other_sig in enumerate(signatures):
            if other_index == index:
                continue
            score = similarity(signatures[index], other_sig)
            if best_index is None or score > best_score:
                best_score = score
                best_index = other_index

        matched = pages[best_index] if best_index is not None else None
        results.append(
            SimilarityResult(
                slug=page.slug,
                display_name=page.display_name or page.slug,
                matched_slug=matched.slug if matched else None,
                matched_display_name=(matched.display_name or matched.slug) if matched else None,
                score=best_score,
                status=classify(best_score),
            )
        )

    return results
