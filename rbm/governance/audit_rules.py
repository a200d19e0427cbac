"""GEO audit rule engine.

A fixed, ordered list of rules turns PageSignals into prioritized issues.
Homepage rules look at the homepage signal (with the whole batch as
context); page rules run once per crawled page. Every rule is evaluated on
every run.
"""
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

from rbm.services.scanning.signals import PageSignal


class IssuePriority(str, Enum):
    """Audit issue priority bands"""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


SCORE_IMPACT = {
    IssuePriority.CRITICAL: 20,
    IssuePriority.HIGH: 12,
    IssuePriority.MEDIUM: 6,
    IssuePriority.LOW: 2,
}

THIN_CONTENT_WORDS = 300
MIN_ALT_COVERAGE = 0.8


@dataclass
class AuditIssue:
    """Issue raised by one audit rule"""

    title: str
    description: str
    priority: IssuePriority
    category: str
    impact: str
    recommendation: str
    page_url: Optional[str] = None
    evidence: Optional[str] = None

    @property
    def score_impact(self) -> int:
        return SCORE_IMPACT[self.priority]

    def to_dict(self) -> dict:
        data = asdict(self)
        data["priority"] = self.priority.value
        data["score_impact"] = self.score_impact
        return data


HomepageRule = Callable[[PageSignal, Sequence[PageSignal]], Optional[AuditIssue]]
PageRule = Callable[[PageSignal], Optional[AuditIssue]]


@dataclass(frozen=True)
class Rule:
    name: str
    check: Union[HomepageRule, PageRule]
    per_page: bool = False


def missing_title(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.title:
        return None
    return AuditIssue(
        title="Missing page title",
        description="The homepage has no title tag",
        priority=IssuePriority.CRITICAL,
        category="technical",
        page_url=home.url,
        impact="Search engines cannot properly index or rank the page",
        recommendation="Add a descriptive title tag with target keywords",
    )


def missing_h1(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.h1:
        return None
    return AuditIssue(
        title="Missing H1 heading",
        description="The homepage has no H1 tag",
        priority=IssuePriority.CRITICAL,
        category="content",
        page_url=home.url,
        impact="Reduced semantic clarity for search engines and AI systems",
        recommendation="Add a clear H1 that describes the business and location",
    )


def thin_content(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.word_count >= THIN_CONTENT_WORDS:
        return None
    return AuditIssue(
        title="Thin content",
        description=f"Homepage has only {home.word_count} words",
        priority=IssuePriority.CRITICAL,
        category="content",
        evidence=f"Word count: {home.word_count}",
        page_url=home.url,
        impact="Insufficient content for GEO ranking and AI answer generation",
        recommendation="Expand content to at least 500 words with service details",
    )


def missing_business_schema(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.has_local_business_schema or home.has_organization_schema:
        return None
    return AuditIssue(
        title="Missing structured data",
        description="No LocalBusiness or Organization schema found",
        priority=IssuePriority.CRITICAL,
        category="schema",
        page_url=home.url,
        impact="AI systems cannot reliably extract business information",
        recommendation="Add LocalBusiness schema with NAP, services, and service area",
    )


def missing_meta_description(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.meta_description:
        return None
    return AuditIssue(
        title="Missing meta description",
        description="No meta description found",
        priority=IssuePriority.HIGH,
        category="technical",
        page_url=home.url,
        impact="Poor click-through rates and missed GEO opportunity",
        recommendation="Add a compelling meta description under 160 characters",
    )


def no_geo_keywords(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.has_geo_keywords:
        return None
    return AuditIssue(
        title="No location keywords",
        description="No geographic keywords found on homepage",
        priority=IssuePriority.HIGH,
        category="geo",
        page_url=home.url,
        impact='Reduced visibility for local and "near me" searches',
        recommendation='Include service area cities and "near me" variations',
    )


def no_contact_info(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.has_phone or home.has_email:
        return None
    return AuditIssue(
        title="No contact information visible",
        description="No phone number or email found in HTML",
        priority=IssuePriority.HIGH,
        category="content",
        page_url=home.url,
        impact="Users and AI systems cannot find contact details",
        recommendation="Display phone and email prominently in header/footer",
    )


def no_faq_content(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.has_faq_schema or home.has_faq_content:
        return None
    return AuditIssue(
        title="No FAQ content",
        description="No FAQ section or FAQ schema found",
        priority=IssuePriority.HIGH,
        category="geo",
        page_url=home.url,
        impact="Missing opportunity for featured snippets and AI answers",
        recommendation="Add FAQ section with common customer questions",
    )


def missing_service_schema(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.has_service_schema:
        return None
    return AuditIssue(
        title="Missing Service schema",
        description="No Service structured data found",
        priority=IssuePriority.MEDIUM,
        category="schema",
        page_url=home.url,
        impact="Services not clearly defined for AI systems",
        recommendation="Add Service schema for each main service offered",
    )


def missing_canonical(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.has_canonical:
        return None
    return AuditIssue(
        title="Missing canonical tag",
        description="No canonical URL specified",
        priority=IssuePriority.MEDIUM,
        category="technical",
        page_url=home.url,
        impact="Potential duplicate content issues",
        recommendation="Add canonical tag pointing to the preferred URL",
    )


def low_alt_text_coverage(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.images_count == 0 or home.alt_text_coverage >= MIN_ALT_COVERAGE:
        return None
    missing = home.images_count - home.images_with_alt
    return AuditIssue(
        title="Images missing alt text",
        description=f"{missing} of {home.images_count} images lack alt text",
        priority=IssuePriority.MEDIUM,
        category="accessibility",
        evidence=f"{round(home.alt_text_coverage * 100)}% coverage",
        page_url=home.url,
        impact="Reduced accessibility and image SEO",
        recommendation="Add descriptive alt text to all images",
    )


def important_page_noindex(page: PageSignal) -> Optional[AuditIssue]:
    if page.is_indexable or page.page_type == "other":
        return None
    return AuditIssue(
        title="Important page blocked from indexing",
        description=f"{page.page_type} page has noindex",
        priority=IssuePriority.CRITICAL,
        category="technical",
        evidence="robots noindex meta tag found",
        page_url=page.url,
        impact="Page will not appear in search results",
        recommendation="Remove noindex if page should be indexed",
    )


def no_h2_headings(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.h2_count > 0:
        return None
    return AuditIssue(
        title="No H2 subheadings",
        description="Homepage lacks H2 structure",
        priority=IssuePriority.LOW,
        category="content",
        page_url=home.url,
        impact="Reduced content structure clarity",
        recommendation="Add H2 headings to organize content sections",
    )


def missing_breadcrumb_schema(home: PageSignal, pages: Sequence[PageSignal]) -> Optional[AuditIssue]:
    if home.has_breadcrumb_schema or len(pages) <= 1:
        return None
    return AuditIssue(
        title="Missing breadcrumb schema",
        description="No BreadcrumbList structured data",
        priority=IssuePriority.LOW,
        category="schema",
        page_url=home.url,
        impact="No breadcrumb rich results in search",
        recommendation="Add breadcrumb schema for better navigation display",
    )


RULES: List[Rule] = [
    Rule("missing_title", missing_title),
    Rule("missing_h1", missing_h1),
    Rule("thin_content", thin_content),
    Rule("missing_business_schema", missing_business_schema),
    Rule("missing_meta_description", missing_meta_description),
    Rule("no_geo_keywords", no_geo_keywords),
    Rule("no_contact_info", no_contact_info),
    Rule("no_faq_content", no_faq_content),
    Rule("missing_service_schema", missing_service_schema),
    Rule("missing_canonical", missing_canonical),
    Rule("low_alt_text_coverage", low_alt_text_coverage),
    Rule("important_page_noindex", important_page_noindex, per_page=True),
    Rule("no_h2_headings", no_h2_headings),
    Rule("missing_breadcrumb_schema", missing_breadcrumb_schema),
]


def run_audit_rules(
    homepage: PageSignal,
    all_pages: Optional[Sequence[PageSignal]] = None,
    rules: Optional[Sequence[Rule]] = None,
) -> List[AuditIssue]:
    """
    Evaluate every rule and collect the triggered issues in rule order.

    Args:
        homepage: Signal of the audited site's homepage
        all_pages: Every crawled page, homepage included (defaults to [homepage])
        rules: Rule list override

    Returns:
        List of AuditIssue
    """
    pages = list(all_pages) if all_pages else [homepage]
    issues: List[AuditIssue] = []
    for rule in rules if rules is not None else RULES:
        if rule.per_page:
            for page in pages:
                issue = rule.check(page)
                if issue is not None:
                    issues.append(issue)
        else:
            issue = rule.check(homepage, pages)
            if issue is not None:
                issues.append(issue)
    return issues


def aggregate_health_score(issues: Sequence[AuditIssue]) -> int:
    """100 minus the summed score impacts, floored at 0."""
    return max(0, 100 - sum(issue.score_impact for issue in issues))
