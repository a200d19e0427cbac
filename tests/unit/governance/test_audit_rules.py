"""Unit tests for the GEO audit rule engine"""
from rbm.governance.audit_rules import (
    RULES,
    AuditIssue,
    IssuePriority,
    Rule,
    aggregate_health_score,
    run_audit_rules,
)
from rbm.services.scanning.signals import PageSignal


def healthy_homepage(**overrides) -> PageSignal:
    values = dict(
        url="https://example.com/",
        page_type="homepage",
        title="Plumbers in Leeds",
        meta_description="Fast local plumbing",
        h1="Leeds Plumbing",
        h2_count=3,
        word_count=800,
        has_local_business_schema=True,
        has_service_schema=True,
        has_faq_schema=True,
        has_breadcrumb_schema=True,
        has_geo_keywords=True,
        has_phone=True,
        has_canonical=True,
        images_count=4,
        images_with_alt=4,
    )
    values.update(overrides)
    return PageSignal(**values)


class TestRunAuditRules:
    """Tests for rule evaluation"""

    def test_healthy_site_has_no_issues(self):
        assert run_audit_rules(healthy_homepage()) == []

    def test_empty_homepage_issues_in_rule_order(self):
        home = PageSignal(url="https://example.com/", page_type="homepage")

        issues = run_audit_rules(home)

        assert [i.title for i in issues] == [
            "Missing page title",
            "Missing H1 heading",
            "Thin content",
            "Missing structured data",
            "Missing meta description",
            "No location keywords",
            "No contact information visible",
            "No FAQ content",
            "Missing Service schema",
            "Missing canonical tag",
            "No H2 subheadings",
        ]
        critical = [i for i in issues if i.priority == IssuePriority.CRITICAL]
        assert len(critical) == 4
        assert all(i.page_url == "https://example.com/" for i in issues)

    def test_bare_page_has_exactly_four_critical_issues(self):
        home = PageSignal(url="https://example.com/", page_type="homepage", word_count=50)

        critical = [i.title for i in run_audit_rules(home) if i.priority == IssuePriority.CRITICAL]

        assert critical == [
            "Missing page title",
            "Missing H1 heading",
            "Thin content",
            "Missing structured data",
        ]

    def test_all_failing_rules_reported(self):
        # Every rule is evaluated; a failing early rule does not hide later ones
        home = healthy_homepage(title=None, h2_count=0)

        titles = [i.title for i in run_audit_rules(home)]

        assert titles == ["Missing page title", "No H2 subheadings"]

    def test_thin_content_evidence(self):
        issues = run_audit_rules(healthy_homepage(word_count=120))

        assert len(issues) == 1
        assert issues[0].description == "Homepage has only 120 words"
        assert issues[0].evidence == "Word count: 120"

    def test_thin_content_threshold(self):
        assert run_audit_rules(healthy_homepage(word_count=300)) == []

    def test_organization_schema_satisfies_business_schema(self):
        home = healthy_homepage(has_local_business_schema=False, has_organization_schema=True)

        assert run_audit_rules(home) == []

    def test_email_satisfies_contact_rule(self):
        assert run_audit_rules(healthy_homepage(has_phone=False, has_email=True)) == []

    def test_faq_content_satisfies_faq_rule(self):
        assert run_audit_rules(healthy_homepage(has_faq_schema=False, has_faq_content=True)) == []

    def test_low_alt_text_coverage(self):
        issues = run_audit_rules(healthy_homepage(images_count=10, images_with_alt=5))

        assert len(issues) == 1
        assert issues[0].description == "5 of 10 images lack alt text"
        assert issues[0].evidence == "50% coverage"
        assert issues[0].priority == IssuePriority.MEDIUM

    def test_alt_text_at_threshold_passes(self):
        assert run_audit_rules(healthy_homepage(images_count=10, images_with_alt=8)) == []

    def test_no_images_passes_alt_rule(self):
        assert run_audit_rules(healthy_homepage(images_count=0, images_with_alt=0)) == []

    def test_noindex_on_important_pages(self):
        home = healthy_homepage()
        service = PageSignal(url="https://example.com/services", page_type="service", is_indexable=False)
        other = PageSignal(url="https://example.com/privacy", page_type="other", is_indexable=False)

        issues = run_audit_rules(home, [home, service, other])

        assert len(issues) == 1
        assert issues[0].title == "Important page blocked from indexing"
        assert issues[0].description == "service page has noindex"
        assert issues[0].page_url == "https://example.com/services"
        assert issues[0].priority == IssuePriority.CRITICAL

    def test_noindex_homepage_flagged(self):
        home = healthy_homepage(is_indexable=False)

        issues = run_audit_rules(home)

        assert [i.title for i in issues] == ["Important page blocked from indexing"]

    def test_breadcrumb_only_for_multi_page_crawls(self):
        home = healthy_homepage(has_breadcrumb_schema=False)
        about = PageSignal(url="https://example.com/about", page_type="about")

        assert run_audit_rules(home, [home]) == []
        issues = run_audit_rules(home, [home, about])
        assert [i.title for i in issues] == ["Missing breadcrumb schema"]

    def test_custom_rule_list(self):
        def always(home, pages):
            return AuditIssue(
                title="Custom",
                description="d",
                priority=IssuePriority.LOW,
                category="c",
                impact="i",
                recommendation="r",
            )

        issues = run_audit_rules(healthy_homepage(), rules=[Rule("always", always)])

        assert [i.title for i in issues] == ["Custom"]

    def test_rule_list_order(self):
        assert [r.name for r in RULES][:4] == [
            "missing_title", "missing_h1", "thin_content", "missing_business_schema",
        ]
        assert [r.name for r in RULES if r.per_page] == ["important_page_noindex"]


class TestScoring:
    """Tests for score impact and health score"""

    def test_score_impact_by_priority(self):
        def issue(priority):
            return AuditIssue("t", "d", priority, "c", "i", "r")

        assert issue(IssuePriority.CRITICAL).score_impact == 20
        assert issue(IssuePriority.HIGH).score_impact == 12
        assert issue(IssuePriority.MEDIUM).score_impact == 6
        assert issue(IssuePriority.LOW).score_impact == 2

    def test_to_dict(self):
        issue = run_audit_rules(healthy_homepage(word_count=10))[0]

        data = issue.to_dict()

        assert data["priority"] == "critical"
        assert data["score_impact"] == 20
        assert data["category"] == "content"

    def test_aggregate_health_score(self):
        assert aggregate_health_score([]) == 100
        issues = run_audit_rules(healthy_homepage(title=None, h2_count=0))
        assert aggregate_health_score(issues) == 100 - 20 - 2

    def test_aggregate_health_score_floors_at_zero(self):
        issues = run_audit_rules(PageSignal(url="https://example.com/", page_type="homepage"))

        assert aggregate_health_score(issues) == 0
