"""Unit tests for the GEO content package generator"""
import json
import re

from rbm.governance.audit_rules import run_audit_rules
from rbm.governance.seo.geo_content import (
    BusinessInput,
    build_geo_content,
    generate_answer_capsule,
    generate_faq_schema,
    generate_faqs,
    generate_h1,
    generate_local_business_schema,
    generate_meta_description,
    generate_meta_title,
    generate_service_descriptions,
)
from rbm.services.scanning.signals import extract_signals

JSON_LD_RE = re.compile(r'<script type="application/ld\+json">\n(.*?)\n</script>', re.S)


def business(**overrides) -> BusinessInput:
    values = dict(
        business_name="Acme Plumbing",
        primary_city="Leeds",
        primary_services=["Boiler Repair", "Drain Unblocking", "Leak Detection", "Bathroom Fitting"],
        service_areas=["Bradford", "Wakefield", "Harrogate", "York"],
    )
    values.update(overrides)
    return BusinessInput(**values)


class TestTextGenerators:
    """Tests for the individual copy generators"""

    def test_meta_title(self):
        assert generate_meta_title(business()) == "Acme Plumbing | Boiler Repair in Leeds | Trusted Local Expert"

    def test_meta_title_without_services(self):
        assert generate_meta_title(business(primary_services=[])).startswith("Acme Plumbing | Services in Leeds")

    def test_meta_description_uses_three_services_and_two_areas(self):
        description = generate_meta_description(business())

        assert description.startswith(
            "Acme Plumbing offers professional Boiler Repair, Drain Unblocking, Leak Detection "
            "in Leeds and Bradford & Wakefield. "
        )
        assert "Bathroom Fitting" not in description
        assert description.endswith("Call today for a free quote!")

    def test_meta_description_without_areas(self):
        description = generate_meta_description(business(service_areas=[]))

        assert "in Leeds. Trusted local experts" in description

    def test_answer_capsule(self):
        capsule = generate_answer_capsule(business(credentials=["Gas Safe", "WaterSafe", "NICEIC"]))

        assert "serving Leeds, Bradford, Wakefield, Harrogate." in capsule
        assert " They are Gas Safe and WaterSafe certified." in capsule
        assert capsule.endswith("free estimates for all services.")

    def test_answer_capsule_without_credentials(self):
        assert "certified" not in generate_answer_capsule(business())

    def test_h1(self):
        assert generate_h1(business()) == "Expert Boiler Repair in Leeds"
        assert generate_h1(business(primary_services=[])) == "Expert Professional Services in Leeds"

    def test_service_descriptions(self):
        descriptions = generate_service_descriptions(business())

        assert [d.service for d in descriptions] == business().primary_services
        assert "professional boiler repair services throughout Leeds" in descriptions[0].description

    def test_faqs(self):
        faqs = generate_faqs(business())

        assert len(faqs) == 5
        assert faqs[0].question == "What areas does Acme Plumbing serve?"
        assert faqs[0].answer.startswith("We proudly serve Leeds, Bradford, Wakefield and")
        assert faqs[1].question == "How quickly can you respond to boiler repair emergencies?"


class TestSchemas:
    """Tests for the JSON-LD builders"""

    def test_local_business_schema(self):
        schema = generate_local_business_schema(business(phone="0113 496 0000", address="1 High Street"))

        assert schema["@type"] == "LocalBusiness"
        assert schema["description"].startswith("Acme Plumbing provides Boiler Repair, Drain Unblocking")
        assert [a["name"] for a in schema["areaServed"]] == ["Leeds", "Bradford", "Wakefield", "Harrogate", "York"]
        offers = schema["hasOfferCatalog"]["itemListElement"]
        assert [o["position"] for o in offers] == [1, 2, 3, 4]
        assert offers[0]["itemOffered"] == {"@type": "Service", "name": "Boiler Repair"}
        assert schema["telephone"] == "0113 496 0000"
        assert schema["address"]["addressLocality"] == "Leeds"
        assert schema["address"]["addressCountry"] == "UK"
        assert "email" not in schema

    def test_custom_description_wins(self):
        schema = generate_local_business_schema(business(description="Family firm since 1990"))

        assert schema["description"] == "Family firm since 1990"

    def test_faq_schema(self):
        faqs = generate_faqs(business())
        schema = generate_faq_schema(faqs)

        assert schema["@type"] == "FAQPage"
        assert len(schema["mainEntity"]) == 5
        assert schema["mainEntity"][0]["acceptedAnswer"]["text"] == faqs[0].answer


class TestBuildGeoContent:
    """Tests for the assembled package"""

    def test_markdown_sections(self):
        package = build_geo_content(business())

        assert package.markdown.startswith("# Acme Plumbing\n\n## Meta Information\n")
        assert "### Drain Unblocking\n" in package.markdown
        assert "**Q: Do you provide free estimates?**\nA: Yes!" in package.markdown

    def test_json_ld_blocks_parse(self):
        package = build_geo_content(business())

        blocks = [json.loads(block) for block in JSON_LD_RE.findall(package.html)]

        assert [b["@type"] for b in blocks] == ["LocalBusiness", "FAQPage"]
        assert blocks == package.schema_json_ld

    def test_html_is_escaped(self):
        package = build_geo_content(business(business_name="Smith & Sons <Plumbing>"))

        assert "<Plumbing>" not in package.html.split("<script")[0]
        assert "Smith &amp; Sons &lt;Plumbing&gt;" in package.html
        assert "</Plumbing>" not in package.html

    def test_generated_html_is_detected_by_signal_extractor(self):
        package = build_geo_content(business())

        signal = extract_signals(package.html, "https://example.com/")

        assert signal.has_local_business_schema is True
        assert signal.has_faq_schema is True
        assert signal.has_faq_content is True
        assert signal.faq_count >= 5
        assert signal.h1 == "Expert Boiler Repair in Leeds"

    def test_generated_html_clears_schema_and_faq_findings(self):
        signal = extract_signals(build_geo_content(business()).html, "https://example.com/")

        titles = [issue.title for issue in run_audit_rules(signal, [signal])]

        assert "Missing structured data" not in titles
        assert "No FAQ content" not in titles

    def test_generated_json(self):
        package = build_geo_content(business())
        generated = package.generated_json()

        assert generated["meta_title"] == package.meta_title
        assert generated["faqs"][0] == {"question": package.faqs[0].question, "answer": package.faqs[0].answer}
        assert len(generated["schema_json_ld"]) == 2
