"""GEO content package for local businesses.

Template-driven (no model call): meta tags, an answer capsule for AI
assistants to quote, service blurbs, FAQs and LocalBusiness / FAQPage
JSON-LD. The output addresses the audit findings for missing business
schema, missing FAQ content and missing meta descriptions.
"""
import html
import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

SCHEMA_CONTEXT = "https://schema.org"
DEFAULT_COUNTRY = "UK"


@dataclass
class BusinessInput:
    business_name: str
    primary_city: str
    primary_services: List[str]
    country: str = DEFAULT_COUNTRY
    service_areas: List[str] = field(default_factory=list)
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    credentials: List[str] = field(default_factory=list)
    year_established: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ServiceDescription:
    service: str
    description: str


@dataclass
class Faq:
    question: str
    answer: str


@dataclass
class GeoContentPackage:
    """Everything generated for one business, plus rendered markdown and HTML"""

    meta_title: str
    meta_description: str
    answer_capsule: str
    h1_suggestion: str
    service_descriptions: List[ServiceDescription]
    faqs: List[Faq]
    schema_json_ld: List[Dict[str, Any]]
    markdown: str = ""
    html: str = ""

    def generated_json(self) -> Dict[str, Any]:
        return {
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
            "answer_capsule": self.answer_capsule,
            "h1_suggestion": self.h1_suggestion,
            "service_descriptions": [asdict(s) for s in self.service_descriptions],
            "faqs": [asdict(f) for f in self.faqs],
            "schema_json_ld": self.schema_json_ld,
        }


def generate_meta_title(business: BusinessInput) -> str:
    main_service = business.primary_services[0] if business.primary_services else "Services"
    return f"{business.business_name} | {main_service} in {business.primary_city} | Trusted Local Expert"


def generate_meta_description(business: BusinessInput) -> str:
    services = ", ".join(business.primary_services[:3])
    areas = " & ".join(business.service_areas[:2])
    return (
        f"{business.business_name} offers professional {services} in {business.primary_city}"
        f"{f' and {areas}' if areas else ''}. "
        "Trusted local experts with fast response times. Call today for a free quote!"
    )


def generate_answer_capsule(business: BusinessInput) -> str:
    """Two or three quotable sentences naming the business, services and area."""
    services = ", ".join(business.primary_services[:3])
    areas = ", ".join([business.primary_city] + business.service_areas[:3])
    creds = ""
    if business.credentials:
        creds = f" They are {' and '.join(business.credentials[:2])} certified."
    return (
        f"{business.business_name} is a trusted local provider of {services} serving {areas}.{creds} "
        "They offer same-day appointments and free estimates for all services."
    )


def generate_h1(business: BusinessInput) -> str:
    main_service = business.primary_services[0] if business.primary_services else "Professional Services"
    return f"Expert {main_service} in {business.primary_city}"


def generate_service_descriptions(business: BusinessInput) -> List[ServiceDescription]:
    descriptions = []
    for service in business.primary_services:
        lowered = service.lower()
        descriptions.append(ServiceDescription(
            service=service,
            description=(
                f"{business.business_name} provides professional {lowered} services throughout "
                f"{business.primary_city} and surrounding areas. Our experienced team delivers "
                "high-quality workmanship, transparent pricing, and reliable service. Whether you need "
                "emergency assistance or scheduled maintenance, we're here to help with all your "
                f"{lowered} needs."
            ),
        ))
    return descriptions


def generate_faqs(business: BusinessInput) -> List[Faq]:
    name = business.business_name
    city = business.primary_city
    main_service = business.primary_services[0].lower() if business.primary_services else "services"
    areas = ", ".join([city] + business.service_areas[:2])

    return [
        Faq(
            question=f"What areas does {name} serve?",
            answer=(
                f"We proudly serve {areas} and the surrounding communities. "
                "Contact us to confirm service availability in your specific location."
            ),
        ),
        Faq(
            question=f"How quickly can you respond to {main_service} emergencies?",
            answer=(
                f"We understand that {main_service} emergencies can't wait. We offer same-day and "
                f"emergency appointments throughout {city}, typically arriving within 1-2 hours of your call."
            ),
        ),
        Faq(
            question="Do you provide free estimates?",
            answer=(
                f"Yes! {name} offers free, no-obligation estimates for all {main_service} work. "
                "We'll assess your needs and provide transparent pricing before any work begins."
            ),
        ),
        Faq(
            question="Are your technicians licensed and insured?",
            answer=(
                f"Absolutely. All {name} technicians are fully licensed, insured, and background-checked. "
                "We maintain all required certifications and stay current with industry best practices."
            ),
        ),
        Faq(
            question="What payment methods do you accept?",
            answer=(
                "We accept all major credit cards, debit cards, bank transfers, and cash. Payment is due "
                "upon completion of work, and we provide detailed invoices for all services."
            ),
        ),
    ]


def generate_local_business_schema(business: BusinessInput) -> Dict[str, Any]:
    """LocalBusiness JSON-LD with served areas and an offer catalog of the services."""
    schema: Dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": "LocalBusiness",
        "name": business.business_name,
        "description": business.description or (
            f"{business.business_name} provides {', '.join(business.primary_services)} "
            f"in {business.primary_city}"
        ),
        "areaServed": [
            {"@type": "City", "name": area}
            for area in [business.primary_city] + business.service_areas
        ],
        "hasOfferCatalog": {
            "@type": "OfferCatalog",
            "name": "Services",
            "itemListElement": [
                {
                    "@type": "Offer",
                    "itemOffered": {"@type": "Service", "name": service},
                    "position": index,
                }
                for index, service in enumerate(business.primary_services, 1)
            ],
        },
    }

    if business.phone:
        schema["telephone"] = business.phone
    if business.email:
        schema["email"] = business.email
    if business.address:
        schema["address"] = {
            "@type": "PostalAddress",
            "streetAddress": business.address,
            "addressLocality": business.primary_city,
            "addressCountry": business.country,
        }
    if business.year_established:
        schema["foundingDate"] = str(business.year_established)

    return schema


def generate_faq_schema(faqs: List[Faq]) -> Dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": faq.question,
                "acceptedAnswer": {"@type": "Answer", "text": faq.answer},
            }
            for faq in faqs
        ],
    }


def render_markdown(business: BusinessInput, package: GeoContentPackage) -> str:
    services = "\n\n".join(f"### {s.service}\n{s.description}" for s in package.service_descriptions)
    faqs = "\n\n".join(f"**Q: {f.question}**\nA: {f.answer}" for f in package.faqs)
    return (
        f"# {business.business_name}\n\n"
        "## Meta Information\n"
        f"- **Title:** {package.meta_title}\n"
        f"- **Description:** {package.meta_description}\n\n"
        "## Answer Capsule\n"
        f"{package.answer_capsule}\n\n"
        "## Suggested H1\n"
        f"{package.h1_suggestion}\n\n"
        "## Services\n\n"
        f"{services}\n\n"
        "## Frequently Asked Questions\n\n"
        f"{faqs}\n"
    )


def _json_ld_script(schema: Dict[str, Any]) -> str:
    # "</" inside a string value would close the script element early
    payload = json.dumps(schema, indent=2, ensure_ascii=False).replace("</", "<\\/")
    return f'<script type="application/ld+json">\n{payload}\n</script>'


def render_html(package: GeoContentPackage) -> str:
    """HTML fragment with escaped copy, <details> FAQs and JSON-LD script blocks."""
    esc = html.escape
    services = "".join(
        f'\n    <div class="service">\n      <h3>{esc(s.service)}</h3>\n      <p>{esc(s.description)}</p>\n    </div>'
        for s in package.service_descriptions
    )
    faqs = "".join(
        f"\n    <details>\n      <summary>{esc(f.question)}</summary>\n      <p>{esc(f.answer)}</p>\n    </details>"
        for f in package.faqs
    )
    scripts = "\n\n".join(_json_ld_script(schema) for schema in package.schema_json_ld)
    return (
        '<div class="geo-content">\n'
        f"  <h1>{esc(package.h1_suggestion)}</h1>\n\n"
        f'  <p class="answer-capsule">{esc(package.answer_capsule)}</p>\n\n'
        '  <section class="services">\n'
        f"    <h2>Our Services</h2>{services}\n"
        "  </section>\n\n"
        '  <section class="faqs">\n'
        f"    <h2>Frequently Asked Questions</h2>{faqs}\n"
        "  </section>\n"
        "</div>\n\n"
        f"{scripts}\n"
    )


def build_geo_content(business: BusinessInput) -> GeoContentPackage:
    """
    Generate the full GEO content package for a business.

    Args:
        business: Business details; needs a name, a city and at least one service

    Returns:
        GeoContentPackage with markdown and HTML renderings filled in
    """
    faqs = generate_faqs(business)
    package = GeoContentPackage(
        meta_title=generate_meta_title(business),
        meta_description=generate_meta_description(business),
        answer_capsule=generate_answer_capsule(business),
        h1_suggestion=generate_h1(business),
        service_descriptions=generate_service_descriptions(business),
        faqs=faqs,
        schema_json_ld=[generate_local_business_schema(business), generate_faq_schema(faqs)],
    )
    package.markdown = render_markdown(business, package)
    package.html = render_html(package)
    return package
