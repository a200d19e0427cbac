"""Build variance check: near-duplicate detection across generated pages"""
from fastapi import APIRouter, Depends

from rbm.core.auth import get_current_user
from rbm.governance.content.similarity import PageSection, PageText, find_best_matches
from rbm.schemas.variance import VariancePage, VarianceRequest, VarianceResponse, VarianceResult

router = APIRouter(prefix="/build", tags=["build"])


def to_page_text(page: VariancePage) -> PageText:
    slug = page.slug or "page"
    return PageText(
        slug=slug,
        display_name=page.display_name or slug,
        h1=page.content.h1 or "",
        intro=page.content.intro or "",
        sections=[
            PageSection(title=section.title or "", intent=section.intent or "")
            for section in page.content.sections
        ],
    )


@router.post("/variance", response_model=VarianceResponse)
async def check_variance(
    body: VarianceRequest,
    current_user: dict = Depends(get_current_user),
):
    """
    Score every page against its most similar sibling.

    Results come back in input order with a pass/warn/fail status.
    """
    results = find_best_matches([to_page_text(page) for page in body.pages])
    return VarianceResponse(results=[VarianceResult(**result.to_dict()) for result in results])
