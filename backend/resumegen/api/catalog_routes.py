from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from resumegen.errors import InvalidRequest
from resumegen.models.generation_models import GeneratedResume
from resumegen.models.profile_models import ProfileRecord, ProfileSummary
from resumegen.services.pdf_templates import DEFAULT_TEMPLATE, TemplateRegistry
from resumegen.services.profile_store import ProfileStore
from resumegen.services.role_detector import available_roles
from resumegen.services.sample_resume import SAMPLE_DOCUMENT
from resumegen.utils.dependencies import get_profile_store, get_template_registry

router = APIRouter()


@router.get("/profiles", response_model=list[ProfileSummary])
async def list_profiles(store: ProfileStore = Depends(get_profile_store)):
    """Mapped profiles: id, resume file name, template and prompt."""
    return store.list_profiles()


@router.get("/profiles/{profile_id}", response_model=ProfileRecord)
async def get_profile(profile_id: str, store: ProfileStore = Depends(get_profile_store)):
    return store.load(profile_id)


@router.get("/templates")
async def list_templates(registry: TemplateRegistry = Depends(get_template_registry)):
    return {"default": DEFAULT_TEMPLATE, "templates": registry.list_templates()}


@router.get(
    "/preview",
    response_class=Response,
    responses={200: {"content": {GeneratedResume.media_type: {}}}},
)
async def preview_template(
    template: Optional[str] = Query(None),
    registry: TemplateRegistry = Depends(get_template_registry),
):
    """Render a template with the sample resume, shown inline. No LLM call."""
    if not template:
        raise InvalidRequest("Template parameter required")
    pdf = registry.render(template, SAMPLE_DOCUMENT)
    return Response(
        content=pdf,
        media_type=GeneratedResume.media_type,
        headers={"Content-Disposition": f'inline; filename="preview-{template}.pdf"'},
    )


@router.get("/roles")
async def list_roles():
    """Prompt names the role detector can pick for profiles mapped to "auto"."""
    return {"roles": available_roles()}
