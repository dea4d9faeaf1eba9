from fastapi import APIRouter, Depends
from fastapi.responses import Response

from resumegen.models.generation_models import GenerateRequest, GeneratedResume
from resumegen.services.generation_service import GenerationService, validate_request
from resumegen.utils.dependencies import get_generation_service

router = APIRouter()


@router.post(
    "/generate",
    response_class=Response,
    responses={200: {"content": {GeneratedResume.media_type: {}}}},
)
async def generate_resume(
    req: GenerateRequest,
    service: GenerationService = Depends(get_generation_service),
):
    """
    Generate a tailored resume PDF for a mapped profile and a job description.

    Errors come back as JSON ({error, stage?} or {error, locationType}) through
    the GenerationError handler registered in main.py.
    """
    request = validate_request(req)
    result = await service.generate(request)
    return Response(
        content=result.pdf,
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
