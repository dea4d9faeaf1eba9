from fastapi import APIRouter, Depends

from resumegen.services.llm_service import get_providers_info
from resumegen.utils.dependencies import APIKeys, get_api_keys

router = APIRouter()


@router.get("/providers")
async def list_providers(api_keys: APIKeys = Depends(get_api_keys)):
    """
    List the LLM providers, their models and default model.
    No secrets are returned, only whether a key is configured (server or header).
    """
    providers = get_providers_info(api_keys.as_provider_map())
    return {"providers": providers}
