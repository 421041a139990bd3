from fastapi import APIRouter, Depends

from onejourney.dependencies.services import get_assistant_service
from onejourney.schemas.ai_schemas import AskRequest, AskResponse
from onejourney.services.assistant_service import AssistantService
from onejourney.services.errors import invalid_input

router = APIRouter(prefix="/api", tags=["ai"])


@router.post("/ai", response_model=AskResponse)
def ask_assistant(
    payload: AskRequest,
    assistant: AssistantService = Depends(get_assistant_service),
) -> AskResponse:
    """
    Ask the mobility assistant a free-text question.

    Upstream failures never surface here: the reply is then a fixed
    apology or "service unavailable" text.
    """
    if not payload.message or not payload.message.strip():
        raise invalid_input("Message is required", "message")
    return AskResponse(reply=assistant.ask(payload.message))
