from typing import Optional

from pydantic import BaseModel, Field


class AskRequest(BaseModel):
    message: Optional[str] = Field(None, description="Free-text question for the mobility assistant")


class AskResponse(BaseModel):
    success: bool = True
    reply: str
