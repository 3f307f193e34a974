from typing import Literal, Optional
from pydantic import BaseModel


class ApplicationDecision(BaseModel):
    decision: Literal["accepted", "denied"]
    message: Optional[str] = None


class MessageCreate(BaseModel):
    message: str
