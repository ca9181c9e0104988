"""
Common Pydantic schemas (messages, errors).
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class ErrorDetail(BaseModel):
    detail: str
