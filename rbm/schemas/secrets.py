"""Pydantic schemas for secret management"""
from typing import List

from pydantic import BaseModel, Field, field_validator


class SecretKeyed(BaseModel):
    key: str = Field(..., min_length=1, max_length=200)

    @field_validator("key")
    @classmethod
    def key_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("key is required")
        return v


class SecretSet(SecretKeyed):
    """Request to store a secret"""
    value: str = Field(..., min_length=1)


class SecretLookup(SecretKeyed):
    """Request to look up a secret's metadata"""


class SecretMetadata(BaseModel):
    present: bool
    length: int
    last4: str
    status: str


class SecretLookupResponse(BaseModel):
    found: bool
    metadata: SecretMetadata
    masked: str


class SecretListResponse(BaseModel):
    keys: List[str]
    count: int
