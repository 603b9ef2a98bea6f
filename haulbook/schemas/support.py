"""Support form schema."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from haulbook.utils.validators import SUPPORT_ISSUE_TYPES, normalize_phone, validate_indian_phone


class SupportRequest(BaseModel):
    """Schema for the public contact form."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(None, max_length=20)
    issue_type: str
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("issue_type")
    @classmethod
    def validate_issue_type(cls, v: str) -> str:
        v = v.lower()
        if v not in SUPPORT_ISSUE_TYPES:
            raise ValueError(f"issue_type must be one of: {', '.join(sorted(SUPPORT_ISSUE_TYPES))}")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        if not v:
            return None
        if not validate_indian_phone(v):
            raise ValueError("Invalid phone number")
        return normalize_phone(v)
