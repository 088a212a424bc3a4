# app/schemas/admin.py
from pydantic import BaseModel


class ProviderApprovalResponse(BaseModel):
    ok: bool
    provider_id: int
    is_approved: bool
