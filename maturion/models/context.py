"""Explicit organization/user context passed into workflows."""

from pydantic import BaseModel, ConfigDict


class OrganizationContext(BaseModel):
    """Who is acting, and on behalf of which organization."""

    model_config = ConfigDict(frozen=True)

    organization_id: str
    user_id: str
