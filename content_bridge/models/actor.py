"""The identity a request acts as."""

from pydantic import BaseModel, ConfigDict, Field

ANONYMOUS_ID = 0

ACCESS_CONTENT = "access content"
VIEW_OWN_UNPUBLISHED = "view own unpublished content"
BYPASS_ACCESS = "bypass content access"


class Actor(BaseModel):
    """Identity and permissions of the current caller."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(default=ANONYMOUS_ID, ge=0)
    permissions: frozenset[str] = Field(default_factory=frozenset)

    @property
    def is_anonymous(self) -> bool:
        return self.id == ANONYMOUS_ID

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions
