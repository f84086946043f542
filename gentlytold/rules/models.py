from pydantic import BaseModel, Field


class MemoriesRules(BaseModel):
    max_photo_bytes: int = Field(gt=0)
    allowed_photo_mime_types: list[str]
    max_text_chars: int = Field(gt=0)
    max_name_chars: int = Field(gt=0)
    preview_chars: int = Field(gt=0)


class TokensRules(BaseModel):
    admin_token_bytes: int = Field(ge=16)


class SlugRules(BaseModel):
    pattern: str


class NotificationRules(BaseModel):
    timeout_seconds: float = Field(gt=0)


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    memories: MemoriesRules
    tokens: TokensRules
    slugs: SlugRules
    notifications: NotificationRules
    ops: OpsRules
