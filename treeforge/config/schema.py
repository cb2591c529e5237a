# treeforge/config/schema.py
from pydantic import BaseModel, Field, field_validator

class AppConfig(BaseModel):
    # Tag names the generator wraps its output in
    artifact_tag: str = "artifact"
    action_tag: str = "action"
    id_strategy: str = "js-hash" # See treeforge.core.id_strategies
    sync_content: bool = True # Copy action code into existing files after each build
    token_encoding: str = "cl100k_base"
    show_tokens: bool = False
    indent: int = Field(default=2, ge=0, le=8) # JSON indent for written trees

    @field_validator("artifact_tag", "action_tag")
    @classmethod
    def _tag_is_name(cls, value: str) -> str:
        value = value.strip()
        if not value or any(ch in value for ch in "<>\"' /"):
            raise ValueError(f"Invalid tag name: {value!r}")
        return value
