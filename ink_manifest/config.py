from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ink_manifest.errors import ConfigError
from ink_manifest.models import SchemaVariant


class SchemaVariantMode(str, Enum):
    auto = "auto"
    legacy = "legacy"
    typed = "typed"


class CodecConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_variant: SchemaVariantMode = SchemaVariantMode.auto
    default_variant: SchemaVariant = SchemaVariant.legacy  # used by auto when no constructor args exist
    forbid_unknown_fields: bool = False
    indent: Optional[int] = Field(default=2, ge=0, le=8)
    sort_keys: bool = True

    @field_validator("schema_variant", "default_variant", mode="before")
    @classmethod
    def _norm_variant(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


def validate_codec_config(raw: Dict[str, Any]) -> CodecConfig:
    if not isinstance(raw, dict):
        raise ConfigError("Codec configuration must be an object.")
    try:
        return CodecConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(str(e), errors=e.errors(include_url=False, include_input=False)) from e
