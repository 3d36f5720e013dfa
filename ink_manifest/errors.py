from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class ManifestError(Exception):
    code: str
    user_message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.code)

    def __str__(self) -> str:
        return f"{self.code}: {self.user_message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "user_message": self.user_message,
            "context": dict(self.context or {}),
        }


class ConfigError(ManifestError):
    def __init__(self, user_message: str = "Invalid codec configuration.", **ctx: Any):
        super().__init__("config_error", user_message, context=ctx)


# ---- Decode failures ----
class DecodeError(ManifestError):
    pass


class MalformedJsonError(DecodeError):
    def __init__(self, user_message: str = "Input is not valid JSON.", **ctx: Any):
        super().__init__("malformed_json", user_message, context=ctx)


class SchemaMismatchError(DecodeError):
    def __init__(self, user_message: str = "Input does not match the manifest schema.", **ctx: Any):
        super().__init__("schema_mismatch", user_message, context=ctx)

    @property
    def path(self) -> str:
        return str(self.context.get("path", ""))


class InvalidHexPayloadError(DecodeError):
    def __init__(self, user_message: str = "Compiled module payload is not valid hex.", **ctx: Any):
        super().__init__("invalid_hex_payload", user_message, context=ctx)

    @property
    def value(self) -> str:
        return str(self.context.get("value", ""))
