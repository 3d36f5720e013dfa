"""
Manifest codec: JSON text <-> ContractManifest.

Decoding either returns a fully populated manifest or raises one of the
DecodeError subclasses; pydantic's ValidationError never leaves this module.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from ink_manifest.config import CodecConfig, SchemaVariantMode
from ink_manifest.errors import (
    DecodeError,
    InvalidHexPayloadError,
    MalformedJsonError,
    SchemaMismatchError,
)
from ink_manifest.logger import get_logger
from ink_manifest.models import (
    CTX_FORBID_UNKNOWN,
    CTX_SCHEMA_VARIANT,
    ContractManifest,
    SchemaVariant,
)

# Union tags show up in pydantic error locations; they are not wire fields.
_VARIANT_TAGS = {v.value for v in SchemaVariant}

_JSON_TYPE_NAMES = {
    dict: "object",
    list: "array",
    str: "string",
    bool: "boolean",
    int: "integer",
    float: "number",
    type(None): "null",
}


@dataclass(frozen=True)
class DecodeResult:
    ok: bool
    manifest: Optional[ContractManifest] = None
    error: Optional[DecodeError] = None


def json_type_name(value: Any) -> str:
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


def format_path(loc: Sequence[Union[str, int]]) -> str:
    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        elif part in _VARIANT_TAGS:
            continue
        else:
            out += f".{part}" if out else str(part)
    return out


def sniff_schema_variant(obj: Any, default: SchemaVariant = SchemaVariant.legacy) -> SchemaVariant:
    """
    Pick the schema variant from the shape of the first constructor argument.

    Object arguments mean the typed shape, string arguments the legacy one.
    Malformed or argument-less documents fall back to ``default``; validation
    then reports whatever is actually wrong with them.
    """
    spec = obj.get("spec") if isinstance(obj, dict) else None
    ctors = spec.get("constructors") if isinstance(spec, dict) else None
    if not isinstance(ctors, list):
        return default
    for ctor in ctors:
        args = ctor.get("args") if isinstance(ctor, dict) else None
        if not isinstance(args, list):
            continue
        for a in args:
            if isinstance(a, dict):
                return SchemaVariant.typed
            if isinstance(a, str):
                return SchemaVariant.legacy
    return default


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _error_records(e: ValidationError) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for err in e.errors(include_url=False):
        out.append(
            {
                "type": err.get("type"),
                "path": format_path(err.get("loc") or ()),
                "message": err.get("msg"),
                "ctx": {k: str(v) for k, v in (err.get("ctx") or {}).items()},
                "actual": "missing" if err.get("type") == "missing" else json_type_name(err.get("input")),
            }
        )
    return out


def translate_validation_error(e: ValidationError) -> DecodeError:
    records = _error_records(e)
    first = records[0]
    path = first["path"]
    if first["type"] == "invalid_hex_payload":
        return InvalidHexPayloadError(
            f"{path}: {first['message']}",
            path=path,
            value=first["ctx"].get("value", ""),
            reason=first["ctx"].get("reason", ""),
        )
    return SchemaMismatchError(
        f"{path or '<root>'}: {first['message']}",
        path=path,
        field=path.rsplit(".", 1)[-1] if path else "",
        expected=first["message"],
        actual=first["actual"],
        errors=records,
    )


class ManifestCodec:
    def __init__(self, config: Optional[CodecConfig] = None, *, logger: Optional[logging.Logger] = None):
        self.config = config or CodecConfig()
        self.logger = logger or get_logger("codec")

    # ---------- decode ----------
    def parse_json(self, text: Union[str, bytes]) -> Dict[str, Any]:
        if isinstance(text, (bytes, bytearray)):
            try:
                text = bytes(text).decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedJsonError("Input is not valid UTF-8.", reason=e.reason, position=e.start) from e
        if not isinstance(text, str):
            raise TypeError(f"expected str or bytes, got {type(text).__name__}")
        try:
            obj = json.loads(text, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise MalformedJsonError(
                f"Input is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno}).",
                reason=e.msg,
                line=e.lineno,
                column=e.colno,
                position=e.pos,
            ) from e
        except ValueError as e:
            raise MalformedJsonError(f"Input is not valid JSON: {e}.", reason=str(e)) from e
        except RecursionError as e:
            raise MalformedJsonError("Input nesting is too deep.", reason="nesting too deep") from e
        if not isinstance(obj, dict):
            raise SchemaMismatchError(
                "<root>: manifest must be a JSON object",
                path="",
                field="",
                expected="object",
                actual=json_type_name(obj),
                errors=[],
            )
        return obj

    def select_variant(self, obj: Dict[str, Any]) -> SchemaVariant:
        mode = self.config.schema_variant
        if mode is SchemaVariantMode.auto:
            return sniff_schema_variant(obj, self.config.default_variant)
        return SchemaVariant(mode.value)

    def from_obj(self, obj: Dict[str, Any]) -> ContractManifest:
        variant = self.select_variant(obj)
        context = {
            CTX_SCHEMA_VARIANT: variant,
            CTX_FORBID_UNKNOWN: self.config.forbid_unknown_fields,
        }
        try:
            manifest = ContractManifest.model_validate(obj, context=context)
        except ValidationError as e:
            err = translate_validation_error(e)
            self.logger.warning("Manifest decode failed: %s at %s", err.code, err.context.get("path") or "<root>")
            raise err from e
        self.logger.debug(
            "Manifest decoded: contract=%s variant=%s wasm=%d bytes",
            manifest.contract.name,
            variant.value,
            len(manifest.source.wasm_bytes),
        )
        return manifest

    def decode(self, text: Union[str, bytes]) -> ContractManifest:
        try:
            obj = self.parse_json(text)
        except DecodeError as e:
            self.logger.warning("Manifest decode failed: %s", e.code)
            raise
        return self.from_obj(obj)

    def try_decode(self, text: Union[str, bytes]) -> DecodeResult:
        try:
            return DecodeResult(ok=True, manifest=self.decode(text))
        except DecodeError as e:
            return DecodeResult(ok=False, error=e)

    # ---------- encode ----------
    def to_obj(self, manifest: ContractManifest) -> Dict[str, Any]:
        if not isinstance(manifest, ContractManifest):
            raise TypeError(f"expected ContractManifest, got {type(manifest).__name__}")
        return manifest.model_dump(mode="json", by_alias=True)

    def encode(self, manifest: ContractManifest) -> str:
        out = json.dumps(
            self.to_obj(manifest),
            indent=self.config.indent,
            ensure_ascii=False,
            sort_keys=self.config.sort_keys,
        )
        self.logger.debug("Manifest encoded: contract=%s chars=%d", manifest.contract.name, len(out))
        return out


def decode_manifest(text: Union[str, bytes], config: Optional[CodecConfig] = None) -> ContractManifest:
    return ManifestCodec(config).decode(text)


def try_decode_manifest(text: Union[str, bytes], config: Optional[CodecConfig] = None) -> DecodeResult:
    return ManifestCodec(config).try_decode(text)


def encode_manifest(manifest: ContractManifest, config: Optional[CodecConfig] = None) -> str:
    return ManifestCodec(config).encode(manifest)
