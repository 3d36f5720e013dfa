"""
Typed schema of an ink! contract manifest.

The wire names are fixed by the contract toolchain and are kept verbatim via
aliases. Two shapes of the same document exist in the wild (see
``SchemaVariant``); which one applies is passed in through the validation
context by the codec, and models validated without a context follow the
``legacy`` rules.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    ValidationInfo,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from ink_manifest.hexcodec import HexDecodeError, bytes_to_hex, hex_to_bytes


class SchemaVariant(str, Enum):
    legacy = "legacy"
    typed = "typed"


# Context keys understood by the models.
CTX_SCHEMA_VARIANT = "schema_variant"
CTX_FORBID_UNKNOWN = "forbid_unknown_fields"

SELECTOR_PATTERN = r"^0x[0-9a-fA-F]{8}$"


def _list_to_tuple(v: Any) -> Any:
    if isinstance(v, list):
        return tuple(v)
    return v


# JSON arrays are stored as tuples so decoded manifests stay immutable and hashable.
StrTuple = Annotated[Tuple[str, ...], BeforeValidator(_list_to_tuple)]


def context_variant(info: ValidationInfo) -> SchemaVariant:
    ctx = info.context or {}
    return SchemaVariant(ctx.get(CTX_SCHEMA_VARIANT) or SchemaVariant.legacy)


def _required_when_typed(v: Any, info: ValidationInfo) -> Any:
    if v is None and context_variant(info) is SchemaVariant.typed:
        raise PydanticCustomError("missing", "Field required by the typed schema")
    return v


class WireModel(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _reject_unknown_fields(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict) or not (info.context or {}).get(CTX_FORBID_UNKNOWN):
            return data
        known = {f.alias or name for name, f in cls.model_fields.items()}
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            raise PydanticCustomError(
                "unknown_field",
                "Unknown field(s): {fields}",
                {"fields": ", ".join(unknown)},
            )
        return data


# ---- source ----
class WasmOptSettings(WireModel):
    keep_debug_symbols: bool
    optimization_passes: str


class BuildInfo(WireModel):
    build_mode: str
    tool_version: str = Field(alias="cargo_contract_version")
    language_toolchain: str = Field(alias="rust_toolchain")
    wasm_opt_settings: WasmOptSettings


class SourceInfo(WireModel):
    hash: str
    language: str
    compiler: str
    wasm_bytes: bytes = Field(alias="wasm")
    build_info: BuildInfo

    @field_validator("wasm_bytes", mode="before")
    @classmethod
    def _wasm_from_hex(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return hex_to_bytes(v)
            except HexDecodeError as e:
                raise PydanticCustomError(
                    "invalid_hex_payload",
                    "failed to decode hex string: {value}: {reason}",
                    {"value": e.value, "reason": e.reason},
                ) from e
        if isinstance(v, bytearray):
            return bytes(v)
        return v

    @field_serializer("wasm_bytes", when_used="json")
    def _wasm_to_hex(self, v: bytes) -> str:
        return bytes_to_hex(v)


# ---- contract ----
class ContractInfo(WireModel):
    name: str
    version: str
    authors: StrTuple


# ---- spec ----
class ReturnType(WireModel):
    display_name: Optional[StrTuple] = Field(default=None, validate_default=True)
    type_id: int = Field(alias="type", ge=0, le=255)

    @field_validator("display_name", mode="before")
    @classmethod
    def _display_name_presence(cls, v: Any, info: ValidationInfo) -> Any:
        return _required_when_typed(v, info)


class LangError(ReturnType):
    pass


class Arg(WireModel):
    label: str
    type: ReturnType


def _constructor_arg_tag(v: Any) -> str:
    if isinstance(v, (dict, Arg)):
        return SchemaVariant.typed.value
    return SchemaVariant.legacy.value


# A constructor argument is a bare label in the legacy shape and a typed Arg otherwise.
ConstructorArg = Annotated[
    Union[
        Annotated[Arg, Tag(SchemaVariant.typed.value)],
        Annotated[str, Tag(SchemaVariant.legacy.value)],
    ],
    Discriminator(_constructor_arg_tag),
]


class Constructor(WireModel):
    args: Annotated[Tuple[ConstructorArg, ...], BeforeValidator(_list_to_tuple)]
    docs: StrTuple
    label: str
    payable: bool
    return_type: Optional[ReturnType] = Field(default=None, validate_default=True)
    selector: str = Field(pattern=SELECTOR_PATTERN)

    @field_validator("args")
    @classmethod
    def _args_match_variant(cls, v: Tuple[Any, ...], info: ValidationInfo) -> Tuple[Any, ...]:
        variant = context_variant(info)
        expected = Arg if variant is SchemaVariant.typed else str
        for i, a in enumerate(v):
            if not isinstance(a, expected):
                raise PydanticCustomError(
                    "arg_shape",
                    "Constructor argument {index} must be {expected} in the {variant} schema",
                    {
                        "index": i,
                        "expected": "an object" if expected is Arg else "a string",
                        "variant": variant.value,
                    },
                )
        return v

    @field_validator("return_type", mode="before")
    @classmethod
    def _return_type_presence(cls, v: Any, info: ValidationInfo) -> Any:
        return _required_when_typed(v, info)


class Message(WireModel):
    args: Annotated[Tuple[Arg, ...], BeforeValidator(_list_to_tuple)]
    docs: StrTuple
    label: str
    mutates: bool
    payable: bool
    return_type: Optional[ReturnType] = Field(default=None, validate_default=True)
    selector: str = Field(pattern=SELECTOR_PATTERN)

    @field_validator("return_type", mode="before")
    @classmethod
    def _return_type_presence(cls, v: Any, info: ValidationInfo) -> Any:
        return _required_when_typed(v, info)


class Spec(WireModel):
    constructors: Annotated[Tuple[Constructor, ...], BeforeValidator(_list_to_tuple)]
    docs: StrTuple
    events: StrTuple
    lang_error: LangError
    messages: Annotated[Tuple[Message, ...], BeforeValidator(_list_to_tuple)]


# ---- storage ----
class Struct(WireModel):
    name: str


class Layout(WireModel):
    struct_: Struct = Field(alias="struct")


class Root(WireModel):
    layout: Layout
    root_key: str


class Storage(WireModel):
    root: Root


class ContractManifest(WireModel):
    source: SourceInfo
    contract: ContractInfo
    spec: Spec
    storage: Storage
    version: str

    @property
    def wasm(self) -> bytes:
        return self.source.wasm_bytes

    @property
    def schema_variant(self) -> Optional[SchemaVariant]:
        """Variant implied by the constructor arguments, None when there are none."""
        for ctor in self.spec.constructors:
            for a in ctor.args:
                return SchemaVariant.typed if isinstance(a, Arg) else SchemaVariant.legacy
        return None
