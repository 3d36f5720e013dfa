from __future__ import annotations

import pytest
from pydantic import ValidationError

from ink_manifest.models import (
    BuildInfo,
    ContractManifest,
    LangError,
    Layout,
    ReturnType,
    SourceInfo,
    WasmOptSettings,
)


def _source(**overrides):
    fields = {
        "hash": "0xabc123",
        "language": "ink! 4.0",
        "compiler": "rustc 1.70",
        "wasm": b"\x00asm",
        "build_info": BuildInfo(
            build_mode="Release",
            cargo_contract_version="3.0.1",
            rust_toolchain="stable",
            wasm_opt_settings=WasmOptSettings(keep_debug_symbols=False, optimization_passes="z"),
        ),
    }
    fields.update(overrides)
    return SourceInfo(**fields)


def test_models_construct_by_wire_names():
    src = _source()
    assert src.wasm_bytes == b"\x00asm"
    assert src.build_info.tool_version == "3.0.1"
    assert src.build_info.language_toolchain == "stable"


@pytest.mark.parametrize(
    "model,fields",
    [
        (ReturnType, {"type_id": 3}),
        (Layout, {"struct_": {"name": "Flipper"}}),
        (
            BuildInfo,
            {
                "build_mode": "Debug",
                "tool_version": "3.0.1",
                "language_toolchain": "stable",
                "wasm_opt_settings": {"keep_debug_symbols": True, "optimization_passes": "Z"},
            },
        ),
    ],
)
def test_python_attribute_names_are_not_wire_names(model, fields):
    with pytest.raises(ValidationError):
        model.model_validate(fields)


def test_payload_serialized_as_hex_only_in_json_mode():
    src = _source()
    assert src.model_dump()["wasm_bytes"] == b"\x00asm"
    wire = src.model_dump(mode="json", by_alias=True)
    assert wire["wasm"] == "0x0061736d"
    assert wire["build_info"]["cargo_contract_version"] == "3.0.1"


def test_payload_accepts_hex_and_bytearray():
    assert _source(wasm="0x0061736D").wasm_bytes == b"\x00asm"
    assert _source(wasm=bytearray(b"\x01\x02")).wasm_bytes == b"\x01\x02"


def test_models_are_frozen(manifest_doc):
    m = ContractManifest.model_validate(manifest_doc)
    with pytest.raises(ValidationError):
        m.version = "5"


def test_structural_equality(manifest_doc):
    a = ContractManifest.model_validate(manifest_doc)
    b = ContractManifest.model_validate(manifest_doc)
    assert a == b
    assert a.wasm == b"\x00asm"


def test_no_context_uses_legacy_rules():
    ref = ReturnType.model_validate({"type": 3})
    assert ref.display_name is None
    assert ref.type_id == 3


def test_typed_context_requires_display_name():
    with pytest.raises(ValidationError) as ei:
        LangError.model_validate({"type": 3}, context={"schema_variant": "typed"})
    assert ei.value.errors()[0]["loc"] == ("display_name",)


def test_strict_types():
    with pytest.raises(ValidationError):
        ReturnType.model_validate({"type": "3"})
    with pytest.raises(ValidationError):
        WasmOptSettings.model_validate({"keep_debug_symbols": "true", "optimization_passes": "z"})


def test_decoded_sequences_are_immutable(typed_doc):
    m = ContractManifest.model_validate(typed_doc)
    assert isinstance(m.contract.authors, tuple)
    assert isinstance(m.spec.messages, tuple)
    assert isinstance(m.spec.constructors[0].args, tuple)
    with pytest.raises(AttributeError):
        m.contract.authors.append("Mallory")
    assert m.contract.authors == ("Alice",)


def test_manifests_are_hashable(typed_doc, legacy_doc):
    a = ContractManifest.model_validate(typed_doc)
    b = ContractManifest.model_validate(typed_doc)
    c = ContractManifest.model_validate(legacy_doc)
    assert hash(a) == hash(b)
    assert len({a, b, c}) == 2
