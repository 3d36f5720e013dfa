from __future__ import annotations

import pytest

from ink_manifest.codec import ManifestCodec
from ink_manifest.config import CodecConfig
from .helpers.manifest_builders import build_legacy_manifest, build_manifest, build_typed_manifest


FLIPPER_JSON = """
{"source":{"hash":"0xabc123","language":"ink! 4.0","compiler":"rustc 1.70",
 "wasm":"0x0061736d","build_info":{"build_mode":"Debug","cargo_contract_version":"3.0.1",
 "rust_toolchain":"stable","wasm_opt_settings":{"keep_debug_symbols":true,"optimization_passes":"Z"}}},
 "contract":{"name":"flipper","version":"0.1.0","authors":["Alice"]},
 "spec":{"constructors":[],"docs":[],"events":[],
 "lang_error":{"display_name":["Error"],"type":3},"messages":[]},
 "storage":{"root":{"layout":{"struct":{"name":"Flipper"}},"root_key":"0x00"}},
 "version":"4"}
"""


@pytest.fixture
def flipper_json():
    return FLIPPER_JSON


@pytest.fixture
def manifest_doc():
    return build_manifest()


@pytest.fixture
def typed_doc():
    return build_typed_manifest()


@pytest.fixture
def legacy_doc():
    return build_legacy_manifest()


@pytest.fixture
def codec():
    return ManifestCodec(CodecConfig())
