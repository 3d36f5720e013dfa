"""
Decode ink! contract manifests (metadata JSON) into typed models and back.

    from ink_manifest import decode_manifest

    manifest = decode_manifest(json_text)
    manifest.source.wasm_bytes[:4]  # b"\\x00asm"
"""

from ink_manifest.codec import (
    DecodeResult,
    ManifestCodec,
    decode_manifest,
    encode_manifest,
    sniff_schema_variant,
    try_decode_manifest,
)
from ink_manifest.config import CodecConfig, SchemaVariantMode, validate_codec_config
from ink_manifest.errors import (
    ConfigError,
    DecodeError,
    InvalidHexPayloadError,
    MalformedJsonError,
    ManifestError,
    SchemaMismatchError,
)
from ink_manifest.models import ContractManifest, SchemaVariant

__all__ = [
    "DecodeResult",
    "ManifestCodec",
    "decode_manifest",
    "encode_manifest",
    "sniff_schema_variant",
    "try_decode_manifest",
    "CodecConfig",
    "SchemaVariantMode",
    "validate_codec_config",
    "ConfigError",
    "DecodeError",
    "InvalidHexPayloadError",
    "MalformedJsonError",
    "ManifestError",
    "SchemaMismatchError",
    "ContractManifest",
    "SchemaVariant",
]
