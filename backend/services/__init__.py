from importlib import import_module

__all__ = [
    "source_gateway",
    "SourceGateway",
    "QueryOptions",
    "RecordBundle",
    "fetch_bundle",
    "build_snapshot",
    "generate_snapshot",
]

_LAZY_EXPORTS = {
    "source_gateway": ("services.source_gateway", "source_gateway"),
    "SourceGateway": ("services.source_gateway", "SourceGateway"),
    "QueryOptions": ("services.source_gateway", "QueryOptions"),
    "RecordBundle": ("services.fetcher", "RecordBundle"),
    "fetch_bundle": ("services.fetcher", "fetch_bundle"),
    "build_snapshot": ("services.snapshot_assembler", "build_snapshot"),
    "generate_snapshot": ("services.snapshot_assembler", "generate_snapshot"),
}


def __getattr__(name):
    if name not in _LAZY_EXPORTS:
        raise AttributeError(f"module 'services' has no attribute {name!r}")

    module_name, attr_name = _LAZY_EXPORTS[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
