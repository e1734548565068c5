from credgate.schemas.surface import (
    SURFACE_SCHEMA_ID,
    ColumnConfig,
    ElementConfig,
    SurfaceManifestV1,
    ToggleConfig,
)

__all__ = [
    "ColumnConfig",
    "ElementConfig",
    "SURFACE_SCHEMA_ID",
    "SurfaceManifestV1",
    "ToggleConfig",
]
