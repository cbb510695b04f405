"""Schema management exports."""

from .field_paths import (
    ARRAY_SEGMENT,
    ROOT_PATH,
    display_path,
    join_index,
    join_key,
    resolve_dotted_path,
)
from .schema_inference import DRAFT_07_URI, infer_schema_from_sample
from .schema_models import JsonKind, SchemaDocument
from .schema_projection import (
    MAX_NESTING_DEPTH,
    SchemaError,
    SchemaParseError,
    SchemaValidationError,
    classify_json_value,
    load_schema_document,
    load_schema_file,
    require_object_root,
    validate_json_tree,
)

__all__ = [
    "ARRAY_SEGMENT",
    "DRAFT_07_URI",
    "ROOT_PATH",
    "MAX_NESTING_DEPTH",
    "JsonKind",
    "SchemaDocument",
    "SchemaError",
    "SchemaParseError",
    "SchemaValidationError",
    "classify_json_value",
    "display_path",
    "infer_schema_from_sample",
    "join_index",
    "join_key",
    "load_schema_document",
    "load_schema_file",
    "require_object_root",
    "resolve_dotted_path",
    "validate_json_tree",
]
