"""JSON input for tag intents; ``{"$ref": "title"}`` marks a reference."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from .values import Ref

REF_KEY = "$ref"


class MetaTagsInputError(ValueError):
    """Raised when a JSON document is not an object of tag intents."""


def _object_hook(obj: Dict[str, Any]) -> Any:
    if len(obj) == 1 and REF_KEY in obj and isinstance(obj[REF_KEY], str):
        return Ref(obj[REF_KEY])
    return obj


def parse_meta_tags(text: str) -> Dict[str, Any]:
    data = json.loads(text, object_hook=_object_hook)
    if not isinstance(data, dict):
        raise MetaTagsInputError(
            f"expected a JSON object of meta tags, got {type(data).__name__}"
        )
    return data


def load_meta_tags(path: Union[str, Path]) -> Dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as fh:
        return parse_meta_tags(fh.read())


__all__ = ["MetaTagsInputError", "load_meta_tags", "parse_meta_tags"]
