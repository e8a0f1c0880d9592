# newsroom/stores/field_schema.py
# Defaults declarados de campos de layout, leídos desde un JSON Schema
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Optional, Set

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

logger = logging.getLogger(__name__)


# -------------------- $ref resolver (local: #/$defs/...) --------------------
def _resolve_local_ref(root: dict, ref: str) -> Optional[dict]:
    if not isinstance(ref, str) or not ref.startswith("#/"):
        return None
    node: Any = root
    for p in ref[2:].split("/"):
        if isinstance(node, dict) and p in node:
            node = node[p]
        else:
            return None
    return copy.deepcopy(node) if isinstance(node, dict) else None


def _deref_inplace(node: Any, root: dict, seen: Set[int]) -> Any:
    if isinstance(node, dict):
        node_id = id(node)
        if node_id in seen:
            return node
        seen.add(node_id)

        if "$ref" in node and isinstance(node["$ref"], str):
            target = _resolve_local_ref(root, node["$ref"])
            if target is not None:
                siblings = {k: v for k, v in node.items() if k != "$ref"}
                node.clear()
                node.update(target)
                node.update(siblings)
        for k, v in list(node.items()):
            node[k] = _deref_inplace(v, root, seen)
        return node

    if isinstance(node, list):
        for i, v in enumerate(node):
            node[i] = _deref_inplace(v, root, seen)
        return node

    return node


def _collect_defaults(schema: Any, out: Dict[str, Any]) -> None:
    """
    Recorre properties / items / oneOf / anyOf y registra el primer `default`
    declarado para cada nombre de campo (los layouts se repiten entre páginas,
    el nombre del campo es la clave).
    """
    if isinstance(schema, list):
        for s in schema:
            _collect_defaults(s, out)
        return
    if not isinstance(schema, dict):
        return

    for name, prop in (schema.get("properties") or {}).items():
        if isinstance(prop, dict) and "default" in prop and name not in out:
            out[name] = prop["default"]
        _collect_defaults(prop, out)

    for k in ("items", "oneOf", "anyOf", "allOf", "$defs"):
        sub = schema.get(k)
        if k == "$defs" and isinstance(sub, dict):
            _collect_defaults(list(sub.values()), out)
        elif sub is not None:
            _collect_defaults(sub, out)


class JsonSchemaFieldDefaults:
    def __init__(self, schema: dict | None = None) -> None:
        self._defaults: Dict[str, Any] = {}
        if not schema:
            return
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as exc:
            logger.warning("Field schema is not a valid JSON Schema, ignoring defaults: %s", exc.message)
            return
        cp = copy.deepcopy(schema)
        _collect_defaults(_deref_inplace(cp, cp, set()), self._defaults)

    @classmethod
    def from_option(cls, value: Any) -> "JsonSchemaFieldDefaults":
        return cls(value if isinstance(value, dict) else None)

    def default_for(self, key: str) -> Any:
        return self._defaults.get(key)
