# ABOUTME: Config model shape checks and the JSON codec built on pydantic
# ABOUTME: Validates dataclass/BaseModel instances, renders skeletons, decodes in place
"""Model validation and JSON (de)serialization for configrepo"""

import dataclasses
import json
import logging
from functools import lru_cache
from typing import IO, Any, TypeVar

from pydantic import BaseModel, TypeAdapter

from configrepo.exceptions import InvalidConfigModelError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

_MODEL_HINT = "Pass an instance of a non-frozen dataclass or pydantic BaseModel"


def check_model(model: Any) -> None:
    """
    Verify that model is a writable structured record instance.

    Accepted: instances of stdlib/pydantic dataclasses and of pydantic
    BaseModel subclasses that are not frozen. Classes themselves, None,
    plain values, mappings and named tuples are rejected.

    Raises:
        InvalidConfigModelError: If the model does not qualify
    """
    if model is None or isinstance(model, type):
        raise InvalidConfigModelError(recovery_hint=_MODEL_HINT)

    if isinstance(model, BaseModel):
        if model.model_config.get("frozen"):
            raise InvalidConfigModelError(recovery_hint=_MODEL_HINT)
        return

    if dataclasses.is_dataclass(model):
        params = getattr(type(model), "__dataclass_params__", None)
        if params is not None and params.frozen:
            raise InvalidConfigModelError(recovery_hint=_MODEL_HINT)
        return

    raise InvalidConfigModelError(recovery_hint=_MODEL_HINT)


@lru_cache(maxsize=None)
def _adapter(model_type: type) -> TypeAdapter:
    return TypeAdapter(model_type)


def dump_model(model: Any, mode: str = "json") -> dict[str, Any]:
    """Serialize a model to a dict keyed by field alias, in declaration order."""
    if isinstance(model, BaseModel):
        return model.model_dump(mode=mode, by_alias=True)
    return _adapter(type(model)).dump_python(model, mode=mode, by_alias=True)


def render_skeleton(model: Any) -> bytes:
    """Render the model's current values as tab-indented JSON."""
    return json.dumps(dump_model(model), indent="\t", ensure_ascii=False).encode("utf-8")


def _validate(model_type: type, data: Any) -> Any:
    if issubclass(model_type, BaseModel):
        return model_type.model_validate(data)
    return _adapter(model_type).validate_python(data)


def _field_names(model: Any) -> list[str]:
    if isinstance(model, BaseModel):
        return list(type(model).model_fields)
    return [f.name for f in dataclasses.fields(model)]


def _overlay(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Apply update onto base; nested objects merge key by key."""
    for key, value in update.items():
        current = base.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            base[key] = _overlay(current, value)
        else:
            base[key] = value
    return base


def _read_document(fp: IO[bytes]) -> Any:
    # Only the first JSON value is decoded; anything after it is ignored
    text = fp.read()
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    text = text.lstrip()
    value, end = json.JSONDecoder().raw_decode(text)
    if text[end:].strip():
        logger.debug(f"Ignoring {len(text) - end} characters after the JSON document")
    return value


def decode_into(model: ModelT, fp: IO[bytes]) -> ModelT:
    """
    Decode a JSON document from fp onto an existing model instance.

    Keys present in the document replace the model's current values; the
    rest keep what the model already held. Nested objects are merged the
    same way, so a partial nested object leaves its other fields alone.
    Unknown keys are ignored unless the model's own configuration forbids
    them. A top-level null is a no-op. Only the first JSON value in the
    stream is read; trailing content is ignored.

    Raises:
        json.JSONDecodeError: If the content does not start with valid JSON
        pydantic.ValidationError: If the content does not fit the model
    """
    raw = _read_document(fp)
    if raw is None:
        return model

    model_type = type(model)
    if not isinstance(raw, dict):
        # The codec reports its own "not an object" error here
        _validate(model_type, raw)
        return model

    merged = _overlay(dump_model(model, mode="python"), raw)
    decoded = _validate(model_type, merged)

    for name in _field_names(model):
        setattr(model, name, getattr(decoded, name))

    logger.debug(f"Decoded {len(raw)} keys into {model_type.__name__}")
    return model
