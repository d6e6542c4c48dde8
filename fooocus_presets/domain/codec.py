"""Encoding of embedded JSON columns and the default-on-failure decode."""
from __future__ import annotations

import json
import logging
from typing import Callable, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from .entities import ResourceDownloads

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_STR_LIST = TypeAdapter(List[str])


def encode(obj: BaseModel) -> str:
    return obj.model_dump_json(by_alias=True)


def encode_list(items: List[str]) -> str:
    return json.dumps(list(items), ensure_ascii=False)


def decode(raw: Optional[str], cls: Type[T], default: Callable[[], T], column: str = "") -> T:
    """
    Decode an embedded object; malformed or old-shaped JSON yields ``default()``.
    The failure is logged and never raised.
    """
    if raw is None:
        return default()
    try:
        return cls.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("undecodable %s, using defaults: %s", column or cls.__name__, e.errors()[0].get("msg"))
        return default()


def decode_list(raw: Optional[str], column: str = "") -> List[str]:
    if raw is None:
        return []
    try:
        return _STR_LIST.validate_json(raw)
    except ValidationError:
        logger.warning("undecodable %s list, using []", column or "string")
        return []


def encode_resources(res: Optional[ResourceDownloads]) -> Optional[str]:
    if res is None:
        return None
    return res.model_dump_json(by_alias=True, exclude_none=True)


def decode_resources(raw: Optional[str]) -> Optional[ResourceDownloads]:
    if not raw:
        return None
    try:
        return ResourceDownloads.model_validate_json(raw)
    except ValidationError:
        logger.warning("undecodable resources, dropping")
        return None
