"""
In-memory filtering and sorting over the full preset / model lists.

Unlike search_presets / search_models (case-sensitive, done in SQL) these
filters are case-insensitive and combine several criteria.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..domain.entities import ModelInfo, Preset
from .model_svc import list_models
from .preset_svc import list_presets

PRESET_SORT_KEYS = ("name", "updated_at", "created_at", "use_count")
MODEL_SORT_KEYS = ("name", "created_at", "updated_at")


@dataclass
class PresetFilter:
    search: str = ""
    tags: List[str] = field(default_factory=list)
    is_favorite: Optional[bool] = None
    base_model: str = ""
    sort_by: str = "updated_at"
    sort_order: str = "desc"


@dataclass
class ModelFilter:
    search: str = ""
    type: str = ""
    tags: List[str] = field(default_factory=list)
    sort_by: str = "updated_at"
    sort_order: str = "desc"


def _check_sort(sort_by: str, sort_order: str, allowed: tuple):
    if sort_by not in allowed:
        raise ValueError(f"unsupported sort_by: {sort_by}")
    if sort_order not in ("asc", "desc"):
        raise ValueError(f"unsupported sort_order: {sort_order}")


def _base_model_display(p: Preset, models_by_id: Dict[str, ModelInfo]) -> str:
    """Catalog name for a linked base model, else the preset's own text."""
    if p.model.base_model_id:
        m = models_by_id.get(p.model.base_model_id)
        if m is not None:
            return m.file_name or m.name
    return p.model.base_model


def _preset_sort_key(p: Preset, sort_by: str):
    if sort_by == "name":
        return p.name.casefold()
    if sort_by == "use_count":
        return p.use_count
    return getattr(p, sort_by)


def filter_presets(flt: Optional[PresetFilter] = None) -> List[Preset]:
    flt = flt or PresetFilter()
    _check_sort(flt.sort_by, flt.sort_order, PRESET_SORT_KEYS)
    result = list_presets()

    if flt.search:
        s = flt.search.lower()
        result = [
            p for p in result
            if s in p.name.lower()
            or s in p.description.lower()
            or any(s in t.lower() for t in p.tags)
        ]
    if flt.tags:
        wanted = set(flt.tags)
        result = [p for p in result if wanted.intersection(p.tags)]
    if flt.is_favorite is not None:
        result = [p for p in result if p.is_favorite == flt.is_favorite]
    if flt.base_model:
        needle = flt.base_model.lower()
        models_by_id = {m.id: m for m in list_models()}
        result = [p for p in result if needle in _base_model_display(p, models_by_id).lower()]

    result.sort(key=lambda p: _preset_sort_key(p, flt.sort_by), reverse=flt.sort_order == "desc")
    return result


def favorite_presets() -> List[Preset]:
    return [p for p in list_presets() if p.is_favorite]


def list_base_models() -> List[str]:
    """Sorted distinct base model names in use, resolved through the catalog where linked."""
    models_by_id = {m.id: m for m in list_models()}
    names = set()
    for p in list_presets():
        name = _base_model_display(p, models_by_id)
        if name:
            names.add(name)
    return sorted(names)


def _model_sort_key(m: ModelInfo, sort_by: str):
    if sort_by == "name":
        return m.name.casefold()
    return getattr(m, sort_by)


def filter_models(flt: Optional[ModelFilter] = None) -> List[ModelInfo]:
    flt = flt or ModelFilter()
    _check_sort(flt.sort_by, flt.sort_order, MODEL_SORT_KEYS)
    result = list_models()

    if flt.search:
        s = flt.search.lower()
        result = [
            m for m in result
            if s in m.name.lower()
            or s in m.description.lower()
            or any(s in t.lower() for t in m.tags)
            or any(s in sc.lower() for sc in m.scope)
        ]
    if flt.type:
        result = [m for m in result if m.model_type == flt.type]
    if flt.tags:
        wanted = set(flt.tags)
        result = [m for m in result if wanted.intersection(m.tags) or wanted.intersection(m.scope)]

    result.sort(key=lambda m: _model_sort_key(m, flt.sort_by), reverse=flt.sort_order == "desc")
    return result


def list_model_tags() -> List[str]:
    tags = set()
    for m in list_models():
        tags.update(m.tags)
        tags.update(m.scope)
    return sorted(tags)


def list_model_scopes() -> List[str]:
    scopes = set()
    for m in list_models():
        scopes.update(m.scope)
    return sorted(scopes)
