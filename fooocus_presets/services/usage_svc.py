"""
Model-usage cross reference.

Presets point at models through plain id strings (base, refiner, per-LoRA).
Nothing is indexed in that direction, so every query scans the full preset
list; preset counts are small and local.
"""
from __future__ import annotations

from typing import List

from ..domain.entities import ModelUsageInfo, Preset
from .preset_svc import list_presets


def references_model(preset: Preset, model_id: str) -> bool:
    cfg = preset.model
    if cfg.base_model_id == model_id:
        return True
    if cfg.refiner_model_id == model_id:
        return True
    return any(lora.model_id == model_id for lora in cfg.loras)


def get_presets_referencing_model(model_id: str) -> List[Preset]:
    return [p for p in list_presets() if references_model(p, model_id)]


def check_model_usage(model_id: str) -> ModelUsageInfo:
    presets = get_presets_referencing_model(model_id)
    names = [p.name for p in presets]
    return ModelUsageInfo(is_used=bool(names), usage_count=len(names), preset_names=names)
