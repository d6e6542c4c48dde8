"""
Conversion between stored presets and Fooocus ``presets/*.json`` files.

Export writes the keys Fooocus reads at startup; import maps them back onto
a Preset, falling back to the usual sampling/image defaults for missing or
falsy values. Imported presets are unsaved until passed to create_preset.
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict

from ..domain.entities import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_PERFORMANCE,
    DEFAULT_SAMPLER,
    DEFAULT_SCHEDULER,
    ImageConfig,
    LoRA,
    ModelConfig,
    Preset,
    PromptConfig,
    ResourceDownloads,
    SamplingConfig,
)
from ..errors import PresetFormatError
from .preset_svc import create_preset

IMPORT_DESCRIPTION = "Imported from Fooocus preset - {model}"


def export_fooocus_preset(preset: Preset) -> Dict[str, Any]:
    res = preset.resources
    return {
        "default_model": preset.model.base_model,
        "default_refiner_model": preset.model.refiner_model,
        "default_refiner_switch": preset.model.refiner_switch,
        "default_loras": [[lora.name, lora.model_name, lora.weight] for lora in preset.model.loras],
        "default_cfg_scale": preset.sampling.cfg_scale,
        "default_sample_sharpness": preset.sampling.sample_sharpness,
        "default_sampler": preset.sampling.sampler,
        "default_scheduler": preset.sampling.scheduler,
        "default_performance": preset.sampling.performance,
        "default_steps": preset.sampling.steps,
        "default_prompt_negative": preset.prompt.negative,
        "default_prompt_positive": preset.prompt.positive,
        "default_styles": list(preset.prompt.styles),
        "default_aspect_ratio": preset.image.aspect_ratio,
        "default_overwrite_step": -1,
        "default_overwrite_switch": -1,
        "default_overwrite_width": -1,
        "default_overwrite_height": -1,
        "default_cfg_tsnr": 7,
        "default_negative_prompt": preset.prompt.negative,
        "default_positive_prompt": preset.prompt.positive,
        "checkpoint_downloads": res.checkpoint_downloads if res else None,
        "lora_downloads": res.lora_downloads if res else None,
        "embedding_downloads": res.embedding_downloads if res else None,
    }


def _parse_lora(item: Any) -> LoRA:
    if not isinstance(item, (list, tuple)) or len(item) < 3:
        raise PresetFormatError(f"bad default_loras entry: {item!r}")
    name, model_name, weight = item[0], item[1], item[2]
    try:
        return LoRA(name=str(name), model_name=str(model_name), weight=float(weight))
    except (TypeError, ValueError) as e:
        raise PresetFormatError(f"bad default_loras entry: {item!r}") from e


def import_fooocus_preset(data: Dict[str, Any], name: str = "") -> Preset:
    if not isinstance(data, dict):
        raise PresetFormatError("Fooocus preset must be a JSON object")
    g = data.get
    base_model = g("default_model") or ""
    loras = g("default_loras") or []
    if not isinstance(loras, list):
        raise PresetFormatError("default_loras must be a list")
    try:
        return Preset(
            name=name or base_model or "Imported preset",
            description=IMPORT_DESCRIPTION.format(model=base_model),
            model=ModelConfig(
                base_model=base_model,
                refiner_model=g("default_refiner_model") or "",
                refiner_switch=g("default_refiner_switch") or 0.5,
                loras=[_parse_lora(x) for x in loras],
            ),
            sampling=SamplingConfig(
                cfg_scale=g("default_cfg_scale") or 7.0,
                sample_sharpness=g("default_sample_sharpness") or 2.0,
                sampler=g("default_sampler") or DEFAULT_SAMPLER,
                scheduler=g("default_scheduler") or DEFAULT_SCHEDULER,
                performance=g("default_performance") or DEFAULT_PERFORMANCE,
                steps=g("default_steps") or 30,
            ),
            prompt=PromptConfig(
                positive=g("default_prompt_positive") or g("default_positive_prompt") or "",
                negative=g("default_prompt_negative") or g("default_negative_prompt") or "",
                styles=g("default_styles") or [],
            ),
            image=ImageConfig(
                aspect_ratio=g("default_aspect_ratio") or DEFAULT_ASPECT_RATIO,
                image_count=4,
            ),
            resources=ResourceDownloads(
                checkpoint_downloads=g("checkpoint_downloads"),
                lora_downloads=g("lora_downloads"),
                embedding_downloads=g("embedding_downloads"),
            ),
        )
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        raise PresetFormatError(f"invalid Fooocus preset: {e}") from e


def dump_fooocus_preset_json(preset: Preset) -> str:
    return json.dumps(export_fooocus_preset(preset), ensure_ascii=False, indent=2)


def parse_fooocus_preset_json(text: str, name: str = "") -> Preset:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PresetFormatError(f"not valid JSON: {e}") from e
    return import_fooocus_preset(data, name)


def import_fooocus_preset_file(path: str) -> Preset:
    """Read a Fooocus preset file and store it; the file stem becomes the name."""
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    name = os.path.splitext(os.path.basename(path))[0]
    return create_preset(parse_fooocus_preset_json(text, name))


def export_fooocus_preset_file(preset: Preset, path: str):
    with open(path, "w", encoding="utf-8") as f:
        f.write(dump_fooocus_preset_json(preset))
