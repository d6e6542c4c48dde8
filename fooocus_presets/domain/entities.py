"""
Preset / model / tag entities.

Python attributes are snake_case; the JSON shape (front-end payloads and the
embedded columns) is camelCase, e.g. ``isFavorite``, ``refinerSwitch``.
Both spellings are accepted on input.

The embedded configuration objects (ModelConfig, SamplingConfig,
PromptConfig, ImageConfig) have no field defaults on purpose: a stored value
missing a required key fails to decode and is replaced by the matching
``default_*`` value as a whole.
"""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Entity(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Embedded configuration objects
# =============================================================================

class LoRA(_Entity):
    name: str
    weight: float
    model_name: str = ""
    model_id: Optional[str] = None


class ModelConfig(_Entity):
    base_model: str
    base_model_id: Optional[str] = None
    refiner_model: str
    refiner_model_id: Optional[str] = None
    refiner_switch: float
    loras: List[LoRA]


class SamplingConfig(_Entity):
    cfg_scale: float
    sample_sharpness: float
    sampler: str
    scheduler: str
    performance: str
    steps: int


class PromptConfig(_Entity):
    positive: str
    negative: str
    styles: List[str]


class ImageConfig(_Entity):
    aspect_ratio: str
    image_count: int


class ResourceDownloads(_Entity):
    """Download descriptors carried through untouched."""
    checkpoint_downloads: Optional[Any] = None
    lora_downloads: Optional[Any] = None
    embedding_downloads: Optional[Any] = None


# Fallbacks for undecodable embedded values. Each call returns a fresh object.

DEFAULT_SAMPLER = "dpmpp_2m_sde_gpu"
DEFAULT_SCHEDULER = "karras"
DEFAULT_PERFORMANCE = "Speed"
DEFAULT_ASPECT_RATIO = "1152*896"


def default_model_config() -> ModelConfig:
    return ModelConfig(base_model="", refiner_model="", refiner_switch=0.5, loras=[])


def default_sampling_config() -> SamplingConfig:
    return SamplingConfig(
        cfg_scale=7.0,
        sample_sharpness=2.0,
        sampler=DEFAULT_SAMPLER,
        scheduler=DEFAULT_SCHEDULER,
        performance=DEFAULT_PERFORMANCE,
        steps=30,
    )


def default_prompt_config() -> PromptConfig:
    return PromptConfig(positive="", negative="", styles=[])


def default_image_config() -> ImageConfig:
    return ImageConfig(aspect_ratio=DEFAULT_ASPECT_RATIO, image_count=4)


# =============================================================================
# Stored entities
# =============================================================================

class Preset(_Entity):
    """A saved, named bundle of model / sampling / prompt / image settings."""
    id: str = ""
    name: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    use_count: int = 0
    created_at: str = ""
    updated_at: str = ""
    model: ModelConfig = Field(default_factory=default_model_config)
    sampling: SamplingConfig = Field(default_factory=default_sampling_config)
    prompt: PromptConfig = Field(default_factory=default_prompt_config)
    image: ImageConfig = Field(default_factory=default_image_config)
    resources: Optional[ResourceDownloads] = None


class ModelInfo(_Entity):
    id: str = ""
    name: str
    file_name: str = ""
    model_type: str = Field(alias="type")
    description: str = ""
    scope: List[str] = Field(default_factory=list)
    path: str = ""
    tags: List[str] = Field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""


class Tag(_Entity):
    id: str = ""
    name: str
    color: str = "#6366f1"
    count: int = 0


class ModelUsageInfo(_Entity):
    is_used: bool
    usage_count: int
    preset_names: List[str] = Field(default_factory=list)
