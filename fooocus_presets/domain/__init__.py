from .entities import (
    LoRA,
    ModelConfig,
    SamplingConfig,
    PromptConfig,
    ImageConfig,
    ResourceDownloads,
    Preset,
    ModelInfo,
    Tag,
    ModelUsageInfo,
    default_model_config,
    default_sampling_config,
    default_prompt_config,
    default_image_config,
)

__all__ = [
    "LoRA",
    "ModelConfig",
    "SamplingConfig",
    "PromptConfig",
    "ImageConfig",
    "ResourceDownloads",
    "Preset",
    "ModelInfo",
    "Tag",
    "ModelUsageInfo",
    "default_model_config",
    "default_sampling_config",
    "default_prompt_config",
    "default_image_config",
]
