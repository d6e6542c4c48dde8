"""Local preset / model / tag store for the Fooocus image generator (SQLite)."""
from .db import init_db, close_db, get_data_dir
from .errors import (
    PresetStoreError,
    StorageInitError,
    DatabaseNotInitializedError,
    StoreError,
    PresetFormatError,
)
from .domain.entities import (
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
)
from .services.preset_svc import (
    list_presets,
    get_preset,
    search_presets,
    create_preset,
    update_preset,
    delete_preset,
    toggle_favorite,
    increment_use_count,
)
from .services.model_svc import (
    list_models,
    get_models_by_type,
    get_model,
    search_models,
    create_model,
    update_model,
    delete_model,
)
from .services.tag_svc import list_tags, get_tag, create_tag, delete_tag
from .services.usage_svc import get_presets_referencing_model, check_model_usage

__version__ = "0.1.0"
