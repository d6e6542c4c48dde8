import os
import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture()
def data_dir(tmp_path):
    return tmp_path / "appdata"


@pytest.fixture(autouse=True)
def db(data_dir, monkeypatch):
    # Never fall through to a real config.yaml / home directory
    monkeypatch.delenv("FOOOCUS_PRESETS_DATA_DIR", raising=False)
    monkeypatch.setenv("FOOOCUS_PRESETS_CONFIG", str(data_dir / "missing-config.yaml"))
    from fooocus_presets.db import init_db, close_db
    database = init_db(str(data_dir))
    assert os.path.dirname(database.path) == str(data_dir)
    yield database
    close_db()


@pytest.fixture()
def make_preset():
    from fooocus_presets.domain.entities import LoRA, ModelConfig, Preset

    def _make(name="preset", tags=None, base_model_id=None, refiner_model_id=None, lora_ids=(), **kw):
        model = ModelConfig(
            base_model="juggernautXL_v8Rundiffusion.safetensors",
            base_model_id=base_model_id,
            refiner_model="None",
            refiner_model_id=refiner_model_id,
            refiner_switch=0.5,
            loras=[LoRA(name=f"lora{i}", weight=0.1, model_id=mid) for i, mid in enumerate(lora_ids)],
        )
        return Preset(name=name, tags=list(tags or []), model=model, **kw)

    return _make
