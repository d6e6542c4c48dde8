import time

from fooocus_presets.db import get_conn
from fooocus_presets.domain.entities import ModelInfo
from fooocus_presets.services import model_svc, preset_svc


def _model(name, model_type="Checkpoint", **kw):
    return ModelInfo(name=name, model_type=model_type, file_name=f"{name}.safetensors", **kw)


def test_create_and_get():
    m = model_svc.create_model(_model("Juggernaut XL", scope=["photo"], tags=["sdxl"], path="/models/ckpt"))
    assert m.id
    assert m.created_at == m.updated_at
    assert model_svc.get_model(m.id) == m
    assert model_svc.get_model("nope") is None


def test_filter_by_type():
    ckpt = model_svc.create_model(_model("base"))
    lora = model_svc.create_model(_model("detail", "LoRA"))
    assert [m.id for m in model_svc.get_models_by_type("LoRA")] == [lora.id]
    assert [m.id for m in model_svc.get_models_by_type("Checkpoint")] == [ckpt.id]
    assert model_svc.get_models_by_type("Embedding") == []


def test_search_over_name_description_scope_and_tags():
    a = model_svc.create_model(_model("Anime Mix", description="flat colors", scope=["anime"], tags=["sd15"]))
    b = model_svc.create_model(_model("RealVis", scope=["photoreal"], tags=["sdxl"]))
    assert [m.id for m in model_svc.search_models("flat")] == [a.id]
    assert [m.id for m in model_svc.search_models("photoreal")] == [b.id]
    assert [m.id for m in model_svc.search_models("sdxl")] == [b.id]
    assert model_svc.search_models("realvis") == []
    assert {m.id for m in model_svc.search_models("")} == {a.id, b.id}


def test_update_keeps_created_at_and_refreshes_updated_at():
    m = model_svc.create_model(_model("old"))
    time.sleep(0.002)
    out = model_svc.update_model(m.model_copy(update={"name": "new", "tags": ["x"], "created_at": ""}))
    assert out.created_at == m.created_at
    assert out.updated_at > m.updated_at
    stored = model_svc.get_model(m.id)
    assert stored.name == "new" and stored.tags == ["x"]


def test_update_result_does_not_share_lists_with_input():
    m = model_svc.create_model(_model("owned", tags=["t"], scope=["s"]))
    edited = m.model_copy(deep=True)
    out = model_svc.update_model(edited)
    edited.tags.append("leak")
    edited.scope.clear()
    assert out.tags == ["t"] and out.scope == ["s"]


def test_update_unknown_model_is_noop():
    model_svc.update_model(_model("ghost", id="ghost-id"))
    assert model_svc.list_models() == []


def test_delete_is_allowed_while_referenced(make_preset):
    m = model_svc.create_model(_model("in use"))
    p = preset_svc.create_preset(make_preset("uses it", base_model_id=m.id))
    model_svc.delete_model(m.id)
    assert model_svc.get_model(m.id) is None
    # the preset keeps its dangling id
    assert preset_svc.get_preset(p.id).model.base_model_id == m.id
    model_svc.delete_model(m.id)


def test_malformed_lists_read_as_empty():
    m = model_svc.create_model(_model("broken", scope=["a"], tags=["b"]))
    with get_conn() as conn:
        conn.execute("UPDATE models SET scope='nope', tags=NULL WHERE id=?", (m.id,))
    got = model_svc.get_model(m.id)
    assert got.scope == [] and got.tags == []
