from __future__ import annotations

import threading
import time

from fooocus_presets.db import get_conn
from fooocus_presets.domain.entities import ResourceDownloads, default_image_config, default_sampling_config
from fooocus_presets.services import preset_svc


def test_create_assigns_id_timestamps_and_zero_use_count(make_preset):
    p = preset_svc.create_preset(make_preset("a", use_count=42, id="caller-id"))
    assert p.id and p.id != "caller-id"
    assert p.use_count == 0
    assert p.created_at and p.created_at == p.updated_at

    stored = preset_svc.get_preset(p.id)
    assert stored == p


def test_create_generates_unique_ids(make_preset):
    ids = {preset_svc.create_preset(make_preset(f"p{i}")).id for i in range(5)}
    assert len(ids) == 5


def test_get_missing_returns_none():
    assert preset_svc.get_preset("no-such-id") is None


def test_resources_survive_storage(make_preset):
    res = ResourceDownloads(lora_downloads={"x.safetensors": "https://example.com/x"})
    p = preset_svc.create_preset(make_preset("with res", resources=res))
    assert preset_svc.get_preset(p.id).resources == res


def test_update_overwrites_but_keeps_created_at(make_preset):
    p = preset_svc.create_preset(make_preset("before"))
    time.sleep(0.002)
    edited = p.model_copy(update={"name": "after", "use_count": 9, "created_at": "1999-01-01T00:00:00+00:00"})
    out = preset_svc.update_preset(edited)

    assert out.created_at == p.created_at
    assert out.updated_at > p.updated_at
    stored = preset_svc.get_preset(p.id)
    assert stored.name == "after"
    assert stored.use_count == 9
    assert stored.created_at == p.created_at
    assert stored.updated_at == out.updated_at


def test_update_result_does_not_share_lists_with_input(make_preset):
    p = preset_svc.create_preset(make_preset("owned", tags=["a"], lora_ids=["m1"]))
    edited = p.model_copy(update={"name": "owned2"}, deep=True)
    out = preset_svc.update_preset(edited)
    edited.tags.append("leak")
    edited.model.loras.clear()
    assert out.tags == ["a"]
    assert len(out.model.loras) == 1


def test_update_unknown_id_is_silent_noop(make_preset):
    ghost = make_preset("ghost", id="does-not-exist")
    out = preset_svc.update_preset(ghost)
    assert out.name == "ghost"
    assert preset_svc.get_preset("does-not-exist") is None
    assert preset_svc.list_presets() == []


def test_delete_and_delete_missing(make_preset):
    p = preset_svc.create_preset(make_preset("doomed"))
    preset_svc.delete_preset(p.id)
    assert preset_svc.get_preset(p.id) is None
    preset_svc.delete_preset(p.id)


def test_toggle_favorite_twice_restores_flag(make_preset):
    p = preset_svc.create_preset(make_preset("fav"))
    assert p.is_favorite is False

    time.sleep(0.002)
    preset_svc.toggle_favorite(p.id)
    once = preset_svc.get_preset(p.id)
    assert once.is_favorite is True
    assert once.updated_at > p.updated_at

    time.sleep(0.002)
    preset_svc.toggle_favorite(p.id)
    twice = preset_svc.get_preset(p.id)
    assert twice.is_favorite is False
    assert twice.updated_at > once.updated_at


def test_increment_use_count_concurrently(make_preset):
    p = preset_svc.create_preset(make_preset("busy"))
    workers, per_worker = 8, 25

    def hammer():
        for _ in range(per_worker):
            preset_svc.increment_use_count(p.id)

    threads = [threading.Thread(target=hammer) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert preset_svc.get_preset(p.id).use_count == workers * per_worker


def test_toggle_and_increment_on_missing_id_do_nothing():
    preset_svc.toggle_favorite("missing")
    preset_svc.increment_use_count("missing")
    assert preset_svc.list_presets() == []


def test_list_orders_by_most_recently_touched(make_preset):
    a = preset_svc.create_preset(make_preset("A"))
    time.sleep(0.002)
    b = preset_svc.create_preset(make_preset("B"))
    assert [p.id for p in preset_svc.list_presets()] == [b.id, a.id]

    time.sleep(0.002)
    preset_svc.increment_use_count(a.id)
    assert [p.id for p in preset_svc.list_presets()] == [a.id, b.id]


def test_search_is_case_sensitive_over_name_description_and_tags(make_preset):
    a = preset_svc.create_preset(make_preset("Night city", tags=["cyberpunk", "v2"]))
    b = preset_svc.create_preset(make_preset("portrait studio", description="soft light"))

    assert [p.id for p in preset_svc.search_presets("cyber")] == [a.id]
    assert [p.id for p in preset_svc.search_presets("soft")] == [b.id]
    assert preset_svc.search_presets("night") == []
    assert [p.id for p in preset_svc.search_presets("Night")] == [a.id]
    # % and _ are literal characters, not wildcards
    assert preset_svc.search_presets("%") == []


def test_malformed_embedded_columns_read_as_defaults(make_preset):
    p = preset_svc.create_preset(make_preset("broken", tags=["x"]))
    with get_conn() as conn:
        conn.execute(
            "UPDATE presets SET sampling_config=?, image_config=?, tags=? WHERE id=?",
            ("{not json", '{"aspectRatio": "1024*1024"}', "[oops", p.id),
        )

    got = preset_svc.get_preset(p.id)
    assert got is not None
    assert got.sampling == default_sampling_config()
    assert got.image == default_image_config()
    assert got.tags == []
    assert got.model == p.model
    assert got.prompt == p.prompt


def test_example_scenario(make_preset):
    a = preset_svc.create_preset(make_preset("A", tags=["portrait", "v2"]))
    assert a.use_count == 0
    for _ in range(3):
        preset_svc.increment_use_count(a.id)
    assert preset_svc.get_preset(a.id).use_count == 3
    assert [p.id for p in preset_svc.search_presets("portrait")] == [a.id]
    preset_svc.delete_preset(a.id)
    assert preset_svc.get_preset(a.id) is None
