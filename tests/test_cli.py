"""Tests for the freshb4 command line (mock AI backend, temporary database)."""

import json

import pytest

from freshb4.ai.mock import MOCK_ANALYSES
from freshb4.cli import format_alerts, main
from freshb4.models import PantryItem
from freshb4.notifications import plan_notifications


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        f'[ai]\nbackend = "mock"\n\n[database]\npath = "{tmp_path / "pantry.db"}"\n',
        encoding="utf-8",
    )
    return str(path)


def run(config_path, *args):
    main(["-c", config_path, *args])


def test_no_command_exits(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1
    assert "usage: freshb4" in capsys.readouterr().out


def test_add_and_list(config_path, capsys):
    run(config_path, "add", "Milk", "--category", "Dairy", "--days", "3")
    item_id = capsys.readouterr().out.strip()
    assert item_id

    run(config_path, "pantry", "--json")
    data = json.loads(capsys.readouterr().out)
    assert [i["id"] for i in data["items"]] == [item_id]
    assert data["items"][0]["category"] == "Dairy"
    assert data["items"][0]["days_left"] == 3
    assert data["stats"] == {"urgent": 0, "soon": 1, "fresh": 0, "total": 1}


def test_add_empty_name_fails(config_path, capsys):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "add", " ")
    assert exc.value.code == 1
    assert "must not be empty" in capsys.readouterr().err


def test_update_and_remove(config_path, capsys):
    run(config_path, "add", "Milk")
    item_id = capsys.readouterr().out.strip()

    run(config_path, "update", item_id, "--days", "1", "--notes", "open")
    run(config_path, "pantry", "--json")
    item = json.loads(capsys.readouterr().out)["items"][0]
    assert item["days_left"] == 1
    assert item["notes"] == "open"

    run(config_path, "remove", item_id)
    run(config_path, "pantry")
    assert "Your pantry is empty" in capsys.readouterr().out


def test_update_unknown_item(config_path, capsys):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "update", "missing", "--name", "Tea")
    assert exc.value.code == 1
    assert "No such item: missing" in capsys.readouterr().err


def test_update_without_changes(config_path, capsys):
    with pytest.raises(SystemExit):
        run(config_path, "update", "anything")
    assert "Nothing to update." in capsys.readouterr().err


def test_seed_and_pantry(config_path, capsys):
    run(config_path, "seed")
    assert "Demo data seeded: 4 items" in capsys.readouterr().out

    run(config_path, "pantry")
    out = capsys.readouterr().out
    assert "4 items" in out
    assert "Bananas" in out
    assert "Use Today" in out
    assert "Urgent: 1   Soon: 2   Fresh: 1   Health: 25%" in out


def test_alerts_json(config_path, capsys):
    run(config_path, "seed")
    capsys.readouterr()

    run(config_path, "alerts", "--json")
    data = json.loads(capsys.readouterr().out)
    assert data["expired"]["count"] == 0
    assert data["expiring"]["count"] == 3
    assert data["expiring"]["severity"] == "medium"
    assert data["fresh"]["items"] == ["Bread"]
    assert data["summary"] == {"total": 4, "needsAttention": 3, "healthScore": 25}


def test_alerts_empty(config_path, capsys):
    run(config_path, "alerts")
    assert "Nothing needs attention" in capsys.readouterr().out


def test_recipes_json(config_path, capsys):
    run(config_path, "seed")
    capsys.readouterr()

    run(config_path, "recipes", "--json")
    data = json.loads(capsys.readouterr().out)
    assert data["total"] == 3
    assert data["urgent_items_used"] == 2
    assert data["recipes"][0]["ingredients"] == ["Spinach", "Bananas"]


def test_scan_image_and_add(config_path, tmp_path, capsys):
    image = tmp_path / "food.jpg"
    image.write_bytes(b"jpeg")

    run(config_path, "scan", "--image", str(image), "--json", "--add")
    out = capsys.readouterr().out
    analysis = json.loads(out[: out.index("\n✓")])
    assert analysis["food_type"] in {a["food_type"] for a in MOCK_ANALYSES}

    run(config_path, "pantry", "--json")
    items = json.loads(capsys.readouterr().out)["items"]
    assert [i["name"] for i in items] == [analysis["food_type"]]
    assert items[0]["image_ref"] == str(image)
    assert items[0]["ai_analysis"]["food_type"] == analysis["food_type"]


def test_scan_missing_image_fails(config_path, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        run(config_path, "scan", "--image", str(tmp_path / "typo.jpg"), "--add")
    assert exc.value.code == 1
    assert "could not read image" in capsys.readouterr().err

    run(config_path, "pantry", "--json")
    assert json.loads(capsys.readouterr().out)["items"] == []


def test_scan_without_backend_says_so(tmp_path, capsys, monkeypatch):
    for var in ("GEMINI_API_KEY", "EXPO_PUBLIC_GEMINI_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    path = tmp_path / "gemini.toml"
    path.write_text(
        f'[ai]\nbackend = "gemini"\n\n[database]\npath = "{tmp_path / "pantry.db"}"\n',
        encoding="utf-8",
    )
    image = tmp_path / "food.jpg"
    image.write_bytes(b"jpeg")

    run(str(path), "scan", "--image", str(image))
    assert "No AI backend configured" in capsys.readouterr().err


def test_scan_with_backend_has_no_notice(config_path, tmp_path, capsys):
    image = tmp_path / "food.jpg"
    image.write_bytes(b"jpeg")
    run(config_path, "scan", "--image", str(image))
    assert "No AI backend configured" not in capsys.readouterr().err


def test_models(config_path, capsys):
    run(config_path, "models")
    out = capsys.readouterr().out
    assert "Available mock models:" in out
    assert "mock (Built-in examples)" in out


def test_format_alerts():
    plan = plan_notifications(
        [PantryItem(name="Bread", days_left=0), PantryItem(name="Milk", days_left=2)]
    )
    text = format_alerts(plan)
    assert "🚨 Items Spoiled! 1 item(s) have spoiled and should be discarded" in text
    assert "    - Milk (2 days left)" in text
    assert "Health score: 0%" in text
