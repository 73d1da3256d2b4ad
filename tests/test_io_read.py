from __future__ import annotations

import json
from pathlib import Path

import pytest

from cycle_dashboard.config import AppConfig
from cycle_dashboard.io.read import load_cycle_list, load_cycles

IMEI = "865044073967657"
OTHER_IMEI = "865044073949366"


def _snapshot(imei: str, cycle_number: int) -> dict:
    return {
        "imei": imei,
        "cycle_number": cycle_number,
        "average_soh": "97.5",
        "charging_instances_count": 2,
        "temperature_dist_10deg": {"20-30": 45.0},
        "alert_details": {"warnings": ["High Temperature Warning"], "protections": []},
        "unexpected_field": "ignored",
    }


@pytest.mark.parametrize("shape", ["list", "data", "snapshots"])
def test_load_cycle_list_accepts_api_shapes(tmp_path: Path, shape: str) -> None:
    items = [_snapshot(IMEI, 1), _snapshot(IMEI, 2)]
    payload = items if shape == "list" else {"success": True, shape: items}
    path = tmp_path / "snapshots.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    records = load_cycle_list(path)

    assert [record.cycle_number for record in records] == [1, 2]
    assert records[0].average_soh == pytest.approx(97.5)
    assert records[0].temperature_map(10) == {"20-30": 45.0}
    assert records[0].alert_details.warnings == ("High Temperature Warning",)


def test_load_cycle_list_filters_by_imei(tmp_path: Path) -> None:
    path = tmp_path / "snapshots.json"
    path.write_text(
        json.dumps([_snapshot(IMEI, 1), _snapshot(OTHER_IMEI, 1), _snapshot(IMEI, 2)]),
        encoding="utf-8",
    )

    records = load_cycle_list(path, imei=OTHER_IMEI)

    assert len(records) == 1
    assert records[0].imei == OTHER_IMEI


def test_load_cycle_list_errors(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not found"):
        load_cycle_list(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="not valid JSON"):
        load_cycle_list(broken)

    wrong_shape = tmp_path / "wrong.json"
    wrong_shape.write_text(json.dumps({"items": []}), encoding="utf-8")
    with pytest.raises(ValueError, match="must be a list"):
        load_cycle_list(wrong_shape)

    scalar_item = tmp_path / "scalar.json"
    scalar_item.write_text(json.dumps([1]), encoding="utf-8")
    with pytest.raises(ValueError, match="not an object"):
        load_cycle_list(scalar_item)

    missing_keys = tmp_path / "missing_keys.json"
    missing_keys.write_text(json.dumps([{"imei": IMEI}]), encoding="utf-8")
    with pytest.raises(ValueError, match="cycle_number"):
        load_cycle_list(missing_keys)


def test_load_cycles_uses_mock_generator_by_default() -> None:
    cfg = AppConfig.model_validate({"input": {"mode": "mock", "mock_cycles": 5}})

    records = load_cycles(cfg, IMEI)

    assert [record.cycle_number for record in records] == [1, 2, 3, 4, 5]
    assert all(record.imei == IMEI for record in records)


def test_load_cycles_rejects_unauthorized_device() -> None:
    with pytest.raises(ValueError, match="not in devices.authorized_imeis"):
        load_cycles(AppConfig(), "000000000000000")


def test_load_cycles_json_mode(tmp_path: Path) -> None:
    path = tmp_path / "snapshots.json"
    path.write_text(json.dumps({"data": [_snapshot(IMEI, 3)]}), encoding="utf-8")

    cfg = AppConfig.model_validate({"input": {"mode": "json", "source_file": str(path)}})
    assert [record.cycle_number for record in load_cycles(cfg, IMEI)] == [3]

    unset = AppConfig.model_validate({"input": {"mode": "json"}})
    with pytest.raises(ValueError, match="source_file"):
        load_cycles(unset, IMEI)
    assert len(load_cycles(unset, IMEI, source=path)) == 1
