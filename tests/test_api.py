# tests/test_api.py

import io
import json

import pandas as pd
import pytest


def _xlsx(grid):
    buffer = io.BytesIO()
    pd.DataFrame(grid).to_excel(buffer, header=False, index=False)
    buffer.seek(0)
    return buffer


@pytest.fixture
def seeded(client):
    client.post("/api/salespersons", json={"name": " ravi ", "brand": "videum", "section": "tv"})
    client.post("/api/salespersons", json={"name": "Meena"})
    client.post("/api/targets", json={"name": "Ravi", "year": 2025, "month": 11, "target": 16000})
    return client


# --- Salespersons and targets ---

def test_salesperson_upsert_canonicalizes_and_keeps_brand(seeded):
    response = seeded.post("/api/salespersons", json={"name": "RAVI"})
    assert response.status_code == 200
    assert response.get_json()["brand"] == "VIDEUM"

    listing = seeded.get("/api/salespersons").get_json()
    assert [(s["name"], s["brand"], s["section"]) for s in listing] == [
        ("MEENA", None, None), ("RAVI", "VIDEUM", "TV")]


def test_salesperson_requires_name(client):
    response = client.post("/api/salespersons", json={"brand": "X"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "name is required"


def test_bulk_update_overwrites_brand_and_section(seeded):
    response = seeded.post("/api/salespersons/bulk", json={"salespersons": [
        {"name": "meena", "brand": "sony"},
        {"name": "ghost", "brand": "lg"},
        None,
    ]})
    assert response.status_code == 200
    by_name = {s["name"]: s for s in response.get_json()}
    assert by_name["MEENA"]["brand"] == "SONY"
    assert by_name["RAVI"]["section"] == "TV"
    assert "GHOST" not in by_name


def test_bulk_update_requires_list(client):
    assert client.post("/api/salespersons/bulk", json={"salespersons": "x"}).status_code == 400


def test_bulk_updates_skip_non_object_items(seeded):
    response = seeded.post("/api/salespersons/bulk", json={"salespersons": [
        "ravi", 7, {"name": "meena", "brand": "sony"}]})
    assert response.status_code == 200
    by_name = {s["name"]: s for s in response.get_json()}
    assert by_name["MEENA"]["brand"] == "SONY"

    response = seeded.post("/api/targets/bulk", json={"year": 2025, "month": 11, "targets": [
        "x", ["Ravi", 1], {"name": "Meena", "target": 5}]})
    assert response.status_code == 200
    rows = {r["name"]: r for r in seeded.get("/api/dashboard?year=2025&month=11").get_json()}
    assert rows["MEENA"]["target"] == 5


def test_target_validation_and_bulk_targets(seeded):
    assert seeded.post("/api/targets", json={"name": "Ravi", "year": 2025}).status_code == 400
    assert seeded.post("/api/targets/bulk", json={"year": 2025, "month": 11}).status_code == 400

    response = seeded.post("/api/targets/bulk", json={"year": 2025, "month": 11, "targets": [
        {"name": "Meena", "target": "8,000"}, {"name": ""}, {"name": "New Person", "target": 100}]})
    assert response.status_code == 200

    rows = {r["name"]: r for r in seeded.get("/api/dashboard?year=2025&month=11").get_json()}
    assert rows["MEENA"]["target"] == 8000
    assert rows["NEW PERSON"]["target"] == 100
    assert rows["NEW PERSON"]["brand"] is None


# --- Sales upload ---

def test_upload_rejects_missing_period_before_processing(app_with_db, seeded, sales_grid):
    from salestarget import db
    from salestarget.models import MonthlyAchievement
    from salestarget.reconciler.accumulator import AchievementAccumulator

    ravi_id = seeded.get("/api/salespersons").get_json()[1]["id"]
    AchievementAccumulator().merge(ravi_id, 2025, 11, 1, 1)
    db.session.commit()

    response = seeded.post("/api/upload-sales", data={"salesFile": (_xlsx(sales_grid), "sales.xlsx")},
                           content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json()["error"] == "year and month are required"
    assert MonthlyAchievement.query.count() == 1


def test_upload_rejects_missing_sales_file(seeded):
    response = seeded.post("/api/upload-sales", data={"year": "2025", "month": "11"},
                           content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json()["error"] == "Sales Excel file is required"


def test_upload_rejects_wrong_extension(seeded):
    response = seeded.post("/api/upload-sales",
                           data={"year": "2025", "month": "11", "salesFile": (io.BytesIO(b"x"), "sales.csv")},
                           content_type="multipart/form-data")
    assert response.status_code == 400


def test_upload_rejects_legacy_xls(seeded):
    response = seeded.post("/api/upload-sales",
                           data={"year": "2025", "month": "11", "salesFile": (_xlsx([["Date"]]), "sales.xls")},
                           content_type="multipart/form-data")
    assert response.status_code == 400
    assert "File type not allowed" in response.get_json()["error"]


def test_upload_reconciles_sales_and_returns(app_with_db, seeded, sales_grid):
    from salestarget.models import UploadRun

    returns_grid = [["Sl", "Ref. Doc. Info."], [1, "GI/102*  03-11-2025"]]
    response = seeded.post("/api/upload-sales", data={
        "year": "2025", "month": "11",
        "salesFile": (_xlsx(sales_grid), "sales.xlsx"),
        "returnsFile": (_xlsx(returns_grid), "returns.xlsx"),
    }, content_type="multipart/form-data")

    assert response.status_code == 200
    body = response.get_json()
    assert body["ok"] is True
    assert body["results"]["RAVI"] == {"own": 5000, "other": 0, "total": 5000}
    assert body["results"]["MEENA"]["other"] == 4000
    assert body["skipped"] == ["UNKNOWN PERSON"]
    assert body["returnedInvoiceCount"] == 1

    run = UploadRun.query.one()
    assert run.sales_filename.endswith("sales.xlsx")
    assert json.loads(run.results_json)["results"]["RAVI"]["own"] == 5000


def test_repeated_upload_replaces_the_period(seeded, sales_grid):
    for _ in range(2):
        response = seeded.post("/api/upload-sales", data={
            "year": "2025", "month": "11", "file": (_xlsx(sales_grid), "sales.xlsx")},
            content_type="multipart/form-data")
        assert response.status_code == 200

    rows = {r["name"]: r for r in seeded.get("/api/dashboard?year=2025&month=11").get_json()}
    assert rows["RAVI"]["ownAchievement"] == 5000
    assert rows["RAVI"]["otherAchievement"] == 3000
    assert rows["RAVI"]["totalAchievement"] == 8000
    assert rows["RAVI"]["totalPercent"] == pytest.approx(50.0)
    assert rows["MEENA"]["totalPercent"] is None


def test_upload_leaves_no_files_behind(app_with_db, seeded, sales_grid):
    import os

    seeded.post("/api/upload-sales", data={
        "year": "2025", "month": "11", "salesFile": (_xlsx(sales_grid), "sales.xlsx")},
        content_type="multipart/form-data")
    assert os.listdir(app_with_db.config["UPLOAD_FOLDER"]) == []


# --- Dashboard ---

def test_dashboard_requires_period(client):
    assert client.get("/api/dashboard?year=2025").status_code == 400


def test_dashboard_defaults_to_zero_without_achievements(seeded):
    rows = seeded.get("/api/dashboard?year=2024&month=1").get_json()
    assert [(r["name"], r["target"], r["totalAchievement"], r["totalPercent"]) for r in rows] == [
        ("MEENA", 0, 0, None), ("RAVI", 0, 0, None)]
