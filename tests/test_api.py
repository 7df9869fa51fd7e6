import json

import pytest
from httpx import ASGITransport, AsyncClient

from batrank.api import create_app
from batrank.persistence import DB_PATH_ENV


@pytest.fixture
async def client(tmp_path, monkeypatch):
    monkeypatch.setenv(DB_PATH_ENV, str(tmp_path / "api.sqlite"))
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


def _sample_batters() -> str:
    return """Name,HR,R,RBI,SB,AVG,playerid
Low Power,10,80,70,5,.270,p10
Mid Power,20,80,70,5,.270,p20
High Power,30,80,70,5,.270,p30
"""


def _updated_batters() -> str:
    return """Name,HR,R,RBI,SB,AVG,playerid
Low Power,45,120,110,30,.320,p10
Newcomer,25,90,80,10,.280,p40
"""


def _files(text: str, filename: str = "batters.csv") -> dict:
    return {"batters": (filename, text.encode("utf-8"), "text/csv")}


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


async def test_create_ranking_returns_order_and_stats(client):
    resp = await client.post("/rankings", files=_files(_sample_batters()))

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["population_size"] == 3
    assert [batter["player_id"] for batter in payload["batters"]] == ["p30", "p20", "p10"]
    assert [batter["rank"] for batter in payload["batters"]] == [1, 2, 3]
    assert payload["batters"][0]["score"] == pytest.approx(1.2247449, abs=1e-6)
    assert payload["batters"][0]["components"]["runs"] == 0.0
    stats = {item["metric"]: item for item in payload["stats"]}
    assert stats["home_runs"]["mean"] == pytest.approx(20.0)
    assert stats["runs"]["degenerate"] is True
    assert payload["inserted_ids"] == ["p30", "p20", "p10"]
    assert payload["run_id"]


async def test_second_upload_keeps_first_write(client):
    await client.post("/rankings", files=_files(_sample_batters()))
    before = (await client.get("/rankings/p10")).json()

    resp = await client.post("/rankings", files=_files(_updated_batters(), "update.csv"))

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["inserted_ids"] == ["p40"]
    assert payload["skipped_ids"] == ["p10"]
    after = (await client.get("/rankings/p10")).json()
    assert after == before

    stored = (await client.get("/rankings")).json()
    assert {batter["player_id"] for batter in stored} == {"p10", "p20", "p30", "p40"}

    runs = (await client.get("/runs")).json()
    assert len(runs) == 2
    assert {run["source"] for run in runs} == {"batters.csv", "update.csv"}


async def test_create_ranking_without_persist(client):
    resp = await client.post("/rankings", files=_files(_sample_batters()), data={"persist": "false"})

    assert resp.status_code == 200
    assert resp.json()["run_id"] is None
    assert (await client.get("/rankings")).json() == []


async def test_create_ranking_with_column_mapping(client):
    text = "Player,HomeRuns,R,RBI,SB,AVG,Id\nA,3,1,1,1,.250,a\nB,9,1,1,1,.250,b\n"
    mapping = {"name": "Player", "home_runs": "HomeRuns", "player_id": "Id"}

    resp = await client.post("/rankings", files=_files(text), data={"column_mapping": json.dumps(mapping)})

    assert resp.status_code == 200
    assert [batter["player_id"] for batter in resp.json()["batters"]] == ["b", "a"]


async def test_create_ranking_empty_population(client):
    resp = await client.post("/rankings", files=_files("Name,HR,R,RBI,SB,AVG,playerid\n"))

    assert resp.status_code == 422
    assert "empty population" in resp.json()["detail"]


async def test_create_ranking_bad_row(client):
    resp = await client.post("/rankings", files=_files(_sample_batters() + "Broken,1,1,1,1,2.5,bad\n"))

    assert resp.status_code == 422
    assert "row 4" in resp.json()["detail"]


async def test_create_ranking_invalid_mapping_json(client):
    resp = await client.post("/rankings", files=_files(_sample_batters()), data={"column_mapping": "{not json"})

    assert resp.status_code == 400


async def test_unknown_batter_returns_404(client):
    resp = await client.get("/rankings/ghost")
    assert resp.status_code == 404


async def test_export_stored_ranking(client):
    await client.post("/rankings", files=_files(_sample_batters()))

    resp = await client.get("/rankings/export.csv")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    lines = resp.text.splitlines()
    assert lines[0] == "rank,player_id,name,score"
    assert lines[1].startswith("1,p30,High Power,")


@pytest.mark.parametrize("bad_value", [None, 3, "", ["HR"]])
async def test_create_ranking_rejects_non_string_mapping_values(client, bad_value):
    mapping = {"name": "Name", "home_runs": bad_value}

    resp = await client.post("/rankings", files=_files(_sample_batters()), data={"column_mapping": json.dumps(mapping)})

    assert resp.status_code == 400
    assert "home_runs" in resp.json()["detail"]
    assert (await client.get("/rankings")).json() == []
