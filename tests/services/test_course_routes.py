"""Course Routes - verifies catalog listing, custom course CRUD and remote search.

Invariants:
    - Built-ins are always listed; custom courses follow in creation order
    - An unplayable custom course is refused with 400 COURSE_INVALID
    - Remote search is 503 until a client is configured
"""

import logging

import httpx


def _course_body(name: str = "Pine Valley", **hole_overrides) -> dict:
    holes = [
        {"hole_number": n, "par": 4, "handicap": n, "distance": 400}
        for n in range(1, 19)
    ]
    for hole_number, fields in hole_overrides.items():
        holes[int(hole_number.removeprefix("h")) - 1].update(fields)
    return {"name": name, "location": "Pine Valley, NJ", "holes": holes}



# ─── Catalog ─────────────────────────────────────────────────────

async def test_list_builtin_courses(client):
    res = await client.get("/api/v1/courses")
    assert res.status_code == 200
    courses = res.json()["courses"]
    assert [c["id"] for c in courses] == ["pebble-beach", "augusta-national", "st-andrews-old"]
    assert courses[0]["totalPar"] == 72


async def test_search_by_location(client):
    res = await client.get("/api/v1/courses", params={"q": "georgia"})
    assert res.json()["courses"] == []
    res = await client.get("/api/v1/courses", params={"q": "GA"})
    assert [c["id"] for c in res.json()["courses"]] == ["augusta-national"]


async def test_get_course_has_holes(client):
    res = await client.get("/api/v1/courses/pebble-beach")
    body = res.json()
    assert len(body["holes"]) == 18
    assert body["holes"][6] == {
        "holeNumber": 7, "par": 3, "handicap": 3, "distance": 109,
        "description": "Famous short par 3",
    }


async def test_get_unknown_course_404(client):
    assert (await client.get("/api/v1/courses/nowhere")).status_code == 404


async def test_suggestions_offer_custom_template(client):
    res = await client.get("/api/v1/courses/suggestions", params={"q": "augusta"})
    assert [c["id"] for c in res.json()["courses"]] == ["augusta-national", "custom-course"]


# ─── Custom courses ──────────────────────────────────────────────

async def test_create_custom_course(client):
    res = await client.post("/api/v1/courses", json=_course_body(h3={"par": 5}))
    assert res.status_code == 201
    body = res.json()
    assert body["id"].startswith("pine-valley-")
    assert body["totalPar"] == 73
    assert body["totalDistance"] == 7200

    listed = (await client.get("/api/v1/courses")).json()["courses"]
    assert listed[-1]["id"] == body["id"]

    suggested = (await client.get("/api/v1/courses/suggestions")).json()["courses"]
    assert [c["id"] for c in suggested][-1] == body["id"]


async def test_game_on_custom_course(client):
    course = (await client.post("/api/v1/courses", json=_course_body())).json()
    res = await client.post("/api/v1/games", json={
        "course_id": course["id"], "players": [{"name": "Ana"}],
    })
    assert res.status_code == 201
    assert res.json()["course"]["name"] == "Pine Valley"


async def test_create_course_duplicate_handicaps_rejected(client):
    res = await client.post("/api/v1/courses", json=_course_body(h2={"handicap": 1}))
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "COURSE_INVALID"
    assert "Handicap ranks repeat" in error["message"]


async def test_create_course_wrong_hole_count_400(client):
    body = _course_body()
    body["holes"] = body["holes"][:9]
    res = await client.post("/api/v1/courses", json=body)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_delete_custom_course(client):
    course = (await client.post("/api/v1/courses", json=_course_body())).json()
    assert (await client.delete(f"/api/v1/courses/{course['id']}")).status_code == 204
    assert (await client.get(f"/api/v1/courses/{course['id']}")).status_code == 404


async def test_builtin_course_cannot_be_deleted(client):
    assert (await client.delete("/api/v1/courses/pebble-beach")).status_code == 404
    assert (await client.get("/api/v1/courses/pebble-beach")).status_code == 200


# ─── Remote search ───────────────────────────────────────────────

async def test_remote_search_not_configured_503(client):
    res = await client.get("/api/v1/courses/remote", params={"q": "pine"})
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "COURSE_LOOKUP_ERROR"


async def test_remote_search_query_too_short_400(client, configured_search):
    res = await client.get("/api/v1/courses/remote", params={"q": "p"})
    assert res.status_code == 400


async def test_remote_search_returns_full_courses(
    client, configured_search, remote_api, remote_course,
):
    remote_api["responses"].append(httpx.Response(200, json={"courses": [remote_course()]}))
    res = await client.get("/api/v1/courses/remote", params={"q": "pine"})
    assert res.status_code == 200
    (course,) = res.json()["courses"]
    assert course["id"] == "remote-42"
    assert course["name"] == "Pine Club - North"
    assert course["location"] == "Aiken, SC"
    assert len(course["holes"]) == 18


async def test_game_on_remote_course(client, configured_search, remote_api, remote_course):
    remote_api["responses"].append(httpx.Response(200, json={"course": remote_course(7)}))
    res = await client.post("/api/v1/games", json={
        "course_id": "remote-7", "players": [{"name": "Ana"}],
    })
    assert res.status_code == 201
    assert res.json()["course"]["id"] == "remote-7"
    assert remote_api["calls"][0].url.path == "/v1/courses/7"


async def test_remote_course_with_repeated_hardest_rank_is_logged(
    client, configured_search, remote_api, remote_course, caplog,
):
    payload = remote_course(8)
    holes = payload["tees"]["male"][0]["holes"]
    holes[3]["handicap"] = 1  # hole 4 now shares the hardest front rank with hole 1
    remote_api["responses"].append(httpx.Response(200, json={"course": payload}))

    with caplog.at_level(logging.WARNING, logger="tour_scorecard.services.handle_game"):
        res = await client.post("/api/v1/games", json={
            "course_id": "remote-8", "players": [{"id": "p1", "name": "Ana"}],
        })
    assert res.status_code == 201
    warnings = [
        r for r in caplog.records
        if r.name == "tour_scorecard.services.handle_game" and r.levelno == logging.WARNING
    ]
    assert any("Handicap ranks repeat: [1]" in r.getMessage() for r in warnings)
    assert warnings[0].operation == "resolve_course"

    game_id = res.json()["id"]
    await client.post(
        f"/api/v1/games/{game_id}/scores",
        json={"player_id": "p1", "hole_number": 1, "strokes": 4},
    )
    skins = (await client.get(f"/api/v1/games/{game_id}/skins")).json()
    assert skins["players"][0]["breakdown"]["handicap_hole"] == 1


async def test_builtin_course_logs_nothing(client, caplog):
    with caplog.at_level(logging.WARNING, logger="tour_scorecard.services.handle_game"):
        await client.post("/api/v1/games", json={
            "course_id": "pebble-beach", "players": [{"name": "Ana"}],
        })
    assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []
