"""Tests for the scoring endpoints."""

from babylog.api.dependencies import get_leaderboard_cache
from babylog.core.leaderboard_cache import LeaderboardCache


async def _create_user(client, display_name=None, show_name=True) -> int:
    resp = await client.post(
        "/api/users/", json={"display_name": display_name, "show_name": show_name}
    )
    assert resp.status_code == 201
    return resp.json()["id"]


async def _award_activity(client, user_id, activity_type):
    return await client.post(
        "/api/scoring/activity", params={"user_id": user_id}, json={"activity_type": activity_type}
    )


async def test_award_activity_route(client):
    user_id = await _create_user(client)

    resp = await _award_activity(client, user_id, "milestone")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "points": 20, "message": None, "error": None}

    resp = await client.get(f"/api/users/{user_id}")
    assert resp.json()["score"] == 20


async def test_award_activity_unknown_type(client):
    user_id = await _create_user(client)
    resp = await _award_activity(client, user_id, "tummy-time")
    assert resp.json()["points"] == 1


async def test_award_todo_route(client):
    user_id = await _create_user(client)
    resp = await client.post(
        "/api/scoring/todo", params={"user_id": user_id}, json={"priority": "high"}
    )
    assert resp.status_code == 200
    assert resp.json()["points"] == 8


async def test_award_requires_known_user(client):
    resp = await _award_activity(client, 999, "feeding")
    assert resp.status_code == 404


async def test_award_requires_user_id(client):
    resp = await client.post("/api/scoring/activity", json={"activity_type": "feeding"})
    assert resp.status_code == 422


async def test_daily_signin_route(client):
    user_id = await _create_user(client)

    first = await client.post("/api/scoring/daily-signin", params={"user_id": user_id})
    assert first.status_code == 200
    assert first.json()["success"] is True
    assert first.json()["points"] == 2

    # Informational, not an error status
    second = await client.post("/api/scoring/daily-signin", params={"user_id": user_id})
    assert second.status_code == 200
    assert second.json()["success"] is False
    assert second.json()["message"] == "Already signed in today"

    resp = await client.get(f"/api/users/{user_id}")
    assert resp.json()["score"] == 2


async def test_leaderboard_route(client):
    for name, activity, times in [
        ("Jane Doe", "milestone", 2),  # 40
        ("Madison", "doctor", 1),      # 10
        ("Low Scorer", "diaper", 3),   # 9
    ]:
        user_id = await _create_user(client, name)
        for _ in range(times):
            await _award_activity(client, user_id, activity)
    await _create_user(client, "Hidden Person", show_name=False)

    resp = await client.get("/api/scoring/leaderboard")
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    board = data["leaderboard"]
    assert [(e["display_name"], e["score"], e["rank"]) for e in board] == [
        ("Jane D.", 40, 1),
        ("M.", 10, 2),
    ]
    assert "member_since" in board[0]

    resp = await client.get("/api/scoring/leaderboard", params={"min_score": 0})
    assert len(resp.json()["leaderboard"]) == 4


async def test_stats_route(client):
    user_id = await _create_user(client)
    await _award_activity(client, user_id, "feeding")
    await client.post("/api/scoring/daily-signin", params={"user_id": user_id})

    resp = await client.get("/api/scoring/stats", params={"user_id": user_id})
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["stats"] == {
        "total_score": 7,
        "activity_count": 0,  # scored directly, no activity logged
        "completed_todos": 0,
        "total_todos": 0,
        "todo_completion_rate": 0.0,
    }
    history = data["score_history"]
    assert [item["reason"] for item in history] == ["daily_signin", "activity_logged"]
    assert history[0]["metadata"] is None
    assert history[1]["metadata"] == {"activityType": "feeding"}


async def test_stats_history_limit(client):
    user_id = await _create_user(client)
    for _ in range(3):
        await _award_activity(client, user_id, "sleep")

    resp = await client.get(
        "/api/scoring/stats", params={"user_id": user_id, "history_limit": 2}
    )
    assert len(resp.json()["score_history"]) == 2


async def test_leaderboard_cache_invalidated_by_award(client, fake_redis):
    from babylog.main import app

    cache = LeaderboardCache(fake_redis, ttl=60)
    app.dependency_overrides[get_leaderboard_cache] = lambda: cache

    user_id = await _create_user(client, "Jane Doe")
    await _award_activity(client, user_id, "milestone")

    resp = await client.get("/api/scoring/leaderboard")
    assert [e["score"] for e in resp.json()["leaderboard"]] == [20]
    assert "leaderboard:v1:10:50" in fake_redis.store

    await _award_activity(client, user_id, "doctor")
    assert fake_redis.store["leaderboard:version"] == "2"

    resp = await client.get("/api/scoring/leaderboard")
    assert [e["score"] for e in resp.json()["leaderboard"]] == [30]
