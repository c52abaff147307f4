import pytest

from profilequest.db.models.xp_event import XpEventRecord

QUESTS = [
    {"title": "Refactor a module", "description": "Clean it up", "category": "Skill Development", "xp_reward": 60},
    {"title": "Attend a meetup", "description": "Meet people", "category": "Networking", "xp_reward": 80},
    {"title": "Write a blog post", "category": "Thought Leadership"},
]


@pytest.mark.asyncio
async def test_save_and_list_quests(client, register):
    headers = await register(client)

    saved = await client.post("/api/quests/save", json={"quests": QUESTS}, headers=headers)
    assert saved.status_code == 200
    assert saved.json() == {"ok": True, "saved": 3}

    listed = await client.get("/api/quests", headers=headers)
    quests = listed.json()["quests"]
    assert [q["title"] for q in quests] == ["Attend a meetup", "Refactor a module", "Write a blog post"]
    assert quests[2]["xp_reward"] == 100
    assert all(q["status"] == "available" for q in quests)


@pytest.mark.asyncio
async def test_save_upserts_by_title(client, register):
    headers = await register(client)
    await client.post("/api/quests/save", json={"quests": QUESTS[:1]}, headers=headers)
    changed = dict(QUESTS[0], xp_reward=90)
    await client.post("/api/quests/save", json={"quests": [changed]}, headers=headers)

    quests = (await client.get("/api/quests", headers=headers)).json()["quests"]
    assert len(quests) == 1
    assert quests[0]["xp_reward"] == 90


@pytest.mark.asyncio
async def test_save_rejects_negative_reward(client, register):
    headers = await register(client)
    response = await client.post(
        "/api/quests/save", json={"quests": [{"title": "Cheat", "xp_reward": -10}]}, headers=headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_quests_are_private(client, register):
    hero = await register(client, email="hero@example.com")
    other = await register(client, email="other@example.com")
    await client.post("/api/quests/save", json={"quests": QUESTS}, headers=hero)

    response = await client.get("/api/quests", params={"status": "all"}, headers=other)
    assert response.json()["quests"] == []


@pytest.mark.asyncio
async def test_invalid_status_filter(client, register):
    headers = await register(client)
    response = await client.get("/api/quests", params={"status": "archived"}, headers=headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_complete_quest_awards_xp_once(client, register, db):
    headers = await register(client)
    await client.post("/api/quests/save", json={"quests": QUESTS}, headers=headers)

    first = await client.post("/api/quests/complete", json={"title": "Attend a meetup"}, headers=headers)
    assert first.status_code == 200
    body = first.json()
    assert body["awarded"] == 80
    assert body["quest"]["status"] == "completed"
    assert body["profile"] == {"level": 1, "xp": 80, "nextLevelXp": 100, "totalXp": 80}

    again = await client.post("/api/quests/complete", json={"title": "Attend a meetup"}, headers=headers)
    assert again.json()["awarded"] == 0
    assert again.json()["profile"]["totalXp"] == 80

    assert db.query(XpEventRecord).count() == 1

    available = (await client.get("/api/quests", headers=headers)).json()["quests"]
    completed = (await client.get("/api/quests", params={"status": "completed"}, headers=headers)).json()["quests"]
    assert "Attend a meetup" not in [q["title"] for q in available]
    assert [q["title"] for q in completed] == ["Attend a meetup"]


@pytest.mark.asyncio
async def test_completing_quests_levels_up(client, register):
    headers = await register(client)
    await client.post("/api/quests/save", json={"quests": QUESTS}, headers=headers)

    await client.post("/api/quests/complete", json={"title": "Attend a meetup"}, headers=headers)
    await client.post("/api/quests/complete", json={"title": "Refactor a module"}, headers=headers)
    response = await client.post("/api/quests/complete", json={"title": "Write a blog post"}, headers=headers)

    # 80 + 60 + 100 = 240 -> level 2 with 140/150
    body = response.json()
    assert body["levelsGained"] == 0
    assert body["profile"] == {"level": 2, "xp": 140, "nextLevelXp": 150, "totalXp": 240}


@pytest.mark.asyncio
async def test_resaving_completed_quest_does_not_reopen_it(client, register):
    headers = await register(client)
    await client.post("/api/quests/save", json={"quests": QUESTS[:1]}, headers=headers)
    await client.post("/api/quests/complete", json={"title": "Refactor a module"}, headers=headers)

    await client.post("/api/quests/save", json={"quests": QUESTS[:1]}, headers=headers)
    again = await client.post("/api/quests/complete", json={"title": "Refactor a module"}, headers=headers)

    assert again.json()["awarded"] == 0


@pytest.mark.asyncio
async def test_complete_unknown_quest(client, register):
    headers = await register(client)
    response = await client.post("/api/quests/complete", json={"title": "Nope"}, headers=headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_quest(client, register):
    headers = await register(client)
    await client.post("/api/quests/save", json={"quests": QUESTS}, headers=headers)

    deleted = await client.post("/api/quests/delete", json={"title": "Write a blog post"}, headers=headers)
    assert deleted.json() == {"ok": True}
    missing = await client.post("/api/quests/delete", json={"title": "Write a blog post"}, headers=headers)
    assert missing.status_code == 404

    titles = [q["title"] for q in (await client.get("/api/quests", headers=headers)).json()["quests"]]
    assert "Write a blog post" not in titles


@pytest.mark.asyncio
async def test_generate_uses_stored_persona_and_skips_existing(client, register):
    headers = await register(client)
    await client.post(
        "/api/persona/save",
        json={"persona": {"persona_type": "Data Scientist", "attributes": {"logic": 8}}},
        headers=headers,
    )
    await client.post(
        "/api/quests/save",
        json={"quests": [{"title": "Data Scientist L1 Quest 2"}]},
        headers=headers,
    )

    response = await client.post("/api/quests/generate", json={"personaType": "Human Being"}, headers=headers)

    assert response.status_code == 200
    titles = [q["title"] for q in response.json()["quests"]]
    assert titles == ["Data Scientist L1 Quest 1", "Data Scientist L1 Quest 3",
                      "Data Scientist L1 Quest 4", "Data Scientist L1 Quest 5"]


@pytest.mark.asyncio
async def test_generate_with_explicit_inputs(client, register):
    headers = await register(client)
    response = await client.post(
        "/api/quests/generate",
        json={"personaType": "Designer", "level": 3, "existingTitles": ["designer l3 quest 1"]},
        headers=headers,
    )

    quests = response.json()["quests"]
    assert len(quests) == 4
    assert quests[0]["title"] == "Designer L3 Quest 2"
    # 100 * 1.15 ** 2 = 132.25
    assert all(q["xp_reward"] == 132 for q in quests)


@pytest.mark.asyncio
async def test_save_rejects_oversized_reward(client, register):
    headers = await register(client)
    for reward in (10_001, 2 ** 70):
        response = await client.post(
            "/api/quests/save", json={"quests": [{"title": "Huge", "xp_reward": reward}]}, headers=headers
        )
        assert response.status_code == 422

    listed = await client.get("/api/quests", params={"status": "all"}, headers=headers)
    assert listed.json()["quests"] == []


@pytest.mark.asyncio
async def test_save_accepts_max_reward(client, register):
    headers = await register(client)
    response = await client.post(
        "/api/quests/save", json={"quests": [{"title": "Epic", "xp_reward": 10_000}]}, headers=headers
    )
    assert response.status_code == 200

    done = await client.post("/api/quests/complete", json={"title": "Epic"}, headers=headers)
    assert done.json()["profile"]["totalXp"] == 10_000


@pytest.mark.asyncio
async def test_deleted_and_resaved_quest_pays_once(client, register, db):
    headers = await register(client)
    quest = {"title": "Give a talk", "xp_reward": 100}

    for _ in range(3):
        await client.post("/api/quests/save", json={"quests": [quest]}, headers=headers)
        await client.post("/api/quests/complete", json={"title": "Give a talk"}, headers=headers)
        await client.post("/api/quests/delete", json={"title": "Give a talk"}, headers=headers)

    progress = (await client.get("/api/progress", headers=headers)).json()["progress"]
    assert progress["total_xp"] == 100
    assert db.query(XpEventRecord).count() == 1


@pytest.mark.asyncio
async def test_resaved_quest_is_closed_on_completion(client, register):
    headers = await register(client)
    await client.post("/api/quests/save", json={"quests": QUESTS[:1]}, headers=headers)
    await client.post("/api/quests/complete", json={"title": "Refactor a module"}, headers=headers)
    await client.post("/api/quests/delete", json={"title": "Refactor a module"}, headers=headers)
    await client.post("/api/quests/save", json={"quests": QUESTS[:1]}, headers=headers)

    again = await client.post("/api/quests/complete", json={"title": "Refactor a module"}, headers=headers)

    assert again.status_code == 200
    assert again.json()["awarded"] == 0
    assert again.json()["quest"]["status"] == "completed"
    assert again.json()["profile"]["totalXp"] == 60
