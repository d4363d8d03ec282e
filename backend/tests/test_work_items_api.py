"""
API tests for stories, bugs and tasks
"""

import pytest


async def create_item(client, headers, project_id, plural="stories", size="medium", **extra):
    payload = {"name": "Item", "priority": "major", "point_size": size, **extra}
    response = await client.post(f"/projects/{project_id}/{plural}", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def create_sprint(client, headers, project_id, days=5):
    response = await client.post(
        f"/projects/{project_id}/sprints", json={"time": {"days": days}}, headers=headers
    )
    return response.json()[0]


async def remaining_today(client, headers, sprint_id):
    chart = (await client.get(f"/sprints/{sprint_id}/burndown", headers=headers)).json()
    return chart["remaining_size"][str(chart["current_day"])]


class TestCodes:
    """Tests for human readable codes."""

    async def test_story_codes_increment(self, client, auth_headers, project):
        first = await create_item(client, auth_headers, project["id"])
        second = await create_item(client, auth_headers, project["id"])
        assert first["code"] == "ABC-0001"
        assert second["code"] == "ABC-0002"

    async def test_bugs_have_their_own_sequence(self, client, auth_headers, project):
        await create_item(client, auth_headers, project["id"])
        bug = await create_item(client, auth_headers, project["id"], "bugs")
        assert bug["code"] == "ABC-B0001"
        assert bug["kind"] == "bug"

    async def test_codes_continue_after_delete(self, client, auth_headers, project):
        first = await create_item(client, auth_headers, project["id"])
        await create_item(client, auth_headers, project["id"])
        await client.delete(f"/stories/{first['id']}", headers=auth_headers)
        third = await create_item(client, auth_headers, project["id"])
        assert third["code"] == "ABC-0003"


class TestWorkItems:
    """Tests for story and bug CRUD."""

    async def test_defaults(self, client, alice, project):
        story = await create_item(client, alice["headers"], project["id"])
        assert story["state"] == "todo"
        assert story["assignee_id"] == alice["user"]["id"]
        assert story["creator"]["name"] == "Alice"
        assert story["sprint"] is None
        assert story["tasks"] == []

    async def test_explicit_assignee(self, client, alice, bob, project):
        story = await create_item(
            client, alice["headers"], project["id"], assignee_id=bob["user"]["id"]
        )
        assert story["assignee"]["id"] == bob["user"]["id"]

    async def test_unknown_assignee(self, client, auth_headers, project):
        response = await client.post(
            f"/projects/{project['id']}/stories",
            json={"name": "X", "priority": "major", "point_size": "small", "assignee_id": 999},
            headers=auth_headers,
        )
        assert response.status_code == 404

    @pytest.mark.parametrize("field,value", [("point_size", "huge"), ("priority", "urgent")])
    async def test_invalid_labels(self, client, auth_headers, project, field, value):
        payload = {"name": "X", "priority": "major", "point_size": "small", field: value}
        response = await client.post(
            f"/projects/{project['id']}/stories", json=payload, headers=auth_headers
        )
        assert response.status_code == 400

    async def test_estimated_time_is_normalized(self, client, auth_headers, project):
        story = await create_item(
            client, auth_headers, project["id"],
            estimated_time={"days": 0, "hours": 9, "minutes": 75},
        )
        assert story["estimated_time"] == {"days": 1, "hours": 2, "minutes": 15}

    async def test_list_by_kind(self, client, auth_headers, project):
        await create_item(client, auth_headers, project["id"])
        await create_item(client, auth_headers, project["id"], "bugs")
        stories = await client.get(f"/projects/{project['id']}/stories", headers=auth_headers)
        bugs = await client.get(f"/projects/{project['id']}/bugs", headers=auth_headers)
        assert [s["code"] for s in stories.json()] == ["ABC-0001"]
        assert [b["code"] for b in bugs.json()] == ["ABC-B0001"]

    async def test_story_is_not_a_bug(self, client, auth_headers, project):
        story = await create_item(client, auth_headers, project["id"])
        response = await client.get(f"/bugs/{story['id']}", headers=auth_headers)
        assert response.status_code == 404

    async def test_update_outside_sprint(self, client, auth_headers, project):
        """Items without a sprint change state freely with no burndown effect."""
        story = await create_item(client, auth_headers, project["id"])
        response = await client.patch(
            f"/stories/{story['id']}",
            json={"state": "done", "name": "Renamed"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["state"] == "done"
        assert response.json()["name"] == "Renamed"

    async def test_project_counts(self, client, auth_headers, project):
        await create_item(client, auth_headers, project["id"])
        await create_item(client, auth_headers, project["id"])
        await create_item(client, auth_headers, project["id"], "bugs")
        detail = (await client.get(f"/projects/{project['id']}", headers=auth_headers)).json()
        assert detail["story_count"] == 2
        assert detail["bug_count"] == 1


class TestBurndownBookkeeping:
    """Remaining size follows state and size changes of sprint items."""

    @pytest.fixture
    async def sprint_with_items(self, client, auth_headers, project):
        """Sprint holding two medium stories and a small bug (10 points)."""
        sprint = await create_sprint(client, auth_headers, project["id"])
        first = await create_item(client, auth_headers, project["id"])
        second = await create_item(client, auth_headers, project["id"])
        bug = await create_item(client, auth_headers, project["id"], "bugs", size="small")
        await client.patch(
            f"/sprints/{sprint['id']}",
            json={"stories": [first["id"], second["id"]], "bugs": [bug["id"]]},
            headers=auth_headers,
        )
        return sprint, first, second, bug

    async def test_done_and_back(self, client, auth_headers, sprint_with_items):
        sprint, first, _, _ = sprint_with_items
        assert await remaining_today(client, auth_headers, sprint["id"]) == 10

        await client.patch(f"/stories/{first['id']}", json={"state": "done"}, headers=auth_headers)
        assert await remaining_today(client, auth_headers, sprint["id"]) == 6

        await client.patch(f"/stories/{first['id']}", json={"state": "inProgress"}, headers=auth_headers)
        assert await remaining_today(client, auth_headers, sprint["id"]) == 10

    async def test_non_done_transitions_do_not_count(self, client, auth_headers, sprint_with_items):
        sprint, first, _, _ = sprint_with_items
        await client.patch(f"/stories/{first['id']}", json={"state": "testing"}, headers=auth_headers)
        assert await remaining_today(client, auth_headers, sprint["id"]) == 10

    async def test_bug_done(self, client, auth_headers, sprint_with_items):
        sprint, _, _, bug = sprint_with_items
        await client.patch(f"/bugs/{bug['id']}", json={"state": "done"}, headers=auth_headers)
        assert await remaining_today(client, auth_headers, sprint["id"]) == 8

    async def test_resizing_open_item(self, client, auth_headers, sprint_with_items):
        sprint, first, _, _ = sprint_with_items
        await client.patch(f"/stories/{first['id']}", json={"point_size": "large"}, headers=auth_headers)
        assert await remaining_today(client, auth_headers, sprint["id"]) == 14

    async def test_ideal_curve_is_rebuilt_on_sprint_update(self, client, auth_headers, sprint_with_items):
        sprint, first, _, _ = sprint_with_items
        await client.patch(f"/stories/{first['id']}", json={"state": "done"}, headers=auth_headers)
        await client.patch(f"/sprints/{sprint['id']}", json={"state": "inProgress"}, headers=auth_headers)
        chart = (await client.get(f"/sprints/{sprint['id']}/burndown", headers=auth_headers)).json()
        # Ideal counts every item, remaining only the open ones
        assert chart["ideal_size"]["1"] == 10
        assert chart["ideal_size"]["5"] == 0
        assert chart["remaining_size"]["1"] == 6

    async def test_deleting_item_recomputes_sprint(self, client, auth_headers, sprint_with_items):
        sprint, first, _, _ = sprint_with_items
        response = await client.delete(f"/stories/{first['id']}", headers=auth_headers)
        assert response.status_code == 204
        assert await remaining_today(client, auth_headers, sprint["id"]) == 6

    async def test_item_shows_its_sprint(self, client, auth_headers, sprint_with_items):
        sprint, first, _, _ = sprint_with_items
        story = (await client.get(f"/stories/{first['id']}", headers=auth_headers)).json()
        assert story["sprint"] == {"id": sprint["id"], "indicator": 0}


class TestScrumboard:
    """Tests for the per-sprint board views."""

    async def test_board_lists_stories_with_tasks(self, client, alice, bob, project):
        headers = alice["headers"]
        sprint = await create_sprint(client, headers, project["id"])
        story = await create_item(client, headers, project["id"])
        await client.post(f"/stories/{story['id']}/tasks", json={"name": "Mine", "priority": "minor"}, headers=headers)
        await client.post(
            f"/stories/{story['id']}/tasks",
            json={"name": "Theirs", "priority": "minor", "assignee_id": bob["user"]["id"]},
            headers=headers,
        )
        await client.patch(f"/sprints/{sprint['id']}", json={"stories": [story["id"]]}, headers=headers)

        board = (await client.get(f"/sprints/{sprint['id']}/stories", headers=headers)).json()
        assert [s["code"] for s in board] == ["ABC-0001"]
        assert [t["name"] for t in board[0]["tasks"]] == ["Mine", "Theirs"]

        filtered = (await client.get(
            f"/sprints/{sprint['id']}/stories",
            params={"assignee_id": bob["user"]["id"]},
            headers=headers,
        )).json()
        assert [t["name"] for t in filtered[0]["tasks"]] == ["Theirs"]

    async def test_bug_board_filters_bugs(self, client, alice, bob, project):
        headers = alice["headers"]
        sprint = await create_sprint(client, headers, project["id"])
        mine = await create_item(client, headers, project["id"], "bugs")
        theirs = await create_item(client, headers, project["id"], "bugs", assignee_id=bob["user"]["id"])
        await client.patch(
            f"/sprints/{sprint['id']}", json={"bugs": [mine["id"], theirs["id"]]}, headers=headers
        )
        board = (await client.get(
            f"/sprints/{sprint['id']}/bugs",
            params={"assignee_id": bob["user"]["id"]},
            headers=headers,
        )).json()
        assert [b["id"] for b in board] == [theirs["id"]]

    async def test_empty_board(self, client, auth_headers, project):
        sprint = await create_sprint(client, auth_headers, project["id"])
        response = await client.get(f"/sprints/{sprint['id']}/stories", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    async def test_unknown_sprint(self, client, auth_headers):
        response = await client.get("/sprints/555/bugs", headers=auth_headers)
        assert response.status_code == 404


class TestTasks:
    """Tests for tasks under stories."""

    async def test_task_codes(self, client, auth_headers, project):
        story = await create_item(client, auth_headers, project["id"])
        first = await client.post(
            f"/stories/{story['id']}/tasks", json={"name": "A", "priority": "minor"}, headers=auth_headers
        )
        second = await client.post(
            f"/stories/{story['id']}/tasks", json={"name": "B", "priority": "minor"}, headers=auth_headers
        )
        assert first.status_code == 201
        assert first.json()["code"] == "ABC-T0001"
        assert second.json()["code"] == "ABC-T0002"

    async def test_tasks_only_under_stories(self, client, auth_headers, project):
        bug = await create_item(client, auth_headers, project["id"], "bugs")
        response = await client.post(
            f"/stories/{bug['id']}/tasks", json={"name": "A", "priority": "minor"}, headers=auth_headers
        )
        assert response.status_code == 404

    async def test_tasks_have_no_testing_state(self, client, auth_headers, project):
        story = await create_item(client, auth_headers, project["id"])
        response = await client.post(
            f"/stories/{story['id']}/tasks",
            json={"name": "A", "priority": "minor", "state": "testing"},
            headers=auth_headers,
        )
        assert response.status_code == 400

    async def test_logged_time_accumulates_on_task_and_story(self, client, auth_headers, project):
        story = await create_item(client, auth_headers, project["id"])
        task = (await client.post(
            f"/stories/{story['id']}/tasks", json={"name": "A", "priority": "minor"}, headers=auth_headers
        )).json()

        for _ in range(2):
            response = await client.patch(
                f"/tasks/{task['id']}",
                json={"logged_time": {"days": 0, "hours": 5, "minutes": 0}},
                headers=auth_headers,
            )
            assert response.status_code == 200

        assert response.json()["logged_time"] == {"days": 1, "hours": 2, "minutes": 0}
        refreshed = (await client.get(f"/stories/{story['id']}", headers=auth_headers)).json()
        assert refreshed["logged_time"] == {"days": 1, "hours": 2, "minutes": 0}

    async def test_update_and_delete_task(self, client, auth_headers, project):
        story = await create_item(client, auth_headers, project["id"])
        task = (await client.post(
            f"/stories/{story['id']}/tasks", json={"name": "A", "priority": "minor"}, headers=auth_headers
        )).json()
        updated = await client.patch(
            f"/tasks/{task['id']}", json={"state": "done"}, headers=auth_headers
        )
        assert updated.json()["state"] == "done"

        assert (await client.delete(f"/tasks/{task['id']}", headers=auth_headers)).status_code == 204
        listed = await client.get(f"/stories/{story['id']}/tasks", headers=auth_headers)
        assert listed.json() == []

    async def test_deleting_story_deletes_tasks(self, client, auth_headers, project):
        story = await create_item(client, auth_headers, project["id"])
        task = (await client.post(
            f"/stories/{story['id']}/tasks", json={"name": "A", "priority": "minor"}, headers=auth_headers
        )).json()
        await client.delete(f"/stories/{story['id']}", headers=auth_headers)
        assert (await client.get(f"/tasks/{task['id']}", headers=auth_headers)).status_code == 404
