"""Integration tests for plan endpoints."""
import pytest


def plan_form(**overrides):
    form = {
        "netWorth": "15000",
        "savingsRate": "20",
        "totalDebt": "1000",
        "monthlyNetSalary": "2000",
        "currency": "USD",
        "isFirstPlan": "true",
        "goal-1-name": "Car",
        "goal-1-description": "",
        "goal-1-targetAmount": "20000",
        "goal-1-currentAmount": "5000",
        "goal-1-targetDate": "2025-01-01",
        "goal-2-name": "House",
        "goal-2-targetAmount": "90000",
        "goal-2-currentAmount": "0",
        "goal-2-targetDate": "2030-01-01",
    }
    form.update(overrides)
    return form


@pytest.mark.asyncio
class TestGeneratePlan:
    """Tests for POST /plans/generate."""

    async def test_generate_from_form(self, app_client, signup, fake_generator):
        """Test a form submission produces a stored plan and First Planner."""
        headers = await signup()

        response = await app_client.post("/plans/generate", data=plan_form(), headers=headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "success"
        assert data["plan"] == fake_generator.plan_text
        assert data["keyMetrics"]["debtToIncome"] == 50
        assert [goal["name"] for goal in data["goals"]] == ["Car", "House"]
        assert data["newAchievement"]["code"] == "first_planner"
        assert data["newAchievement"]["title"] == "First Planner"
        assert fake_generator.prompts[0].age == 35

        plans = (await app_client.get("/plans", headers=headers)).json()
        assert len(plans) == 1
        assert plans[0]["id"] == data["planId"]
        assert plans[0]["saved"] is False

    async def test_second_generation_awards_planner(self, app_client, signup):
        headers = await signup()
        await app_client.post("/plans/generate", data=plan_form(), headers=headers)

        response = await app_client.post(
            "/plans/generate", data=plan_form(isFirstPlan="false"), headers=headers
        )

        assert response.json()["newAchievement"]["code"] == "planner"
        achievements = (await app_client.get("/achievements", headers=headers)).json()
        assert sorted(a["code"] for a in achievements) == ["first_planner", "planner"]

    async def test_generate_from_json(self, app_client, signup):
        headers = await signup()
        body = {
            "netWorth": 0,
            "savingsRate": 5,
            "totalDebt": 0,
            "monthlyNetSalary": 1500,
            "currency": "KES",
            "title": "Emergency plan",
            "goals": [
                {"name": "Emergency fund", "targetAmount": 3000, "currentAmount": 0,
                 "targetDate": "2026-06-30"},
            ],
        }

        response = await app_client.post("/plans/generate", json=body, headers=headers)

        assert response.status_code == 201
        assert response.json()["currency"] == "KES"
        plan = (await app_client.get(f"/plans/{response.json()['planId']}", headers=headers)).json()
        assert plan["title"] == "Emergency plan"

    async def test_current_above_target_rejected(self, app_client, signup):
        """Test the cross-field rule surfaces on currentAmount and nothing is stored."""
        headers = await signup()

        response = await app_client.post(
            "/plans/generate",
            data=plan_form(**{"goal-1-currentAmount": "25000"}),
            headers=headers,
        )

        assert response.status_code == 422
        data = response.json()
        assert data["status"] == "invalid"
        assert "goals.0.currentAmount" in data["errors"]["fieldErrors"]
        assert (await app_client.get("/plans", headers=headers)).json() == []

    async def test_ai_empty_response(self, app_client, signup, fake_generator):
        headers = await signup()
        fake_generator.plan_text = ""

        response = await app_client.post("/plans/generate", data=plan_form(), headers=headers)

        assert response.status_code == 502
        assert response.json()["status"] == "ai_failed"
        assert (await app_client.get("/plans", headers=headers)).json() == []
        assert (await app_client.get("/achievements", headers=headers)).json() == []

    async def test_not_configured(self, app_client, signup):
        from finroute.main import app
        from finroute.services.plan_generator import get_plan_generator

        headers = await signup()
        app.dependency_overrides[get_plan_generator] = lambda: None

        response = await app_client.post("/plans/generate", data=plan_form(), headers=headers)

        assert response.status_code == 503
        assert response.json()["status"] == "not_configured"

    async def test_unauthenticated_redirects(self, app_client, fake_generator):
        response = await app_client.post("/plans/generate", data=plan_form())

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert fake_generator.prompts == []


@pytest.mark.asyncio
class TestGoalEndpoints:
    """Tests for goal update and delete."""

    async def test_update_goal_round_trip(self, app_client, signup):
        """Test an updated amount shows up in the next dashboard snapshot."""
        headers = await signup()
        form = {
            "netWorth": "1000",
            "savingsRate": "10",
            "totalDebt": "0",
            "monthlyNetSalary": "3000",
            "goal-1-name": "Car",
            "goal-1-targetAmount": "20000",
            "goal-1-currentAmount": "5000",
            "goal-1-targetDate": "2025-01-01",
        }
        await app_client.post("/plans/generate", data=form, headers=headers)

        response = await app_client.patch(
            "/plans/goals",
            json={"goalName": "Car", "currentAmount": 7000},
            headers=headers,
        )

        assert response.status_code == 200
        dashboard = (await app_client.get("/dashboard", headers=headers)).json()
        car = dashboard["goals"][0]
        assert car["currentAmount"] == 7000
        assert car["targetAmount"] == 20000
        assert dashboard["allGoals"][0]["currentAmount"] == 7000

    async def test_update_above_target_rejected(self, app_client, signup):
        headers = await signup()
        generated = (await app_client.post("/plans/generate", data=plan_form(), headers=headers)).json()
        goal_id = generated["goals"][0]["id"]

        response = await app_client.patch(
            "/plans/goals",
            json={"goalId": goal_id, "currentAmount": 999999},
            headers=headers,
        )

        assert response.status_code == 400

    async def test_reaching_target_awards_achievement(self, app_client, signup):
        headers = await signup()
        generated = (await app_client.post("/plans/generate", data=plan_form(), headers=headers)).json()
        goal_id = generated["goals"][0]["id"]

        await app_client.patch(
            "/plans/goals",
            json={"goalId": goal_id, "planId": generated["planId"], "currentAmount": 20000},
            headers=headers,
        )

        achievements = (await app_client.get("/achievements", headers=headers)).json()
        assert "Goal Achieved: Car" in [a["title"] for a in achievements]

    async def test_delete_goal(self, app_client, signup):
        headers = await signup()
        await app_client.post("/plans/generate", data=plan_form(), headers=headers)

        response = await app_client.request(
            "DELETE", "/plans/goals", json={"goalName": "Car"}, headers=headers
        )

        assert response.status_code == 200
        assert [goal["name"] for goal in response.json()["goals"]] == ["House"]

    async def test_goal_reference_required(self, app_client, signup):
        headers = await signup()

        response = await app_client.patch(
            "/plans/goals", json={"currentAmount": 10}, headers=headers
        )

        assert response.status_code == 422

    async def test_update_without_plan(self, app_client, signup):
        headers = await signup()

        response = await app_client.patch(
            "/plans/goals", json={"goalName": "Car", "currentAmount": 10}, headers=headers
        )

        assert response.status_code == 404


@pytest.mark.asyncio
class TestPlanHistory:
    """Tests for plan listing and the saved flag."""

    async def test_toggle_saved(self, app_client, signup):
        headers = await signup()
        generated = (await app_client.post("/plans/generate", data=plan_form(), headers=headers)).json()

        response = await app_client.patch(
            f"/plans/{generated['planId']}/saved", json={"saved": True}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["saved"] is True

    async def test_other_users_plan_not_found(self, app_client, signup):
        owner = await signup("owner@example.com")
        other = await signup("other@example.com")
        generated = (await app_client.post("/plans/generate", data=plan_form(), headers=owner)).json()

        response = await app_client.get(f"/plans/{generated['planId']}", headers=other)

        assert response.status_code == 404


@pytest.mark.asyncio
class TestMalformedInput:
    """Tests that malformed numbers and bodies come back as client errors."""

    async def test_infinite_debt_from_form(self, app_client, signup):
        headers = await signup()

        response = await app_client.post(
            "/plans/generate", data=plan_form(totalDebt="inf"), headers=headers
        )

        assert response.status_code == 422
        assert response.json()["status"] == "invalid"
        assert "totalDebt" in response.json()["errors"]["fieldErrors"]
        assert (await app_client.get("/plans", headers=headers)).json() == []

    async def test_infinite_target_from_json_stores_nothing(self, app_client, signup):
        headers = await signup()
        body = (
            '{"netWorth": 0, "savingsRate": 5, "totalDebt": 0, "monthlyNetSalary": 1500,'
            ' "goals": [{"name": "Car", "targetAmount": Infinity, "currentAmount": 0,'
            ' "targetDate": "2026-06-30"}]}'
        )

        response = await app_client.post(
            "/plans/generate",
            content=body,
            headers={**headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 422
        assert "goals.0.targetAmount" in response.json()["errors"]["fieldErrors"]
        dashboard = (await app_client.get("/dashboard", headers=headers)).json()
        assert dashboard["plansCount"] == 0
        assert (await app_client.get("/achievements", headers=headers)).json() == []

    async def test_undecodable_json_body(self, app_client, signup):
        headers = await signup()

        response = await app_client.post(
            "/plans/generate",
            content=b'{"netWorth": "\xff"}',
            headers={**headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["status"] == "invalid"
        assert data["errors"]["formErrors"]

    async def test_nan_goal_update_rejected(self, app_client, signup):
        headers = await signup()
        await app_client.post("/plans/generate", data=plan_form(), headers=headers)

        response = await app_client.patch(
            "/plans/goals",
            content='{"goalName": "Car", "currentAmount": NaN}',
            headers={**headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 422
        dashboard = (await app_client.get("/dashboard", headers=headers)).json()
        assert dashboard["goals"][0]["currentAmount"] == 5000
