"""Tests for the manager and employee dashboards."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_manager_stats(async_client: AsyncClient, team, auth_headers):
    await async_client.post(
        "/api/checkin", json={"client_id": team.abc.id}, headers=auth_headers(team.rahul)
    )
    resp = await async_client.get("/api/dashboard/stats", headers=auth_headers(team.manager))
    assert resp.status_code == 200
    data = resp.json()
    assert data["team_size"] == 3
    assert {m["name"] for m in data["team_members"]} == {
        "Rahul Kumar", "Priya Singh", "Vikram Patel"
    }
    assert data["active_checkins"] == 1
    assert len(data["today_checkins"]) == 1
    assert data["today_checkins"][0]["employee_name"] == "Rahul Kumar"
    assert data["today_checkins"][0]["client_name"] == "ABC Corp"


@pytest.mark.asyncio
async def test_manager_stats_forbidden_for_employee(async_client: AsyncClient, team, auth_headers):
    resp = await async_client.get("/api/dashboard/stats", headers=auth_headers(team.priya))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Manager privileges required"


@pytest.mark.asyncio
async def test_chart_data(async_client: AsyncClient, team, add_checkin, auth_headers):
    now = datetime.now(timezone.utc)
    await add_checkin(team.priya, team.xyz, now - timedelta(days=30), now - timedelta(days=30))
    await async_client.post(
        "/api/checkin", json={"client_id": team.xyz.id}, headers=auth_headers(team.rahul)
    )

    resp = await async_client.get("/api/dashboard/stats/charts", headers=auth_headers(team.manager))
    assert resp.status_code == 200
    assert resp.headers["cache-control"] == "private, max-age=60"
    data = resp.json()

    days = data["checkins_last_7_days"]
    assert len(days) == 7
    assert days[-1]["date"] == now.date().isoformat()
    assert sum(d["count"] for d in days) == 1

    per_member = {m["name"]: m["count"] for m in data["checkins_per_member_last_7_days"]}
    assert per_member == {"Rahul Kumar": 1, "Priya Singh": 0, "Vikram Patel": 0}
    assert data["checkins_per_member_last_7_days"][0]["name"] == "Rahul Kumar"

    active = {m["name"]: m["active_count"] for m in data["active_checkins_per_member"]}
    assert active["Rahul Kumar"] == 1
    assert active["Priya Singh"] == 0


@pytest.mark.asyncio
async def test_employee_dashboard(async_client: AsyncClient, team, auth_headers):
    headers = auth_headers(team.rahul)
    await async_client.post("/api/checkin", json={"client_id": team.abc.id}, headers=headers)

    resp = await async_client.get("/api/dashboard/employee", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["today_checkins"]) == 1
    assert [c["name"] for c in data["assigned_clients"]] == ["ABC Corp", "XYZ Ltd"]
    assert data["week_stats"] == {"total_checkins": 1, "unique_clients": 1}


@pytest.mark.asyncio
async def test_employee_dashboard_ignores_old_visits(async_client: AsyncClient, team, add_checkin, auth_headers):
    old = datetime.now(timezone.utc) - timedelta(days=10)
    await add_checkin(team.priya, team.xyz, old, old + timedelta(hours=1))

    resp = await async_client.get("/api/dashboard/employee", headers=auth_headers(team.priya))
    data = resp.json()
    assert data["today_checkins"] == []
    assert data["week_stats"] == {"total_checkins": 0, "unique_clients": 0}
