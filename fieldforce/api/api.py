"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from fieldforce.api.endpoints import auth, checkin, clients, dashboard, reports

api_router = APIRouter()

# Login, logout, team accounts
api_router.include_router(auth.router)

# Clients and assignments
api_router.include_router(clients.router)

# Check-in / checkout / history
api_router.include_router(checkin.router)

# Manager and employee dashboards
api_router.include_router(dashboard.router)

# Daily summary, health
api_router.include_router(reports.router)
