# app/schemas/stats.py
from datetime import datetime
from typing import Optional
from app.schemas.base import CamelModel


class StatsOut(CamelModel):
    total_users: int
    total_vehicles: int
    active_vehicles: int
    total_gates: int
    active_gates: int
    open_gates: int
    today_access: int
    today_denied: int
    today_overrides: int
    active_visitors: int


class MyStatsOut(CamelModel):
    total_access: int
    denied_access: int
    vehicle_count: int
    last_access: Optional[datetime]


class HourlyTraffic(CamelModel):
    hour: str
    entries: int
    exits: int


class DailyTraffic(CamelModel):
    date: str
    total: int


class GateUsage(CamelModel):
    gate: str
    count: int


class StatusCount(CamelModel):
    status: str
    count: int


class ReportOut(CamelModel):
    period: str
    hourly_traffic: list[HourlyTraffic]
    daily_traffic: list[DailyTraffic]
    gate_usage: list[GateUsage]
    status_distribution: list[StatusCount]
