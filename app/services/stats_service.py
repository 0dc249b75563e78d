# app/services/stats_service.py
"""
Dashboard counters and traffic reports, aggregated from the access log.
Day boundaries are UTC.
"""

from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.access_log import AccessLog
from app.models.gate import Gate
from app.models.user import User
from app.models.vehicle import Vehicle
from app.models.visitor import Visitor
from app.utils.clock import utcnow

REPORT_PERIODS = {"day": 1, "week": 7, "month": 30}


def _count(db: Session, *criteria, model=AccessLog) -> int:
    return db.query(func.count(model.id)).filter(*criteria).scalar() or 0


def get_dashboard_stats(db: Session, now: datetime = None) -> dict:
    now = now or utcnow()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    today = AccessLog.timestamp >= midnight

    return {
        "total_users": _count(db, model=User),
        "total_vehicles": _count(db, model=Vehicle),
        "active_vehicles": _count(db, Vehicle.is_active.is_(True), model=Vehicle),
        "total_gates": _count(db, model=Gate),
        "active_gates": _count(db, Gate.status == "online", model=Gate),
        "open_gates": _count(db, Gate.is_open.is_(True), model=Gate),
        "today_access": _count(db, today, AccessLog.status == "authorized"),
        "today_denied": _count(db, today, AccessLog.status == "denied"),
        "today_overrides": _count(db, today, AccessLog.status == "manual_override"),
        "active_visitors": _count(db, Visitor.is_active.is_(True), Visitor.valid_from <= now,
                                  Visitor.valid_until >= now, model=Visitor),
    }


def get_user_stats(db: Session, user_id: str) -> dict:
    mine = AccessLog.user_id == user_id
    last = (
        db.query(AccessLog.timestamp)
        .filter(mine, AccessLog.status == "authorized")
        .order_by(AccessLog.timestamp.desc())
        .first()
    )
    return {
        "total_access": _count(db, mine, AccessLog.status == "authorized"),
        "denied_access": _count(db, mine, AccessLog.status == "denied"),
        "vehicle_count": _count(db, Vehicle.user_id == user_id, model=Vehicle),
        "last_access": last[0] if last else None,
    }


def get_traffic_report(db: Session, period: str = "week", now: datetime = None) -> dict:
    """Hourly pattern, daily totals, per-gate usage and status split for the period."""
    now = now or utcnow()
    days = REPORT_PERIODS.get(period, REPORT_PERIODS["week"])
    first_day = (now - timedelta(days=days - 1)).replace(hour=0, minute=0, second=0, microsecond=0)

    logs = db.query(AccessLog).filter(AccessLog.timestamp >= first_day).all()

    hourly = [{"hour": f"{h:02d}:00", "entries": 0, "exits": 0} for h in range(24)]
    daily = {(first_day + timedelta(days=i)).date(): 0 for i in range(days)}
    per_gate: dict = {}
    statuses = {"authorized": 0, "denied": 0, "manual_override": 0}

    for log in logs:
        statuses[log.status] = statuses.get(log.status, 0) + 1
        if log.status == "denied":
            continue
        slot = hourly[log.timestamp.hour]
        slot["entries" if log.action == "entry" else "exits"] += 1
        day = log.timestamp.date()
        if day in daily:
            daily[day] += 1
        if log.gate_id:
            per_gate[log.gate_id] = per_gate.get(log.gate_id, 0) + 1

    gate_names = {g.id: g.name for g in db.query(Gate).all()}
    return {
        "period": period if period in REPORT_PERIODS else "week",
        "hourly_traffic": hourly,
        "daily_traffic": [{"date": d.strftime("%b %d"), "total": n} for d, n in daily.items()],
        "gate_usage": [{"gate": gate_names.get(gid, gid), "count": n}
                       for gid, n in sorted(per_gate.items(), key=lambda kv: -kv[1])],
        "status_distribution": [{"status": s, "count": n} for s, n in statuses.items()],
    }
