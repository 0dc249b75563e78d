# app/services/repository.py
"""
Entity repository - the single write path for users, vehicles, gates,
visitor passes and the access log.

One instance wraps one SQLAlchemy session (one request or one background job).
Every mutating call runs inside transaction(): nested blocks join the outer one,
the outermost block commits and then fires the on_commit() callbacks. On any
failure the session is rolled back and the callbacks are dropped, so a gate
change and the log row describing it land together or not at all.
"""

import uuid
from contextlib import contextmanager
from typing import Callable, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import (
    ConflictError,
    ImmutableRecordError,
    StorageError,
    ValidationError,
)
from app.models.access_log import AccessLog
from app.models.gate import Gate
from app.models.user import User
from app.models.vehicle import Vehicle
from app.models.visitor import Visitor
from app.utils.clock import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)

MODELS = {
    "user": User,
    "vehicle": Vehicle,
    "gate": Gate,
    "access_log": AccessLog,
    "visitor": Visitor,
}

UNIQUE_FIELDS = {
    "user": ("username",),
    "vehicle": ("license_plate", "rfid_tag", "qr_code"),
    "visitor": ("qr_code",),
}

# Generated credentials and identity columns never change after create()
READ_ONLY_FIELDS = {
    "user": {"id", "created_at"},
    "vehicle": {"id", "created_at", "rfid_tag", "qr_code"},
    "gate": {"id", "created_at", "last_activity"},
    "visitor": {"id", "created_at", "qr_code"},
}

DELETABLE_KINDS = {"user", "vehicle"}

_FIELD_LABELS = {
    "username": "Username",
    "license_plate": "License plate",
    "rfid_tag": "RFID tag",
    "qr_code": "QR code",
}


class EntityRepository:
    def __init__(self, db: Session, clock: Callable = utcnow):
        self.db = db
        self.clock = clock
        self._depth = 0
        self._after_commit: list = []

    # ── Units of work ─────────────────────────────────────────────────────

    @contextmanager
    def transaction(self):
        outermost = self._depth == 0
        self._depth += 1
        try:
            yield self
            if outermost:
                self.db.commit()
        except IntegrityError as e:
            if outermost:
                self._abort()
            if _is_unique_violation(e):
                raise ConflictError("Record conflicts with an existing one") from e
            raise ValidationError("Record is missing a required value") from e
        except SQLAlchemyError as e:
            if outermost:
                self._abort()
            logger.error(f"Storage failure, unit of work rolled back: {e}", exc_info=True)
            raise StorageError("Storage operation failed") from e
        except Exception:
            if outermost:
                self._abort()
            raise
        finally:
            self._depth -= 1

        if outermost:
            callbacks, self._after_commit = self._after_commit, []
            for callback in callbacks:
                callback()

    def on_commit(self, callback: Callable[[], None]):
        """Run callback once the enclosing transaction has committed."""
        if self._depth == 0:
            callback()
        else:
            self._after_commit.append(callback)

    def _abort(self):
        self._after_commit.clear()
        self.db.rollback()

    @contextmanager
    def _reading(self):
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Storage failure on read: {e}", exc_info=True)
            raise StorageError("Storage operation failed") from e

    # ── Generic CRUD ──────────────────────────────────────────────────────

    def get(self, kind: str, entity_id: Optional[str]):
        if not entity_id:
            return None
        with self._reading():
            return self.db.get(_model(kind), entity_id)

    def find(self, kind: str, **criteria) -> list:
        model = _model(kind)
        with self._reading():
            return _ordered(kind, self.db.query(model).filter_by(**criteria)).all()

    def find_one(self, kind: str, **criteria):
        model = _model(kind)
        with self._reading():
            return _ordered(kind, self.db.query(model).filter_by(**criteria)).first()

    def list(self, kind: str) -> list:
        return self.find(kind)

    def create(self, kind: str, fields: dict):
        model = _model(kind)
        values = {k: v for k, v in fields.items() if k != "id"}
        entity_id = str(uuid.uuid4())
        now = self.clock()

        if kind == "vehicle":
            values["qr_code"] = f"QR-{entity_id}"
            values["rfid_tag"] = self._new_rfid_tag()
            values.setdefault("is_active", True)
        elif kind == "visitor":
            values["qr_code"] = f"VISITOR-{entity_id}"
            values.setdefault("is_active", True)
        elif kind == "gate":
            values.setdefault("is_open", False)
            values["last_activity"] = now
        if kind == "access_log":
            values["timestamp"] = now
        else:
            values.setdefault("created_at", now)

        self._check_unique(kind, values)
        entity = model(id=entity_id, **values)
        with self.transaction():
            self.db.add(entity)
            self.db.flush()
        return entity

    def update(self, kind: str, entity_id: str, fields: dict):
        if kind == "access_log":
            raise ImmutableRecordError("Access logs cannot be modified")
        entity = self.get(kind, entity_id)
        if entity is None:
            return None

        read_only = READ_ONLY_FIELDS.get(kind, {"id"})
        changes = {k: v for k, v in fields.items() if k not in read_only}
        columns = type(entity).__table__.columns
        for key, value in changes.items():
            if key not in columns:
                raise ValidationError(f"Unknown {kind} field: {key}")
            if value is None and not columns[key].nullable:
                raise ValidationError(f"{kind} field {key} cannot be cleared")
        self._check_unique(kind, changes, exclude_id=entity_id)

        with self.transaction():
            for key, value in changes.items():
                setattr(entity, key, value)
            if kind == "gate":
                entity.last_activity = self.clock()
            self.db.flush()
        return entity

    def delete(self, kind: str, entity_id: str) -> bool:
        if kind == "access_log":
            raise ImmutableRecordError("Access logs cannot be deleted")
        if kind not in DELETABLE_KINDS:
            raise ValidationError(f"Deleting {kind} records is not supported")
        entity = self.get(kind, entity_id)
        if entity is None:
            return False
        with self.transaction():
            self.db.delete(entity)
            self.db.flush()
        return True

    # ── Lookups ───────────────────────────────────────────────────────────

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.find_one("user", username=username)

    def get_vehicle_by_plate(self, plate: str) -> Optional[Vehicle]:
        return self.find_one("vehicle", license_plate=plate)

    def get_vehicle_by_qr_code(self, code: str) -> Optional[Vehicle]:
        return self.find_one("vehicle", qr_code=code)

    def get_vehicle_by_rfid(self, tag: str) -> Optional[Vehicle]:
        return self.find_one("vehicle", rfid_tag=tag)

    def get_visitor_by_qr_code(self, code: str) -> Optional[Visitor]:
        return self.find_one("visitor", qr_code=code)

    def first_online_gate(self) -> Optional[Gate]:
        return self.find_one("gate", status="online")

    # ── Joined reads for the API ──────────────────────────────────────────

    def gates_with_officers(self) -> list:
        gates = self.list("gate")
        officers = self._index(User, {g.assigned_officer for g in gates})
        for gate in gates:
            gate.officer = officers.get(gate.assigned_officer)
        return gates

    def access_logs_with_details(self, limit: Optional[int] = None, user_id: Optional[str] = None) -> list:
        with self._reading():
            q = self.db.query(AccessLog)
            if user_id:
                q = q.filter(or_(AccessLog.user_id == user_id, AccessLog.processed_by == user_id))
            q = q.order_by(AccessLog.timestamp.desc(), AccessLog.id)
            if limit:
                q = q.limit(limit)
            logs = q.all()
        return self.attach_details(logs)

    def attach_details(self, logs: list) -> list:
        vehicles = self._index(Vehicle, {l.vehicle_id for l in logs})
        users = self._index(User, {l.user_id for l in logs} | {l.processed_by for l in logs})
        gates = self._index(Gate, {l.gate_id for l in logs})
        visitors = self._index(Visitor, {l.visitor_id for l in logs})
        for log in logs:
            log.vehicle = vehicles.get(log.vehicle_id)
            log.user = users.get(log.user_id)
            log.gate = gates.get(log.gate_id)
            log.visitor = visitors.get(log.visitor_id)
            log.processed_by_user = users.get(log.processed_by)
        return logs

    # ── Internals ─────────────────────────────────────────────────────────

    def _index(self, model, ids) -> dict:
        ids = {i for i in ids if i}
        if not ids:
            return {}
        with self._reading():
            rows = self.db.query(model).filter(model.id.in_(ids)).all()
        return {row.id: row for row in rows}

    def _check_unique(self, kind: str, values: dict, exclude_id: Optional[str] = None):
        model = _model(kind)
        for field in UNIQUE_FIELDS.get(kind, ()):
            value = values.get(field)
            if value is None:
                continue
            q = self.db.query(model).filter(getattr(model, field) == value)
            if exclude_id:
                q = q.filter(model.id != exclude_id)
            with self._reading():
                taken = q.first() is not None
            if taken:
                raise ConflictError(f"{_FIELD_LABELS[field]} '{value}' is already registered")

    def _new_rfid_tag(self) -> str:
        while True:
            tag = f"RFID-{uuid.uuid4().hex[:8].upper()}"
            if self.get_vehicle_by_rfid(tag) is None:
                return tag


def _model(kind: str):
    try:
        return MODELS[kind]
    except KeyError:
        raise ValueError(f"Unknown entity kind: {kind}")


def _is_unique_violation(error: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed", Postgres: "duplicate key value violates unique constraint"
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


def _ordered(kind: str, query):
    model = MODELS[kind]
    if kind == "access_log":
        return query.order_by(model.timestamp.desc(), model.id)
    return query.order_by(model.created_at, model.id)
