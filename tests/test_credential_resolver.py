"""Unit tests for credential resolution order."""

from unittest.mock import MagicMock

from app.services.credential_resolver import UNRESOLVED, VEHICLE, VISITOR, resolve_credential


class TestResolutionOrder:
    def test_qr_code_resolves_vehicle(self, repo, make_vehicle):
        vehicle = make_vehicle()
        result = resolve_credential(repo, vehicle.qr_code)
        assert result.kind == VEHICLE
        assert result.vehicle.id == vehicle.id
        assert result.auth_method == "qr_code"

    def test_rfid_tag_resolves_vehicle(self, repo, make_vehicle):
        vehicle = make_vehicle()
        result = resolve_credential(repo, vehicle.rfid_tag)
        assert result.kind == VEHICLE
        assert result.auth_method == "rfid"

    def test_visitor_qr_code_resolves_visitor(self, repo, make_visitor):
        visitor = make_visitor()
        result = resolve_credential(repo, visitor.qr_code)
        assert result.kind == VISITOR
        assert result.visitor.id == visitor.id
        assert result.auth_method == "qr_code"

    def test_unknown_code_is_unresolved(self, repo, make_vehicle):
        make_vehicle()
        result = resolve_credential(repo, "XYZ-000")
        assert result.kind == UNRESOLVED
        assert not result.resolved
        assert result.vehicle is None and result.visitor is None

    def test_qr_match_beats_colliding_rfid(self, repo, db, make_vehicle):
        owner_of_qr = make_vehicle("QRC-001")
        owner_of_rfid = make_vehicle("RFD-002")
        # Force vehicle B's RFID tag to equal vehicle A's QR code
        owner_of_rfid.rfid_tag = owner_of_qr.qr_code
        db.commit()

        result = resolve_credential(repo, owner_of_qr.qr_code)
        assert result.vehicle.license_plate == "QRC-001"
        assert result.auth_method == "qr_code"

    def test_vehicle_beats_colliding_visitor_pass(self, repo, db, make_vehicle, make_visitor):
        vehicle = make_vehicle()
        visitor = make_visitor()
        visitor.qr_code = vehicle.rfid_tag
        db.commit()

        result = resolve_credential(repo, vehicle.rfid_tag)
        assert result.kind == VEHICLE
        assert result.auth_method == "rfid"


class TestLookupShortCircuit:
    def test_stops_after_qr_match(self):
        repo = MagicMock()
        repo.get_vehicle_by_qr_code.return_value = MagicMock()

        resolve_credential(repo, "QR-1")

        repo.get_vehicle_by_rfid.assert_not_called()
        repo.get_visitor_by_qr_code.assert_not_called()

    def test_checks_every_index_before_giving_up(self):
        repo = MagicMock()
        repo.get_vehicle_by_qr_code.return_value = None
        repo.get_vehicle_by_rfid.return_value = None
        repo.get_visitor_by_qr_code.return_value = None

        result = resolve_credential(repo, "nope")

        assert result.kind == UNRESOLVED
        repo.get_vehicle_by_qr_code.assert_called_once_with("nope")
        repo.get_vehicle_by_rfid.assert_called_once_with("nope")
        repo.get_visitor_by_qr_code.assert_called_once_with("nope")
