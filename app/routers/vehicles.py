# app/routers/vehicles.py
"""Vehicle registration - each vehicle gets its QR code and RFID tag here."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_repository
from app.exceptions import NotFoundError, ValidationError
from app.schemas.vehicle import VehicleCreate, VehicleOut, VehicleUpdate
from app.services.repository import EntityRepository

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleOut], summary="List registered vehicles")
def list_vehicles(repo: EntityRepository = Depends(get_repository)):
    return repo.list("vehicle")


@router.get("/my-vehicles", response_model=list[VehicleOut], summary="Vehicles owned by a user")
def list_user_vehicles(user_id: Optional[str] = Query(None, alias="userId"),
                       repo: EntityRepository = Depends(get_repository)):
    if not user_id:
        raise ValidationError("User ID required")
    return repo.find("vehicle", user_id=user_id)


@router.post("/vehicles", response_model=VehicleOut, summary="Register a vehicle")
def register_vehicle(body: VehicleCreate, repo: EntityRepository = Depends(get_repository)):
    """Plate must be unique; the owner must exist. QR code and RFID tag are generated."""
    if repo.get("user", body.user_id) is None:
        raise NotFoundError("User not found")
    return repo.create("vehicle", body.model_dump())


@router.patch("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Update a vehicle")
def update_vehicle(vehicle_id: str, body: VehicleUpdate, repo: EntityRepository = Depends(get_repository)):
    vehicle = repo.update("vehicle", vehicle_id, body.model_dump(exclude_unset=True))
    if vehicle is None:
        raise NotFoundError("Vehicle not found")
    return vehicle


@router.delete("/vehicles/{vehicle_id}", summary="Remove a vehicle")
def remove_vehicle(vehicle_id: str, repo: EntityRepository = Depends(get_repository)):
    if not repo.delete("vehicle", vehicle_id):
        raise NotFoundError("Vehicle not found")
    return {"success": True}
