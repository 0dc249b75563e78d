# app/routers/visitors.py
"""Visitor pass registration and listing."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_repository
from app.exceptions import ValidationError
from app.schemas.visitor import VisitorCreate, VisitorOut
from app.services.repository import EntityRepository

router = APIRouter()


@router.get("/visitors", response_model=list[VisitorOut], summary="List visitor passes")
def list_visitors(repo: EntityRepository = Depends(get_repository)):
    return repo.list("visitor")


@router.get("/my-visitor-passes", response_model=list[VisitorOut], summary="Passes issued to an email address")
def list_visitor_passes(email: Optional[str] = None, repo: EntityRepository = Depends(get_repository)):
    if not email:
        raise ValidationError("Email required")
    return repo.find("visitor", email=email)


@router.post("/visitors/register", response_model=VisitorOut, summary="Register a visitor pass")
def register_visitor(body: VisitorCreate, repo: EntityRepository = Depends(get_repository)):
    """Issues a pass with a generated QR code, valid between validFrom and validUntil inclusive."""
    return repo.create("visitor", body.model_dump())
