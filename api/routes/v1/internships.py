"""
api/routes/v1/internships.py -- Internship listing routes.

Routes:
  GET    /internship                  -- list all listings
  GET    /internship/{internship_id}  -- one listing
  POST   /internship                  -- create (Admin)
  PUT    /internship/{internship_id}  -- full overwrite (Admin)
  DELETE /internship/{internship_id}  -- delete (Admin); blocked while applications exist

Company names are unique. A duplicate on create or rename returns 400.
"""

from fastapi import APIRouter, Depends, Request

from api.models import InternshipRequest, InternshipResponse, MessageResponse
from api.results import unwrap
from auth.dependencies import get_current_user, require_admin
from internships.service import InternshipService

# Every route requires authentication; writes additionally require Admin.
router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/internship", response_model=list[InternshipResponse])
def list_internships(request: Request) -> list[InternshipResponse]:
    service: InternshipService = request.app.state.internship_service
    return [InternshipResponse.from_domain(i) for i in service.get_all()]


@router.get("/internship/{internship_id}", response_model=InternshipResponse)
def get_internship(request: Request, internship_id: int) -> InternshipResponse:
    service: InternshipService = request.app.state.internship_service
    return InternshipResponse.from_domain(unwrap(service.get_by_id(internship_id)))


@router.post("/internship", response_model=InternshipResponse, dependencies=[Depends(require_admin)])
def add_internship(request: Request, body: InternshipRequest) -> InternshipResponse:
    """Publish a new listing. 400 if the company already has one."""
    service: InternshipService = request.app.state.internship_service
    return InternshipResponse.from_domain(unwrap(service.add(body.to_domain())))


@router.put(
    "/internship/{internship_id}",
    response_model=InternshipResponse,
    dependencies=[Depends(require_admin)],
)
def update_internship(request: Request, internship_id: int, body: InternshipRequest) -> InternshipResponse:
    """Overwrite every field of a listing. 404 if it does not exist."""
    service: InternshipService = request.app.state.internship_service
    return InternshipResponse.from_domain(unwrap(service.update(internship_id, body.to_domain())))


@router.delete(
    "/internship/{internship_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_internship(request: Request, internship_id: int) -> MessageResponse:
    """Remove a listing. 400 while applications still reference it, 404 if absent."""
    service: InternshipService = request.app.state.internship_service
    unwrap(service.delete(internship_id))
    return MessageResponse(message="Internship deleted.")
