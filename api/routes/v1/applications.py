"""
api/routes/v1/applications.py -- Internship application routes.

Routes (in registration order to avoid FastAPI path capture conflicts):
  GET    /internship-application                       -- list all
  GET    /internship-application/user/{user_id}        -- by applicant; 404 when none
  GET    /internship-application/{application_id}      -- one application
  POST   /internship-application                       -- apply
  PUT    /internship-application/{application_id}      -- overwrite mutable fields
  DELETE /internship-application/{application_id}      -- withdraw

A user may apply to a given internship once; a second attempt returns 400.
Non-admin callers can only submit, change or withdraw their own applications.
"""

from fastapi import APIRouter, Depends, Request

from api.models import ApplicationCreate, ApplicationResponse, ApplicationUpdate, MessageResponse
from api.results import unwrap
from auth.dependencies import get_current_user, require_owner_or_admin
from auth.models import TokenClaims
from internships.models import InternshipApplication
from internships.service import ApplicationService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/internship-application", response_model=list[ApplicationResponse])
def list_applications(request: Request) -> list[ApplicationResponse]:
    service: ApplicationService = request.app.state.application_service
    return [ApplicationResponse.from_domain(a) for a in service.get_all()]


@router.get("/internship-application/user/{user_id}", response_model=list[ApplicationResponse])
def list_applications_by_user(request: Request, user_id: int) -> list[ApplicationResponse]:
    """Applications submitted by one user. An empty result is a 404."""
    service: ApplicationService = request.app.state.application_service
    return [ApplicationResponse.from_domain(a) for a in unwrap(service.get_by_user_id(user_id))]


@router.get("/internship-application/{application_id}", response_model=ApplicationResponse)
def get_application(request: Request, application_id: int) -> ApplicationResponse:
    service: ApplicationService = request.app.state.application_service
    return ApplicationResponse.from_domain(unwrap(service.get_by_id(application_id)))


@router.post("/internship-application", response_model=ApplicationResponse)
def add_application(
    request: Request,
    body: ApplicationCreate,
    current_user: TokenClaims = Depends(get_current_user),
) -> ApplicationResponse:
    """Apply to an internship. 400 if this user already applied to it."""
    require_owner_or_admin(current_user, body.user_id, "Cannot apply on behalf of another user.")
    service: ApplicationService = request.app.state.application_service
    return ApplicationResponse.from_domain(unwrap(service.add(body.to_domain())))


@router.put("/internship-application/{application_id}", response_model=ApplicationResponse)
def update_application(
    request: Request,
    application_id: int,
    body: ApplicationUpdate,
    current_user: TokenClaims = Depends(get_current_user),
) -> ApplicationResponse:
    """Overwrite university, degree, resume, profile link and status.

    user_id, internship_id and application_date cannot change after submission.
    """
    service: ApplicationService = request.app.state.application_service
    existing = unwrap(service.get_by_id(application_id))
    require_owner_or_admin(current_user, existing.user_id, "Cannot change another user's application.")
    changes = InternshipApplication(
        user_id=existing.user_id,
        internship_id=existing.internship_id,
        university_name=body.university_name,
        degree_program=body.degree_program,
        resume=body.resume,
        linkedin_profile=body.linkedin_profile,
        application_status=body.application_status,
        application_date=existing.application_date,
    )
    return ApplicationResponse.from_domain(unwrap(service.update(application_id, changes)))


@router.delete("/internship-application/{application_id}", response_model=MessageResponse)
def delete_application(
    request: Request,
    application_id: int,
    current_user: TokenClaims = Depends(get_current_user),
) -> MessageResponse:
    service: ApplicationService = request.app.state.application_service
    existing = unwrap(service.get_by_id(application_id))
    require_owner_or_admin(current_user, existing.user_id, "Cannot withdraw another user's application.")
    unwrap(service.delete(application_id))
    return MessageResponse(message="Internship application deleted.")
