"""
api/routes/v1/feedback.py -- User feedback routes.

Routes:
  GET    /feedback                    -- list all
  GET    /feedback/user/{user_id}     -- by author (empty list is a normal 200)
  POST   /feedback                    -- submit
  PUT    /feedback/{feedback_id}      -- overwrite text and date
  DELETE /feedback/{feedback_id}      -- remove

Non-admin callers can only submit, edit or remove their own feedback.
"""

from fastapi import APIRouter, Depends, Request

from api.models import FeedbackCreate, FeedbackResponse, FeedbackUpdate, MessageResponse
from api.results import unwrap
from auth.dependencies import get_current_user, require_owner_or_admin
from auth.models import TokenClaims
from internships.models import Feedback
from internships.service import FeedbackService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/feedback", response_model=list[FeedbackResponse])
def list_feedback(request: Request) -> list[FeedbackResponse]:
    service: FeedbackService = request.app.state.feedback_service
    return [FeedbackResponse.from_domain(f) for f in service.get_all()]


@router.get("/feedback/user/{user_id}", response_model=list[FeedbackResponse])
def list_feedback_by_user(request: Request, user_id: int) -> list[FeedbackResponse]:
    service: FeedbackService = request.app.state.feedback_service
    return [FeedbackResponse.from_domain(f) for f in service.get_by_user_id(user_id)]


@router.post("/feedback", response_model=FeedbackResponse)
def add_feedback(
    request: Request,
    body: FeedbackCreate,
    current_user: TokenClaims = Depends(get_current_user),
) -> FeedbackResponse:
    require_owner_or_admin(current_user, body.user_id, "Cannot post feedback as another user.")
    service: FeedbackService = request.app.state.feedback_service
    feedback = Feedback(user_id=body.user_id, feedback_text=body.feedback_text, date=body.date.isoformat())
    return FeedbackResponse.from_domain(unwrap(service.add(feedback)))


@router.put("/feedback/{feedback_id}", response_model=FeedbackResponse)
def update_feedback(
    request: Request,
    feedback_id: int,
    body: FeedbackUpdate,
    current_user: TokenClaims = Depends(get_current_user),
) -> FeedbackResponse:
    service: FeedbackService = request.app.state.feedback_service
    existing = unwrap(service.get_by_id(feedback_id))
    require_owner_or_admin(current_user, existing.user_id, "Cannot edit another user's feedback.")
    changes = Feedback(user_id=existing.user_id, feedback_text=body.feedback_text, date=body.date.isoformat())
    return FeedbackResponse.from_domain(unwrap(service.update(feedback_id, changes)))


@router.delete("/feedback/{feedback_id}", response_model=MessageResponse)
def delete_feedback(
    request: Request,
    feedback_id: int,
    current_user: TokenClaims = Depends(get_current_user),
) -> MessageResponse:
    service: FeedbackService = request.app.state.feedback_service
    existing = unwrap(service.get_by_id(feedback_id))
    require_owner_or_admin(current_user, existing.user_id, "Cannot remove another user's feedback.")
    unwrap(service.delete(feedback_id))
    return MessageResponse(message="Feedback deleted.")
