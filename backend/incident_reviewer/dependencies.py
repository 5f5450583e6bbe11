"""FastAPI dependencies that hand the application's services to routes.

The services are built once by ``create_app`` and kept on ``app.state``.
Tests swap them with ``app.dependency_overrides``.
"""

from fastapi import Request

from incident_reviewer.services import CauseService, ReviewService, TriggerService


def get_cause_service(request: Request) -> CauseService:
    return request.app.state.cause_service


def get_trigger_service(request: Request) -> TriggerService:
    return request.app.state.trigger_service


def get_review_service(request: Request) -> ReviewService:
    return request.app.state.review_service
