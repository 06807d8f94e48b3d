from fastapi import Request

from app.core.user_store import UserStore
from app.services.optimization_client import OptimizationClient
from app.services.resume_service import ResumeService


def get_resume_service(request: Request) -> ResumeService:
    return request.app.state.resume_service


def get_optimization_client(request: Request) -> OptimizationClient:
    return request.app.state.optimization_client


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store
