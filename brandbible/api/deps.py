"""Request-scoped access to components stored on the application."""

from fastapi import Request

from ..core import BrandGateway, BrandOrchestrator
from ..utils.config import PipelineConfig


def get_gateway(request: Request) -> BrandGateway:
    return request.app.state.gateway


def get_orchestrator(request: Request) -> BrandOrchestrator:
    return request.app.state.orchestrator


def get_pipeline(request: Request) -> PipelineConfig:
    return request.app.state.pipeline
