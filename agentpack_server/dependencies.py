"""FastAPI dependencies resolving the objects built at startup."""

from fastapi import Request

from agentpack.settings import Settings
from agentpack.storage import ConfigStore
from agentpack.templates import TemplateEngine


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ConfigStore:
    return request.app.state.store


def get_engine(request: Request) -> TemplateEngine:
    return request.app.state.engine
