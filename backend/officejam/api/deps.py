"""Dependencies exposing the components built at startup"""
from fastapi import Request

from officejam.services.metadata_resolver import MetadataResolver
from officejam.services.queue_engine import QueueEngine
from officejam.services.queue_store import QueueStore


def get_engine(request: Request) -> QueueEngine:
    return request.app.state.engine


def get_store(request: Request) -> QueueStore:
    return request.app.state.store


def get_resolver(request: Request) -> MetadataResolver:
    return request.app.state.resolver
