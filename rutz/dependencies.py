# Filename: rutz/dependencies.py
# Request-scoped dependencies shared by the routers.

from fastapi import Request

from rutz.storage import IStorage


def get_storage(request: Request) -> IStorage:
    return request.app.state.storage


def get_session_id(request: Request) -> str:
    # set by the session cookie middleware in rutz.main
    return request.state.session_id
