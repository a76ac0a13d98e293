# Filename: rutz/main.py
# FastAPI application for the RÜTZ storefront API.
#  - create_app() wires CORS, the visitor session cookie, error bodies and routers
#  - the store is injected (tests) or built at startup from STORAGE_BACKEND
#  - every error body is {"message": ...}

from typing import Optional

from decouple import Csv, config
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rutz.database import make_engine
from rutz.database_storage import DatabaseStorage
from rutz.mem_storage import MemStorage
from rutz.routes import cart, catalog, impact, inventory, journey, learning, orders, plants, recommendations, users
from rutz.storage import IStorage
from rutz.utils import logger, new_id

STORAGE_BACKEND = config("STORAGE_BACKEND", default="memory")
SESSION_COOKIE_NAME = config("SESSION_COOKIE_NAME", default="rutz_sid")
CORS_ORIGINS = config("CORS_ORIGINS", default="http://localhost:5000,http://localhost:5173", cast=Csv())


def build_storage(backend: Optional[str] = None) -> IStorage:
    backend = backend or STORAGE_BACKEND
    if backend == "memory":
        return MemStorage()
    if backend == "database":
        storage = DatabaseStorage(make_engine())
        storage.initialize()
        return storage
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")


def create_app(storage: Optional[IStorage] = None) -> FastAPI:
    app = FastAPI(title="RÜTZ Botanicals API")
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def visitor_session(request: Request, call_next):
        session_id = request.cookies.get(SESSION_COOKIE_NAME)
        issued = not session_id
        if issued:
            session_id = new_id()
        request.state.session_id = session_id
        response = await call_next(request)
        if issued:
            response.set_cookie(SESSION_COOKIE_NAME, session_id, httponly=True, samesite="lax")
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail},
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"message": "Invalid request data"})

    @app.on_event("startup")
    def on_startup():
        if app.state.storage is None:
            try:
                app.state.storage = build_storage()
            except Exception as e:
                logger.error(f"Storage init failed at startup: {e}")
                raise
        logger.info(f"Storage ready: {type(app.state.storage).__name__}")

    @app.get("/")
    def root():
        return {"message": "RÜTZ Botanicals API is running"}

    for module in (catalog, cart, impact, recommendations, users, learning, journey, orders, inventory, plants):
        app.include_router(module.router)
    return app


app = create_app()
