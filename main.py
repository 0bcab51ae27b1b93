import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from app.core.config import settings
from app.core.database import Base, engine
from app.core.sessions import SessionStore
from app.models.user_db.user_db import User  # noqa: F401
from app.models.quiz_db.quiz_db import Quiz  # noqa: F401
from app.models.quiz_db.quiz_attempt_db import QuizAttempt  # noqa: F401
from app.routes.auth.auth_routers import auth_router
from app.routes.quiz.quiz_routers import quiz_router
from app.routes.upload.upload_routers import upload_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized successfully")
    yield
    app.state.sessions.clear()


app = FastAPI(lifespan=lifespan)
app.state.sessions = SessionStore(ttl=timedelta(days=settings.SESSION_TTL_DAYS))

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(upload_router)
app.include_router(auth_router)
app.include_router(quiz_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return """
    <html>
        <head>
            <title>Askify</title>
        </head>
        <body>
            <h1>Askify</h1>
            <p>Upload a document, generate a quiz and track your attempts.</p>
            <p>API documentation is available <a href="/docs">here</a>.</p>
        </body>
    </html>
    """
