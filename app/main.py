from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from pydantic import BaseModel, ConfigDict, Field

from config.settings import Settings, get_settings
from interview.client import CompletionClient, CompletionOptions
from interview.core.store import InMemorySessionStore, SessionStore
from interview.errors import InterviewError
from interview.service import Completer, InterviewService


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("interview")


class _Body(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)


class StartInterviewRequest(_Body):
    user_id: Optional[str] = Field(None, description="Unique identifier for the candidate")
    role: Optional[str] = Field(None, description="Job role the interview targets")


class UserRequest(_Body):
    user_id: Optional[str] = Field(None, description="Unique identifier for the candidate")


class SubmitAnswerRequest(_Body):
    user_id: Optional[str] = Field(None, description="Unique identifier for the candidate")
    answer: Optional[str] = Field(None, description="Candidate's answer to the last question")


class EndInterviewRequest(BaseModel):
    # Ending always succeeds, so any user_id value is accepted here.
    user_id: Any = Field(None, description="Unique identifier for the candidate")

    def session_key(self) -> Optional[str]:
        if isinstance(self.user_id, str):
            return self.user_id
        if isinstance(self.user_id, (int, float)) and not isinstance(self.user_id, bool):
            return str(self.user_id)
        return None


class StartInterviewResponse(BaseModel):
    message: str
    role: str


class QuestionResponse(BaseModel):
    question: str


class FeedbackResponse(BaseModel):
    feedback: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def create_app(
    settings: Optional[Settings] = None,
    completer: Optional[Completer] = None,
    store: Optional[SessionStore] = None,
) -> FastAPI:
    settings = (settings or get_settings()).validate()
    logging.getLogger().setLevel(settings.log_level.upper())

    owned_client: Optional[CompletionClient] = None
    if completer is None:
        owned_client = completer = CompletionClient(settings)

    service = InterviewService(
        store=store if store is not None else InMemorySessionStore(),
        completer=completer,
        question_options=CompletionOptions(
            temperature=settings.question_temperature,
            max_tokens=settings.question_max_tokens,
        ),
        feedback_options=CompletionOptions(
            temperature=settings.feedback_temperature,
            max_tokens=settings.feedback_max_tokens,
        ),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Server running at http://localhost:%s (model=%s env=%s)",
            settings.port,
            settings.openai_model,
            settings.app_env,
        )
        yield
        if owned_client is not None:
            owned_client.close()

    app = FastAPI(title="AI Interview Simulator", version="1.0.0", lifespan=lifespan)
    app.state.service = service

    # CORS: allow local frontend during development
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(InterviewError)
    async def interview_error_handler(request: Request, exc: InterviewError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s failed: %s", request.url.path, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
        return _error(400, message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Request processing failed: %s", exc)
        return _error(500, str(exc))

    @app.post("/start_interview", response_model=StartInterviewResponse)
    def start_interview(req: StartInterviewRequest) -> StartInterviewResponse:
        role = service.start_interview(req.user_id, req.role)
        return StartInterviewResponse(message="Interview started", role=role)

    @app.post("/ask_question", response_model=QuestionResponse)
    def ask_question(req: UserRequest) -> QuestionResponse:
        return QuestionResponse(question=service.ask_question(req.user_id))

    @app.post("/submit_answer", response_model=FeedbackResponse)
    def submit_answer(req: SubmitAnswerRequest) -> FeedbackResponse:
        return FeedbackResponse(feedback=service.submit_answer(req.user_id, req.answer))

    @app.post("/end_interview", response_model=MessageResponse)
    def end_interview(req: Optional[EndInterviewRequest] = None) -> MessageResponse:
        service.end_interview(req.session_key() if req else None)
        return MessageResponse(message="Interview ended")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )
