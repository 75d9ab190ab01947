from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from interview.core.prompt import build_feedback_prompt, build_system_prompt
from interview.core.store import Message, SessionStore
from interview.client import CompletionOptions
from interview.errors import SessionNotFound, ValidationError


logger = logging.getLogger(__name__)


class Completer(Protocol):
    def complete(self, transcript: Sequence[Message], options: CompletionOptions) -> str: ...


class InterviewService:
    """The four interview operations over a session store and a completer.

    A failed completion during ``submit_answer`` is not rolled back: the
    answer and rubric messages stay in the transcript and the next call
    resends them.
    """

    def __init__(
        self,
        store: SessionStore,
        completer: Completer,
        question_options: CompletionOptions,
        feedback_options: CompletionOptions,
    ) -> None:
        self.store = store
        self.completer = completer
        self.question_options = question_options
        self.feedback_options = feedback_options

    def start_interview(self, user_id: Optional[str], role: Optional[str]) -> str:
        if not user_id or not role:
            raise ValidationError("Missing user_id or role")
        with self.store.lock(user_id):
            self.store.create(user_id, Message(role="system", content=build_system_prompt(role)))
        logger.info("Interview started: user_id=%s role=%s", user_id, role)
        return role

    def ask_question(self, user_id: Optional[str]) -> str:
        if not user_id:
            raise SessionNotFound()
        with self.store.lock(user_id):
            transcript = self.store.get(user_id)
            question = self.completer.complete(transcript, self.question_options)
            self.store.append(user_id, Message(role="assistant", content=question))
        logger.info(
            "Question generated: user_id=%s transcript_len=%s",
            user_id,
            len(transcript) + 1,
        )
        return question

    def submit_answer(self, user_id: Optional[str], answer: Optional[str]) -> str:
        if not user_id:
            raise SessionNotFound()
        with self.store.lock(user_id):
            # Raises before anything is appended for unknown users.
            self.store.get(user_id)
            if answer is None:
                raise ValidationError("Missing answer")
            self.store.append(user_id, Message(role="user", content=answer))
            self.store.append(user_id, Message(role="system", content=build_feedback_prompt()))
            transcript = self.store.get(user_id)
            feedback = self.completer.complete(transcript, self.feedback_options)
            self.store.append(user_id, Message(role="assistant", content=feedback))
        logger.info(
            "Feedback generated: user_id=%s transcript_len=%s",
            user_id,
            len(transcript) + 1,
        )
        return feedback

    def end_interview(self, user_id: Optional[str]) -> None:
        if user_id:
            with self.store.lock(user_id):
                self.store.remove(user_id)
        logger.info("Interview ended: user_id=%s", user_id)
