"""
Question bank loader

Fetches the question list once per session from an HTTP(S) URL or a
local JSON file. There is no retry: a failed load is final.
"""

import logging
from pathlib import Path
from typing import Optional

import httpx

from .errors import LoadError
from .quiz.schema import Question, questions_from_json
from .config import config


logger = logging.getLogger(__name__)

USER_AGENT = "trivia-quiz/0.1 (question bank loader)"


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class QuestionStore:
    """
    Holds the immutable question list for a session.

    Call load() once; afterwards `questions` returns the cached tuple.
    """

    def __init__(
        self,
        source: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize question store.

        Args:
            source: URL or file path of the question JSON (defaults to config)
            timeout: Fetch timeout in seconds (defaults to config)
            transport: Optional httpx transport, mainly for tests
        """
        self.source = source or config.source.questions_source
        self.timeout = timeout if timeout is not None else config.source.fetch_timeout_seconds
        self._transport = transport
        self._questions: Optional[tuple[Question, ...]] = None

    @property
    def loaded(self) -> bool:
        return self._questions is not None

    @property
    def questions(self) -> tuple[Question, ...]:
        """Loaded questions. Raises LoadError before load()."""
        if self._questions is None:
            raise LoadError("Questions have not been loaded yet", self.source)
        return self._questions

    async def load(self) -> tuple[Question, ...]:
        """
        Fetch and parse the question bank.

        Returns:
            Tuple of questions in file order

        Raises:
            LoadError: If the data cannot be fetched or parsed
        """
        if self._questions is not None:
            return self._questions

        if is_url(self.source):
            text = await self._fetch_url()
        else:
            text = self._read_file()

        try:
            questions = questions_from_json(text)
        except (KeyError, TypeError, ValueError) as e:
            raise LoadError(f"Failed to parse quiz questions: {e}", self.source)

        if not questions:
            raise LoadError("Question bank is empty", self.source)

        self._questions = tuple(questions)
        logger.info(f"Loaded {len(questions)} questions from {self.source}")
        return self._questions

    async def _fetch_url(self) -> str:
        """GET the question JSON over HTTP."""
        try:
            async with httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(self.source)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as e:
            raise LoadError(
                f"Failed to load questions: HTTP {e.response.status_code} "
                f"{e.response.reason_phrase}",
                self.source,
            )
        except httpx.HTTPError as e:
            raise LoadError(f"Failed to load questions: {e}", self.source)

    def _read_file(self) -> str:
        """Read the question JSON from disk."""
        path = Path(self.source).expanduser()
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Failed to load questions: {e}", self.source)
