"""
LLM orchestration: the hosted-model client used for every artifact.
"""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from config import DEFAULT_TEMPERATURE, model_name
from services.artifact_types import ArtifactKind, GenerationFailedError, QuizQuestion
from services.quiz_generator import QUIZ_RESPONSE_FORMAT, parse_quiz_response

LOGGER = logging.getLogger("pdf_assistant.llm")


def _wrap_error(e: Exception) -> GenerationFailedError:
    """Map a provider exception onto a readable GenerationFailedError."""
    err_msg = str(e).lower()
    if "invalid" in err_msg or "authentication" in err_msg or "incorrect api key" in err_msg:
        return GenerationFailedError("The API key was rejected. Please check it and try again.")
    if "insufficient_quota" in err_msg or "quota" in err_msg or "rate limit" in err_msg:
        return GenerationFailedError("API quota exhausted or too many requests. Please try again later.")
    return GenerationFailedError(f"Error calling the model API: {e!s}")


async def _acall_llm(
    prompt: str,
    api_key: str,
    model: str,
    temperature: float = DEFAULT_TEMPERATURE,
    response_format: dict[str, Any] | None = None,
) -> str:
    """
    Invoke the chat model once with a single user message.

    Args:
        prompt: Full instruction text.
        api_key: OpenAI API key.
        model: Chat model name.
        temperature: Model temperature.
        response_format: Optional structured-output descriptor.

    Returns:
        Assistant response content.

    Raises:
        GenerationFailedError: If the key is missing or the call fails.
    """
    if not (api_key and api_key.strip()):
        raise GenerationFailedError("Please provide a valid API key.")
    try:
        llm = ChatOpenAI(model=model, api_key=api_key.strip(), temperature=temperature)
        runnable = llm.bind(response_format=response_format) if response_format else llm
        response = await runnable.ainvoke([HumanMessage(content=prompt)])
        return response.content if response.content else ""
    except Exception as e:
        raise _wrap_error(e) from e


class LLMProcessor:
    """Sends artifact prompts to the hosted model and shapes the responses."""

    def __init__(self, api_key: str, model: str | None = None, temperature: float = DEFAULT_TEMPERATURE) -> None:
        self.api_key = api_key
        self.model = model or model_name()
        self.temperature = temperature

    async def complete(self, prompt: str, response_format: dict[str, Any] | None = None) -> str:
        return await _acall_llm(
            prompt,
            self.api_key,
            self.model,
            temperature=self.temperature,
            response_format=response_format,
        )

    async def generate(self, prompt: str, kind: ArtifactKind) -> str | list[QuizQuestion]:
        """
        Generate one artifact.

        Summary and strategy responses are returned verbatim. Quiz responses
        are requested as schema-constrained JSON, then parsed and validated.

        Raises:
            GenerationFailedError: On transport failure or a malformed quiz payload.
        """
        kind = ArtifactKind(kind)
        if kind is not ArtifactKind.QUIZ:
            text = await self.complete(prompt)
            LOGGER.info("llm.generate(kind=%s, chars=%s)", kind.value, len(text))
            return text
        raw = await self.complete(prompt, response_format=QUIZ_RESPONSE_FORMAT)
        try:
            questions = parse_quiz_response(raw)
        except GenerationFailedError:
            LOGGER.warning("llm.generate(kind=quiz) malformed response: %.200s", raw)
            raise
        LOGGER.info("llm.generate(kind=quiz, questions=%s)", len(questions))
        return questions
