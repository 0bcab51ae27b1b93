import json
import logging
from typing import List

from openai import APIConnectionError, APIError, APIStatusError, OpenAI
from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import GenerationError
from app.schemas.quiz.quiz_base import QuestionList, dump_questions

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an expert educational quiz creator. Always respond with valid JSON only, no additional text."

PROMPT_TEMPLATE = """Create a {count}-question {quiz_type} quiz on the following topic with {difficulty} difficulty level.

Topic: {topic}

Please format the response as a JSON array with the following structure:
[
  {{
    "question": "Question text here?",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correctAnswer": "Option A",
    "explanation": "Brief explanation why this is correct"
  }}
]

IMPORTANT: Return ONLY the JSON array, no additional text, no code blocks, no explanations."""


def build_prompt(topic: str, difficulty: str, count: int, quiz_type: str) -> str:
    return PROMPT_TEMPLATE.format(count=count, quiz_type=quiz_type, difficulty=difficulty, topic=topic)


def strip_code_fences(content: str) -> str:
    content = content.strip()
    for prefix in ("```json", "```"):
        if content.startswith(prefix):
            content = content[len(prefix):]
            break
    if content.endswith("```"):
        content = content[: -len("```")]
    return content.strip()


def parse_questions(content: str) -> List[dict]:
    cleaned = strip_code_fences(content)
    try:
        raw = json.loads(cleaned)
    except ValueError as exc:
        logger.error("Raw OpenAI response: %s", cleaned)
        raise GenerationError(f"OpenAI returned invalid JSON. Please try again. Error: {exc}") from exc

    try:
        questions = QuestionList.validate_python(raw)
    except ValidationError as exc:
        logger.error("Raw OpenAI response: %s", cleaned)
        raise GenerationError(
            f"OpenAI returned an unexpected quiz format. Please try again. Error: {exc.error_count()} invalid field(s)"
        ) from exc
    return dump_questions(questions)


def _upstream_error_message(response) -> str | None:
    # a 200 reply can still carry {"error": {...}} instead of choices
    error = getattr(response, "error", None)
    if not error:
        return None
    if isinstance(error, dict):
        return error.get("message") or json.dumps(error)
    return getattr(error, "message", None) or str(error)


def generate_quiz(topic: str, difficulty: str, count: int, quiz_type: str, api_key: str) -> List[dict]:
    client = OpenAI(api_key=api_key, timeout=settings.OPENAI_TIMEOUT, max_retries=0)
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_prompt(topic, difficulty, count, quiz_type)},
    ]

    try:
        response = client.chat.completions.create(model=settings.OPENAI_MODEL, messages=messages)
    except APIStatusError as exc:
        logger.error("OpenAI API error (status %s): %s", exc.status_code, exc.message)
        raise GenerationError(
            f"OpenAI API error (status {exc.status_code}): {exc.message}", status_code=exc.status_code
        ) from exc
    except APIConnectionError as exc:
        logger.error("Error calling OpenAI API: %s", exc)
        raise GenerationError(f"Error calling OpenAI API: {exc}") from exc
    except APIError as exc:
        logger.error("OpenAI error: %s", exc.message)
        raise GenerationError(f"OpenAI Error: {exc.message}") from exc

    upstream_error = _upstream_error_message(response)
    if upstream_error:
        logger.error("OpenAI error: %s", upstream_error)
        raise GenerationError(f"OpenAI Error: {upstream_error}")

    choices = getattr(response, "choices", None)
    if not choices:
        raise GenerationError("No response from OpenAI")

    content = choices[0].message.content
    if not content:
        raise GenerationError("No response from OpenAI")

    return parse_questions(content)
