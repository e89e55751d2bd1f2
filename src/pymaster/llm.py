from __future__ import annotations
import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)

QUESTION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "text": types.Schema(type=types.Type.STRING, description="Question text"),
        "hint": types.Schema(type=types.Type.STRING),
        "expectedOutputDescription": types.Schema(type=types.Type.STRING),
    },
    required=["text", "expectedOutputDescription"],
)

GRADE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "correct": types.Schema(type=types.Type.BOOLEAN),
        "message": types.Schema(type=types.Type.STRING),
        "output": types.Schema(type=types.Type.STRING),
    },
    required=["correct", "message", "output"],
)

_LANG_NAMES = {"vi": "Vietnamese", "en": "English"}


def parse_json_object(raw: str) -> dict[str, Any]:
    try:
        payload = json.loads(raw or "{}")
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON from LLM: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("LLM response must be a JSON object")
    return payload


@dataclass
class LLMClient:
    api_key: str
    model: str = "gemini-2.5-flash"
    timeout_sec: float = 30.0

    def _client(self) -> genai.Client:
        return genai.Client(api_key=self.api_key)

    async def _generate_json(self, contents: str, schema: types.Schema) -> dict[str, Any]:
        client = self._client()
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
        )

        def _call() -> str:
            resp = client.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
            return (resp.text or "").strip()

        raw = await asyncio.wait_for(asyncio.to_thread(_call), timeout=self.timeout_sec)
        return parse_json_object(raw)

    async def generate_question(self, *, topic: str, ui_lang: str = "vi") -> dict[str, Any]:
        logger.info("llm_usage: generate_question model=%s topic=%s ui_lang=%s", self.model, topic, ui_lang)
        lang = _LANG_NAMES.get(ui_lang, "English")
        contents = f"""You are a high-school computer science teacher.
Write one short hands-on Python practice question on the topic: "{topic}".
Requirements:
- Keep it short.
- The program must print a concrete result so the answer is easy to check.
- Write the question and hint in {lang}.
Return ONLY a JSON object: {{"text": ..., "hint": ..., "expectedOutputDescription": ...}}
"""
        return await self._generate_json(contents, QUESTION_SCHEMA)

    async def grade_submission(
        self,
        *,
        question_text: str,
        expected_output: str,
        code: str,
        ui_lang: str = "vi",
    ) -> dict[str, Any]:
        logger.info(
            "llm_usage: grade_submission model=%s question_len=%s expected_len=%s code_len=%s",
            self.model,
            len(question_text),
            len(expected_output),
            len(code),
        )
        lang = _LANG_NAMES.get(ui_lang, "English")
        contents = f"""Role: Python grader.
Task: "{question_text}"
Expected output: "{expected_output}"
Student code:
```python
{code}
```
Instructions:
- Check whether the code solves the task. Do not assume anything that is not in the code.
- "output" is what the program would print.
- Write "message" in {lang}, 1-2 sentences.
Return ONLY JSON: {{"correct": boolean, "message": string, "output": string}}
"""
        return await self._generate_json(contents, GRADE_SCHEMA)
