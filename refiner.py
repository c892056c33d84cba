"""Transcript refinement through a DashScope text-generation model."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Optional

from errors import NotConfiguredError, RefinementServiceError

try:
    import dashscope
except Exception:  # pragma: no cover
    dashscope = None  # type: ignore

logger = logging.getLogger(__name__)

REFINE_INSTRUCTION = (
    "Please clean up the following text, correcting any grammar or spelling "
    "mistakes, and improving the overall readability. Do not add any new "
    "information or change the meaning of the text."
)


def build_prompt(raw_text: str) -> str:
    return f"{REFINE_INSTRUCTION}\n\n{raw_text}"


class DashscopeRefiner:
    def __init__(
        self,
        model: str = "qwen-plus",
        request_timeout_s: Optional[float] = None,
    ) -> None:
        self._model = model
        self._request_timeout_s = request_timeout_s

    def refine(self, raw_text: str, api_key: str) -> str:
        if not api_key:
            raise NotConfiguredError("No generative API key configured")
        if dashscope is None:
            raise RefinementServiceError("dashscope is not installed")

        kwargs: dict[str, Any] = {}
        if self._request_timeout_s is not None:
            kwargs["timeout"] = self._request_timeout_s

        logger.info("Refining %d characters with %s", len(raw_text), self._model)
        try:
            response = dashscope.Generation.call(
                api_key=api_key,
                model=self._model,
                messages=[{"role": "user", "content": build_prompt(raw_text)}],
                result_format="message",
                **kwargs,
            )
        except Exception as exc:
            raise RefinementServiceError(str(exc)) from exc

        return self._extract_text(response)

    def _extract_text(self, response: Any) -> str:
        """Pull the completion text out of a DashScope generation response."""
        if not isinstance(response, dict):
            raise RefinementServiceError("empty response from generation service")
        status = response.get("status_code")
        if status != HTTPStatus.OK:
            raise RefinementServiceError(
                f"generation failed ({status}): "
                f"{response.get('code', '')} {response.get('message', '')}".strip()
            )
        try:
            content = response["output"]["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise RefinementServiceError(f"malformed generation response: {exc!r}") from exc
        if not isinstance(content, str):
            raise RefinementServiceError("generation content is not text")
        return content
