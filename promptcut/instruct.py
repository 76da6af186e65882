"""Instruction service client — asks an OpenAI chat model for an action plan."""

import asyncio
import logging

from openai import OpenAI, OpenAIError

from promptcut.errors import InstructionServiceError, MalformedResponseError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"

SYSTEM_PROMPT = """\
You extract video cutting, splitting, muting and unmuting instructions from user prompts.
Respond with a single JSON object and nothing else. Use one of these shapes:
  {"action": "cut", "start": <seconds>, "end": <seconds>}
  {"action": "split", "start": [<seconds>, ...], "end": [<seconds>, ...]}
  {"action": "mute"}
  {"action": "unmute"}
All times are non-negative numbers of seconds. For "split", start[i] and end[i]
bound part i+1, in playback order."""


class InstructionClient:
    """Thin wrapper around the chat-completions endpoint.

    The answer is returned verbatim; :func:`promptcut.plan.validate` decides
    whether it is usable.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        client: OpenAI | None = None,
    ):
        self.model = model
        self.temperature = temperature
        if client is None:
            try:
                client = OpenAI(api_key=api_key)
            except OpenAIError as e:
                raise InstructionServiceError(f"OpenAI client is not configured: {e}") from e
        self._client = client

    def complete(self, prompt: str) -> str:
        try:
            completion = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": (
                            "Analyze this prompt and provide the appropriate video "
                            f'editing instructions: "{prompt}"'
                        ),
                    },
                ],
                temperature=self.temperature,
            )
        except OpenAIError as e:
            raise InstructionServiceError(f"Instruction service request failed: {e}") from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise MalformedResponseError("No content in instruction service response")
        logger.debug("Instruction service answered: %s", content)
        return content

    async def interpret(self, prompt: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.complete, prompt)
