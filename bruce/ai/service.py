import logging
from typing import Optional

import openai
from openai import AsyncOpenAI

from bruce.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)

ANSWER_PREFIX = "🤖 "
ERROR_REPLY = "AI Error: Unable to answer."


class CompletionClient:
    """One chat-completion call per prompt, no history and no system prompt."""

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4"):
        self.client = client
        self.model = model

    async def complete(self, prompt: str) -> Result[str]:
        try:
            chat = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.APIConnectionError as e:
            return Err(ErrorKind.NETWORK, str(e))
        except openai.APIStatusError as e:
            return Err(ErrorKind.UPSTREAM_STATUS, f"{e.status_code}: {e.message}")
        except openai.OpenAIError as e:
            return Err(ErrorKind.UPSTREAM_STATUS, str(e))
        except Exception as e:
            return Err(ErrorKind.UNEXPECTED, repr(e))

        try:
            answer = chat.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            return Err(ErrorKind.MALFORMED_PAYLOAD, repr(e))
        if not isinstance(answer, str):
            return Err(ErrorKind.MALFORMED_PAYLOAD, "completion has no text content")
        return Ok(answer)

    async def aclose(self) -> None:
        await self.client.close()


class CompletionRelay:
    """Turns a prompt into the text sent back over the real-time channel.

    Failures of any kind collapse into ``ERROR_REPLY``; the kind is only
    logged.
    """

    def __init__(self, completion: Optional[CompletionClient]):
        self.completion = completion

    async def answer(self, prompt: str) -> str:
        if self.completion is None:
            logger.error("Completion API is not configured")
            return ERROR_REPLY

        result = await self.completion.complete(prompt)
        if isinstance(result, Err):
            logger.error(f"Completion failed: {result}")
            return ERROR_REPLY
        return f"{ANSWER_PREFIX}{result.value}"

    async def aclose(self) -> None:
        if self.completion is not None:
            await self.completion.aclose()
