import time
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from .activity_log import ActivityLog
from .config import GenerationConfig
from .errors import GenerationError

MODULE = "GenerationClient"

WEB_SEARCH_TOOL = {"type": "web_search_preview"}


def _citation_urls(response: Any) -> List[str]:
    """Collect url_citation annotations from a Responses API result."""
    urls = []
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            for ann in getattr(part, "annotations", None) or []:
                url = getattr(ann, "url", None)
                if getattr(ann, "type", None) == "url_citation" and url and url not in urls:
                    urls.append(url)
    return urls


class GenerationClient:
    """Sends one prompt to the model and returns its text.

    Grounded calls go through the Responses API with the web search tool;
    ungrounded calls use chat completions.
    """

    def __init__(self, config: GenerationConfig, log: ActivityLog, client: Optional[AsyncOpenAI] = None):
        self.config = config
        self.log = log
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.config.api_key:
                self.log.error(MODULE, "client", "API key is not configured.")
                raise GenerationError("API key is not configured. Set OPENAI_API_KEY and try again.")
            self._client = AsyncOpenAI(api_key=self.config.api_key)
        return self._client

    def _sampling(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "temperature": self.config.temperature,
            "top_p": self.config.top_p,
        }
        if self.config.top_k is not None:
            params["extra_body"] = {"top_k": self.config.top_k}
        return params

    async def _complete(self, prompt: str) -> str:
        r = await self.client.chat.completions.create(
            model=self.config.model,
            messages=[{"role": "user", "content": prompt}],
            **self._sampling(),
        )
        if not r.choices:
            return ""
        return r.choices[0].message.content or ""

    async def _complete_grounded(self, prompt: str, prompt_type: str) -> str:
        r = await self.client.responses.create(
            model=self.config.model,
            input=prompt,
            tools=[WEB_SEARCH_TOOL],
            **self._sampling(),
        )
        urls = _citation_urls(r)
        if urls:
            self.log.info(MODULE, "generate", f"Search sources used for {prompt_type}.", {"sources": urls})
        return r.output_text or ""

    async def generate(self, prompt: str, use_grounding: Optional[bool] = None, prompt_type: str = "Generic") -> str:
        grounded = self.config.use_grounding if use_grounding is None else use_grounding
        self.log.info(MODULE, "generate", f"Sending {prompt_type} prompt.", {
            "model": self.config.model,
            "grounded": grounded,
            "promptLength": len(prompt),
        })
        start = time.perf_counter()
        try:
            if grounded:
                text = await self._complete_grounded(prompt, prompt_type)
            else:
                text = await self._complete(prompt)
        except GenerationError:
            raise
        except openai.AuthenticationError as e:
            self.log.error(MODULE, "generate", "API key rejected.", {"error": str(e)})
            raise GenerationError("Invalid API key. Please check your OPENAI_API_KEY.") from e
        except openai.PermissionDeniedError as e:
            self.log.error(MODULE, "generate", "Permission denied by the API.", {"error": str(e)})
            raise GenerationError(
                "Permission denied. Make sure the API key has access to the configured model."
            ) from e
        except openai.OpenAIError as e:
            self.log.error(MODULE, "generate", f"{prompt_type} generation failed.", {"error": str(e)})
            raise GenerationError(f"Failed to generate {prompt_type}: {e}") from e

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        if not text.strip():
            self.log.error(MODULE, "generate", f"Empty response for {prompt_type}.", {"durationMs": elapsed_ms})
            raise GenerationError(f"The model returned an empty response for {prompt_type}.")
        self.log.info(MODULE, "generate", f"Received {prompt_type} response.", {
            "durationMs": elapsed_ms,
            "outputLength": len(text),
        })
        return text
