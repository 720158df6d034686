from typing import Any, List, Optional

import anthropic
import openai
from anthropic import AsyncAnthropic
from loguru import logger
from openai import AsyncOpenAI

from scriptengine.config_manager import ConfigManager, ScriptingConfig
from scriptengine.errors import InputValidationError, UpstreamError, provider_message
from scriptengine.scripting.models import ScriptMode, ScriptRequest, ScriptVariation
from scriptengine.scripting.prompts import CLIP_LINE_TEMPLATE, CLIP_ORDER_INSTRUCTIONS, SCRIPT_PROMPT_TEMPLATE


def build_prompt(clips: List[str], product_link: str, mode: ScriptMode) -> str:
    """Assembles the single user message sent to the text model."""
    clip_lines = "\n\n".join(
        CLIP_LINE_TEMPLATE.format(number=i + 1, text=clip) for i, clip in enumerate(clips)
    )
    return SCRIPT_PROMPT_TEMPLATE.format(
        clip_order=CLIP_ORDER_INSTRUCTIONS[ScriptMode(mode).value],
        clips=clip_lines,
        product_link=product_link,
    )


class ScriptGenerator:
    def __init__(self, config_manager: ConfigManager):
        self.cfg: ScriptingConfig = config_manager.scripting
        self.client: Optional[Any] = self._init_client()

    def _init_client(self) -> Optional[Any]:
        """Initialize the async LLM client for the configured provider."""
        # Retries are disabled: a failed call is reported straight back to the caller.
        if self.cfg.llm_provider == "anthropic":
            api_key = self.cfg.anthropic_api_key
            if not api_key:
                logger.warning("Anthropic API Key not found. Script generation will fail until it is set.")
                return None
            return AsyncAnthropic(api_key=api_key, max_retries=0, timeout=self.cfg.request_timeout)

        elif self.cfg.llm_provider == "openai":
            api_key = self.cfg.openai_api_key
            if not api_key:
                logger.warning("OpenAI API Key not found. Script generation will fail until it is set.")
                return None
            return AsyncOpenAI(api_key=api_key, max_retries=0, timeout=self.cfg.request_timeout)

        else:
            raise ValueError(f"Unsupported LLM provider: {self.cfg.llm_provider}")

    async def generate(self, request: ScriptRequest) -> ScriptVariation:
        """
        Generates one script for the request's mode.

        Raises InputValidationError before any network call when there is
        nothing to write about, and UpstreamError when the provider fails.
        """
        clips = request.filled_clips()
        if not clips:
            raise InputValidationError("Please provide at least one clip transcript")
        if not request.product_link.strip():
            raise InputValidationError("Please provide a product link")
        if not self.client:
            raise UpstreamError(f"No API key configured for provider '{self.cfg.llm_provider}'")

        prompt = build_prompt(clips, request.product_link, request.mode)
        logger.info(f"Generating {request.mode.value} script from {len(clips)} clips ({len(prompt)} chars prompt)")

        if self.cfg.llm_provider == "anthropic":
            script = await self._generate_anthropic(prompt)
        else:
            script = await self._generate_openai(prompt)

        logger.success(f"{request.mode.value} script generated ({len(script)} chars)")
        return ScriptVariation(mode=request.mode, script=script)

    async def _generate_anthropic(self, prompt: str) -> str:
        try:
            response = await self.client.messages.create(
                model=self.cfg.model_name,
                max_tokens=self.cfg.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            raise UpstreamError(
                provider_message(e.body) or e.message, payload=e.body, status_code=e.status_code
            ) from e
        except anthropic.APIError as e:
            raise UpstreamError(e.message or "Could not reach Anthropic") from e

        if not response.content:
            raise UpstreamError("Anthropic returned an empty response")
        return response.content[0].text

    async def _generate_openai(self, prompt: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.cfg.model_name,
                max_completion_tokens=self.cfg.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.APIStatusError as e:
            raise UpstreamError(
                provider_message(e.body) or e.message, payload=e.body, status_code=e.status_code
            ) from e
        except openai.APIError as e:
            raise UpstreamError(e.message or "Could not reach OpenAI") from e

        if not response.choices or response.choices[0].message.content is None:
            raise UpstreamError("OpenAI returned an empty response")
        return response.choices[0].message.content
