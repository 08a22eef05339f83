"""DeepSeek LLM service for lead discovery and enrichment."""

import asyncio
import json
import re
from typing import Any, Optional

from openai import AsyncOpenAI

from ..exceptions import ExternalServiceError


class DeepSeekService:
    """Async service wrapper for DeepSeek API via OpenAI SDK."""

    BASE_URL = "https://api.deepseek.com"

    def __init__(
        self,
        api_key: str,
        reasoning_model: str = "deepseek-reasoner",
        drafting_model: str = "deepseek-chat"
    ):
        """
        Initialize DeepSeek service.

        Args:
            api_key: DeepSeek API key
            reasoning_model: Model for analysis tasks (R1)
            drafting_model: Model for extraction and drafting tasks (V3)
        """
        self.api_key = api_key
        self.reasoning_model = reasoning_model
        self.drafting_model = drafting_model

    def _client(self) -> AsyncOpenAI:
        if not self.api_key:
            raise ValueError("DeepSeek API key is required")
        return AsyncOpenAI(api_key=self.api_key, base_url=self.BASE_URL)

    def _sanitize(self, message: str) -> str:
        # Never echo the key back into logs or the event log
        return message.replace(self.api_key, "***API_KEY***") if self.api_key else message

    async def _call_model(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 4096
    ) -> str:
        """
        Make a call to a DeepSeek model.

        Returns:
            Model response text
        """
        print(f"[DeepSeek] Calling {model} (temp={temperature}, max_tokens={max_tokens})", flush=True)
        print(f"[DeepSeek] User prompt: {user_prompt[:100]}...", flush=True)

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ]

        try:
            async with self._client() as client:
                response = await client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens
                )
        except Exception as e:
            error_msg = self._sanitize(str(e))
            print(f"[DeepSeek] ERROR: {error_msg}", flush=True)
            raise ExternalServiceError("DeepSeek API", error_msg) from None

        content = response.choices[0].message.content or ""
        print(f"[DeepSeek] Got response: {len(content)} chars", flush=True)
        return content

    async def call_r1(self, system_prompt: str, user_prompt: str, temperature: float = 0.3) -> str:
        """Call the reasoning model (lower temperature for consistency)."""
        return await self._call_model(self.reasoning_model, system_prompt, user_prompt, temperature)

    async def call_v3(self, system_prompt: str, user_prompt: str, temperature: float = 0.7) -> str:
        """Call the chat model."""
        return await self._call_model(self.drafting_model, system_prompt, user_prompt, temperature)

    @staticmethod
    def extract_json(text: str) -> Any:
        """
        Extract JSON from model response, handling common issues.

        Args:
            text: Raw model response

        Returns:
            Parsed JSON value (dict or list)
        """
        # Try direct parse first
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass

        # Try to find JSON in markdown code blocks
        json_match = re.search(r'```(?:json)?\s*([\s\S]*?)\s*```', text)
        if json_match:
            try:
                return json.loads(json_match.group(1))
            except json.JSONDecodeError:
                pass

        # Try to find a JSON array or object in text, whichever starts first
        candidates = []
        for pattern in (r'\[[\s\S]*\]', r'\{[\s\S]*\}'):
            match = re.search(pattern, text)
            if match:
                candidates.append(match)
        for match in sorted(candidates, key=lambda m: m.start()):
            try:
                return json.loads(match.group(0))
            except json.JSONDecodeError:
                pass

        raise ValueError(f"Could not extract valid JSON from response: {text[:200]}...")

    async def call_json(
        self,
        system_prompt: str,
        user_prompt: str,
        reasoning: bool = False,
        max_retries: int = 2
    ) -> Any:
        """
        Call a model and parse its JSON response, retrying unparseable replies.

        Args:
            system_prompt: System prompt
            user_prompt: User prompt
            reasoning: Use the reasoning model instead of the chat model
            max_retries: Maximum retry attempts

        Returns:
            Parsed JSON value
        """
        call = self.call_r1 if reasoning else self.call_v3
        for attempt in range(max_retries + 1):
            response = await call(system_prompt, user_prompt)
            try:
                return self.extract_json(response)
            except ValueError:
                if attempt == max_retries:
                    raise
                await asyncio.sleep(1.0)
