"""Google Gemini API client for explaining command output."""

import asyncio
import google.generativeai as genai

from .exceptions import APIError, RateLimitError

MAX_OUTPUT_CHARS = 4000


class GeminiClient:
    """Client for Google Gemini API."""

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash"):
        """
        Initialize GeminiClient.

        Args:
            api_key: Google Gemini API key.
            model_name: Gemini model to use.

        Raises:
            ValueError: If API key is empty.
        """
        if not api_key:
            raise ValueError("API key cannot be empty")

        self.api_key = api_key
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)

    async def explain(self, command: str, output: str, is_error: bool) -> str:
        """
        Explain the output of a command in plain language.

        Args:
            command: The command that was run.
            output: Its output (stderr on failure).
            is_error: Whether the command failed.

        Returns:
            Explanation string.

        Raises:
            APIError: If API call fails.
            RateLimitError: If API rate limit exceeded.
        """
        prompt = self._build_explanation_prompt(command, output, is_error)

        try:
            # Run synchronous API call in thread executor to avoid blocking event loop
            loop = asyncio.get_event_loop()
            response = await loop.run_in_executor(
                None,
                lambda: self.model.generate_content(prompt)
            )
            return response.text.strip()
        except Exception as e:
            error_msg = str(e).lower()
            if "quota" in error_msg or "rate" in error_msg or "limit" in error_msg:
                raise RateLimitError(f"API rate limit exceeded: {e}")
            raise APIError(f"Failed to explain output: {e}")

    def _build_explanation_prompt(self, command: str, output: str, is_error: bool) -> str:
        """Build the prompt for output explanation."""
        outcome = "failed" if is_error else "succeeded"
        return f"""You are a shell command expert. A user ran a command that {outcome}.

Command: {command}

Output:
{output[:MAX_OUTPUT_CHARS]}

Explain in two or three sentences what the output means.
If the command failed, say what most likely went wrong and how to fix it.
Use simple language. No markdown, no code blocks."""
