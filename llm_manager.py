"""
LLM Manager - the external generative-language collaborator behind every AI route.
Default Priority: Gemini (cloud) > Ollama (free, local) > OpenAI (paid, disabled by default)

Callers never depend on the model succeeding: each route catches ``LLMError``
and falls back to a local heuristic.
"""

import json
import logging
import re
import time

from config import Settings, get_settings

logger = logging.getLogger("LLMManager")

RATE_LIMIT_PHRASES = (
    'rate limit', 'quota', '429', 'too many requests',
    'resource_exhausted', 'resourceexhausted',
)

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


class LLMError(Exception):
    """Base class for generative-language failures."""


class LLMUnavailableError(LLMError):
    """No provider is configured or reachable."""


class LLMResponseError(LLMError):
    """The provider answered, but not with usable JSON."""


def extract_json(text):
    """
    Pull the JSON object out of a model reply.

    Strips markdown fences and anything before the first ``{`` or after the
    last ``}``.
    """
    if not text or not text.strip():
        raise LLMResponseError("Empty response from model")
    cleaned = _FENCE_RE.sub("", text).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise LLMResponseError("No JSON object found in model response")
    try:
        parsed = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"Invalid JSON in model response: {e}") from e
    if not isinstance(parsed, dict):
        raise LLMResponseError("Model response JSON is not an object")
    return parsed


class LLMManager:
    def __init__(self, settings: Settings | None = None, sleep=time.sleep):
        self.settings = settings or get_settings()
        self.provider = None
        self.client = None
        self._sleep = sleep
        self._initialize()

    @property
    def available(self) -> bool:
        return self.client is not None

    def _initialize(self):
        """Initialize LLM provider based on priority/availability"""
        choice = self.settings.llm_provider

        if choice in ('gemini', 'auto') and self._try_gemini():
            return
        if choice in ('ollama', 'auto') and self._try_ollama():
            return
        if choice == 'openai' or (choice == 'auto' and self.settings.enable_openai):
            if self._try_openai():
                return

        logger.warning(
            "No LLM provider available; AI routes will use local fallbacks. "
            "Set GEMINI_API_KEY (or run Ollama, or set OPENAI_API_KEY with ENABLE_OPENAI=true)."
        )

    def _try_gemini(self):
        """Try to use Google Gemini - PRIORITY 1"""
        api_key = self.settings.gemini_api_key
        if not api_key:
            return False
        try:
            import google.generativeai as genai
            genai.configure(api_key=api_key)
            self.client = genai.GenerativeModel(self.settings.gemini_model)
            self.provider = 'gemini'
            logger.info(f"Using Google Gemini model: {self.settings.gemini_model}")
            return True
        except Exception as e:
            logger.warning(f"Gemini not available: {e}")
        return False

    def _try_ollama(self):
        """Try to use Ollama (local, free) - PRIORITY 2"""
        from ollama_adapter import get_ollama_client
        client = get_ollama_client(
            base_url=self.settings.ollama_url,
            model=self.settings.ollama_model,
            timeout=self.settings.llm_timeout,
        )
        if not client.is_running():
            return False
        self.client = client
        self.provider = 'ollama'
        logger.info(f"Using Ollama ({self.settings.ollama_model})")
        return True

    def _try_openai(self):
        """Try to use OpenAI (paid) - PRIORITY 3, DISABLED BY DEFAULT"""
        api_key = self.settings.openai_api_key
        if not api_key:
            return False
        try:
            from openai import OpenAI
            self.client = OpenAI(api_key=api_key, timeout=self.settings.llm_timeout)
            self.provider = 'openai'
            logger.info(f"Using OpenAI model: {self.settings.openai_model}")
            return True
        except Exception as e:
            logger.warning(f"OpenAI not available: {e}")
        return False

    def generate(self, prompt, temperature=0.7, max_tokens=6000, max_retries=None):
        """Generate response text, retrying rate limits with exponential backoff."""
        if not self.client:
            raise LLMUnavailableError("No LLM provider available")

        retries = max_retries or self.settings.llm_max_retries
        for attempt in range(retries):
            try:
                if self.provider == 'gemini':
                    text = self._generate_gemini(prompt, temperature, max_tokens)
                elif self.provider == 'ollama':
                    text = self.client.generate(prompt, temperature=temperature, max_tokens=max_tokens)
                else:
                    text = self._generate_openai(prompt, temperature, max_tokens)
                if not text or not text.strip():
                    raise LLMResponseError(f"Empty response from {self.provider}")
                return text
            except LLMResponseError:
                raise
            except Exception as e:
                error_str = str(e).lower()
                is_rate_limit = any(phrase in error_str for phrase in RATE_LIMIT_PHRASES)

                if is_rate_limit and attempt < retries - 1:
                    wait_time = 2 ** (attempt + 1)
                    logger.warning(
                        f"Rate limit hit on {self.provider}. Retrying in {wait_time}s "
                        f"(attempt {attempt + 1}/{retries})..."
                    )
                    self._sleep(wait_time)
                    continue

                if self.provider == 'gemini' and self.settings.llm_provider == 'auto':
                    logger.warning(f"Gemini failure: {e}; attempting fallback providers")
                    self.client = None
                    self.provider = None
                    if self._try_ollama() or (self.settings.enable_openai and self._try_openai()):
                        return self.generate(prompt, temperature, max_tokens, max_retries)

                raise LLMError(f"{self.provider or 'LLM'} generation failed: {e}") from e

        raise LLMError(f"Failed to generate after {retries} attempts due to rate limits")

    def generate_json(self, prompt, temperature=0.4, max_tokens=6000):
        """Generate and parse the JSON object embedded in the reply."""
        return extract_json(self.generate(prompt, temperature=temperature, max_tokens=max_tokens))

    def _generate_gemini(self, prompt, temperature, max_tokens):
        response = self.client.generate_content(
            prompt,
            generation_config={
                'temperature': temperature,
                'max_output_tokens': max_tokens,
            },
            request_options={'timeout': self.settings.llm_timeout},
        )
        return response.text

    def _generate_openai(self, prompt, temperature, max_tokens):
        response = self.client.chat.completions.create(
            model=self.settings.openai_model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""


# Global instance
_llm_manager = None


def get_llm():
    """Get LLM manager instance"""
    global _llm_manager
    if _llm_manager is None:
        _llm_manager = LLMManager()
    return _llm_manager


def reset_llm():
    global _llm_manager
    _llm_manager = None
