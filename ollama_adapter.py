# Ollama adapter for the resume routes
# Local, keyless alternative to Gemini

import requests


class OllamaClient:
    def __init__(self, base_url="http://localhost:11434", model="llama3:8b", timeout=30):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    def is_running(self) -> bool:
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=2)
        except requests.RequestException:
            return False
        return response.status_code == 200

    def generate(self, prompt: str, temperature: float = 0.7, max_tokens: int = 2000) -> str:
        """Single non-streaming completion; returns the response text."""
        response = requests.post(
            f"{self.base_url}/api/generate",
            json={
                "model": self.model,
                "prompt": prompt,
                "stream": False,
                "options": {
                    "temperature": temperature,
                    "num_predict": max_tokens,
                },
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json().get("response", "")


# Singleton instance
_ollama_client = None


def get_ollama_client(base_url="http://localhost:11434", model="llama3:8b", timeout=30):
    global _ollama_client
    if _ollama_client is None or _ollama_client.model != model or _ollama_client.base_url != base_url.rstrip("/"):
        _ollama_client = OllamaClient(base_url=base_url, model=model, timeout=timeout)
    return _ollama_client
