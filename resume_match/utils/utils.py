import json
from typing import Any, Dict, Optional

import requests


def ollama_generate(
    prompt: str,
    base_url: str,
    model: str,
    system: Optional[str] = None,
    temperature: float = 0.2,
    timeout: float = 10.0,
) -> str:
    url = f"{base_url}/api/generate"
    payload: Dict[str, Any] = {
        "model": model,
        "prompt": prompt,
        "format": "json",
        "options": {"temperature": temperature},
        "stream": False  # single response body
    }
    if system:
        payload["system"] = system
    resp = requests.post(url, json=payload, timeout=timeout)
    resp.raise_for_status()
    return resp.json().get("response", "") or ""


def openai_chat(
    prompt: str,
    base_url: str,
    model: str,
    api_key: str,
    system: Optional[str] = None,
    temperature: float = 0.2,
    timeout: float = 10.0,
) -> str:
    """OpenAI-compatible chat completion (also Gemini's compatibility endpoint)."""
    url = f"{base_url}/chat/completions"
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    resp = requests.post(
        url,
        headers={"Authorization": f"Bearer {api_key}"},
        json={
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "response_format": {"type": "json_object"},
        },
        timeout=timeout,
    )
    resp.raise_for_status()
    return resp.json()["choices"][0]["message"]["content"] or ""


def parse_json_object(s: str) -> Dict[str, Any]:
    """
    Pull the JSON object out of a model reply.

    Models sometimes wrap the object in prose or code fences, so the outermost
    braces are used. Raises ValueError when no object can be decoded.
    """
    if not isinstance(s, str):
        raise ValueError("Model reply is not text")
    start = s.find("{")
    end = s.rfind("}")
    if start < 0 or end < start:
        raise ValueError("No JSON object found in model reply")
    data = json.loads(s[start:end + 1])
    if not isinstance(data, dict):
        raise ValueError("Model reply is not a JSON object")
    return data
