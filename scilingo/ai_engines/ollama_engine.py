"""
Ollama Engine implementation (for local models)
"""
import os
import logging
import requests
from typing import Dict, Any, List
from scilingo.ai_engines.base import (
    AIEngine, CHAT_MAX_TOKENS, CHAT_TEMPERATURE, LESSON_MAX_TOKENS, LESSON_TEMPERATURE,
    LESSON_SYSTEM_PROMPT, lesson_prompt, normalize_history, parse_lesson, tutor_system_prompt
)
from scilingo.errors import ServiceUnavailableError
from scilingo.services.cache_service import cache_service

logger = logging.getLogger(__name__)


class OllamaEngine(AIEngine):
    """Ollama implementation for local LLM models"""

    name = 'ollama'

    def __init__(self, api_key: str = None, model: str = None, **kwargs):
        super().__init__(api_key, model, **kwargs)
        base_url = kwargs.get('base_url') or os.getenv('OLLAMA_BASE_URL', 'http://localhost:11434')
        self.base_url = base_url.rstrip('/')
        self.model = model or os.getenv('OLLAMA_MODEL', 'llama3')

    def _call_chat(self, messages: list, temperature: float = 0.7, max_tokens: int = None,
                   json_mode: bool = False) -> str:
        """Helper method to call Ollama chat endpoint"""
        options = {'temperature': temperature}
        if max_tokens:
            options['num_predict'] = max_tokens

        payload = {
            'model': self.model,
            'messages': messages,
            'stream': False,
            'options': options
        }
        if json_mode:
            payload['format'] = 'json'

        try:
            response = requests.post(f'{self.base_url}/api/chat', json=payload, timeout=60)
            response.raise_for_status()
            return response.json()['message']['content']
        except (requests.RequestException, KeyError, ValueError) as e:
            logger.error("[OllamaEngine] Chat request failed: %s", e)
            raise ServiceUnavailableError() from e

    def chat(self, topic_title: str, topic_description: str, history: List[Dict[str, str]],
             message: str) -> str:
        messages = [{'role': 'system', 'content': tutor_system_prompt(topic_title, topic_description)}]
        messages.extend(normalize_history(history))
        messages.append({'role': 'user', 'content': message})
        return self._call_chat(messages, temperature=CHAT_TEMPERATURE, max_tokens=CHAT_MAX_TOKENS).strip()

    @cache_service.cache_lesson()
    def generate_lesson(self, topic_title: str, topic_description: str = None,
                        standard: str = None) -> Dict[str, Any]:
        """Generate a mini-lesson using Ollama with caching"""
        messages = [
            {'role': 'system', 'content': LESSON_SYSTEM_PROMPT},
            {'role': 'user', 'content': lesson_prompt(topic_title, topic_description, standard)}
        ]
        response = self._call_chat(messages, temperature=LESSON_TEMPERATURE,
                                   max_tokens=LESSON_MAX_TOKENS, json_mode=True)
        return parse_lesson(response)
