"""
OpenAI Engine implementation
"""
import os
import time
import logging
from typing import Dict, Any, List
import openai
from openai import OpenAI
from scilingo.ai_engines.base import (
    AIEngine, CHAT_MAX_TOKENS, CHAT_TEMPERATURE, LESSON_MAX_TOKENS, LESSON_TEMPERATURE,
    LESSON_SYSTEM_PROMPT, lesson_prompt, normalize_history, parse_lesson, tutor_system_prompt
)
from scilingo.errors import LessonFormatError, ServiceUnavailableError
from scilingo.services.cache_service import cache_service

logger = logging.getLogger(__name__)


class OpenAIEngine(AIEngine):
    """OpenAI implementation of AI Engine"""

    name = 'openai'

    def __init__(self, api_key: str = None, model: str = None, **kwargs):
        super().__init__(api_key, model, **kwargs)
        self.api_key = api_key or os.getenv('OPENAI_API_KEY')
        self.model = model or os.getenv('ACTIVE_AI_MODEL', 'gpt-4o-mini')
        if not self.api_key:
            logger.error("[OpenAIEngine] OPENAI_API_KEY not set")
            raise ServiceUnavailableError('AI service not configured')
        self.client = OpenAI(api_key=self.api_key)

    def _call_chat_completion(self, messages: list, temperature: float = 0.7,
                              max_tokens: int = None, json_mode: bool = False) -> str:
        """Helper method to call OpenAI chat completion"""
        params = {
            'model': self.model,
            'messages': messages,
            'temperature': temperature
        }
        if max_tokens:
            params['max_tokens'] = max_tokens
        if json_mode:
            params['response_format'] = {'type': 'json_object'}

        start_api = time.time()
        try:
            response = self.client.chat.completions.create(**params)
        except openai.OpenAIError as e:
            logger.error("[OpenAIEngine] Completion request failed: %s", e)
            raise ServiceUnavailableError() from e
        logger.debug("[AI-TIMING] OpenAI API call completed: %.2fs", time.time() - start_api)

        return response.choices[0].message.content or ''

    def chat(self, topic_title: str, topic_description: str, history: List[Dict[str, str]],
             message: str) -> str:
        messages = [{"role": "system", "content": tutor_system_prompt(topic_title, topic_description)}]
        messages.extend(normalize_history(history))
        messages.append({"role": "user", "content": message})

        return self._call_chat_completion(
            messages, temperature=CHAT_TEMPERATURE, max_tokens=CHAT_MAX_TOKENS
        ).strip()

    @cache_service.cache_lesson()
    def generate_lesson(self, topic_title: str, topic_description: str = None,
                        standard: str = None) -> Dict[str, Any]:
        """Generate a mini-lesson using OpenAI with caching"""
        messages = [
            {"role": "system", "content": LESSON_SYSTEM_PROMPT},
            {"role": "user", "content": lesson_prompt(topic_title, topic_description, standard)}
        ]

        response = self._call_chat_completion(
            messages, temperature=LESSON_TEMPERATURE, max_tokens=LESSON_MAX_TOKENS, json_mode=True
        )
        try:
            return parse_lesson(response)
        except LessonFormatError:
            logger.error("[OpenAIEngine] Failed to parse lesson JSON: %s", response)
            raise
