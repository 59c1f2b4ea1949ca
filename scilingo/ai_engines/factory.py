"""
Factory for creating AI Engine instances
"""
import os
import logging
from scilingo.ai_engines.base import AIEngine
from scilingo.ai_engines.openai_engine import OpenAIEngine
from scilingo.ai_engines.ollama_engine import OllamaEngine
from scilingo.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


class AIEngineFactory:
    """Factory for creating AI Engine instances"""

    _engines = {
        'openai': OpenAIEngine,
        'ollama': OllamaEngine,
    }

    @classmethod
    def create(cls, engine_name: str = None, **kwargs) -> AIEngine:
        """
        Create an AI Engine instance

        Args:
            engine_name: Name of the engine ('openai' or 'ollama')
            **kwargs: Additional arguments to pass to the engine constructor

        Returns:
            AIEngine instance

        Raises:
            ServiceUnavailableError: If engine_name is not supported
        """
        if engine_name is None:
            engine_name = os.getenv('ACTIVE_AI_ENGINE', 'openai')

        engine_name = str(engine_name).lower()

        if engine_name not in cls._engines:
            logger.error(
                "[AIEngineFactory] Engine '%s' not supported. Available engines: %s",
                engine_name, ', '.join(cls.get_available_engines())
            )
            raise ServiceUnavailableError('AI service not configured')

        engine_class = cls._engines[engine_name]
        return engine_class(**kwargs)

    @classmethod
    def get_available_engines(cls) -> list:
        """Get list of available engine names"""
        return list(cls._engines.keys())
