"""
AI Engines package
"""
from scilingo.ai_engines.base import AIEngine
from scilingo.ai_engines.openai_engine import OpenAIEngine
from scilingo.ai_engines.ollama_engine import OllamaEngine
from scilingo.ai_engines.factory import AIEngineFactory

__all__ = [
    'AIEngine',
    'OpenAIEngine',
    'OllamaEngine',
    'AIEngineFactory'
]
