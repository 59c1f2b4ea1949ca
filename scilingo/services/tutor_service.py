"""
Tutor chat and mini-lesson generation
"""
import logging

from flask import current_app

from scilingo import db
from scilingo.ai_engines.factory import AIEngineFactory
from scilingo.errors import NotFoundError, ValidationError
from scilingo.models.topic import Topic

logger = logging.getLogger(__name__)

MAX_HISTORY_TURNS = 20


class TutorService:
    """Thin layer between the student handlers and the completion API"""

    @staticmethod
    def _engine():
        config = current_app.config
        engine_name = config['ACTIVE_AI_ENGINE']
        if str(engine_name).lower() == 'ollama':
            options = {'model': config.get('OLLAMA_MODEL'), 'base_url': config.get('OLLAMA_BASE_URL')}
        else:
            options = {'model': config.get('ACTIVE_AI_MODEL'), 'api_key': config.get('OPENAI_API_KEY')}
        return AIEngineFactory.create(engine_name, **options)

    @staticmethod
    def _topic(topic_id) -> Topic:
        if topic_id is None:
            raise ValidationError('Missing topic')
        topic = db.session.get(Topic, topic_id)
        if topic is None:
            raise NotFoundError('Topic not found')
        return topic

    @classmethod
    def chat(cls, topic_id, message: str, history=None) -> str:
        """
        Ask the tutor about a topic

        Args:
            topic_id: Topic being reviewed
            message: Student's message
            history: Earlier turns (list of {'role', 'content'})

        Returns:
            Reply text
        """
        if not isinstance(message, str) or not message.strip():
            raise ValidationError('Missing required fields')
        if history is not None and not isinstance(history, list):
            raise ValidationError('History must be a list')

        topic = cls._topic(topic_id)
        history = (history or [])[-MAX_HISTORY_TURNS:]
        return cls._engine().chat(topic.title, topic.description, history, message.strip())

    @classmethod
    def lesson(cls, topic_id) -> dict:
        """Mini-lesson for a topic (cached per topic when Redis is up)"""
        topic = cls._topic(topic_id)
        lesson = cls._engine().generate_lesson(
            topic_title=topic.title,
            topic_description=topic.description,
            standard=topic.standard
        )
        logger.info("[TutorService] Lesson ready for topic %s", topic.id)
        return lesson
