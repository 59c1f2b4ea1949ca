"""
Base class for AI Engines
"""
import json
from abc import ABC, abstractmethod
from typing import Dict, Any, List

from scilingo.errors import LessonFormatError

CHAT_MAX_TOKENS = 300
CHAT_TEMPERATURE = 0.75
LESSON_MAX_TOKENS = 800
LESSON_TEMPERATURE = 0.7

LESSON_SYSTEM_PROMPT = """You are an engaging science teacher creating a quick mini-lesson for 8th grade students before they take a quiz. Your lessons are punchy, clear, and actually interesting.

You always return valid JSON in exactly this format:
{
  "hook": "A one-sentence attention-grabber that makes the topic feel exciting or relevant to real life.",
  "concepts": [
    {
      "emoji": "one relevant emoji",
      "title": "Short concept title (3-6 words)",
      "explanation": "2-3 sentences explaining this concept conversationally, with analogies or real-world examples."
    }
  ],
  "quickTip": "One sentence telling students what to pay extra attention to in the quiz."
}

Rules:
- Return 3 to 4 concepts. Never more, never less.
- Keep explanations conversational.
- Each emoji should match its concept.
- Only return valid JSON. No extra text, no markdown code fences."""


def tutor_system_prompt(topic_title: str, topic_description: str = None) -> str:
    """System instruction for the topic tutor chat"""
    summary = f"\nTopic summary: {topic_description}\n" if topic_description else ''
    return f"""You are a friendly, encouraging science tutor helping 8th grade students review "{topic_title}".
{summary}
Your rules:
- Keep every response SHORT: 2-4 sentences max.
- Be conversational and enthusiastic.
- Only answer questions related to {topic_title} or directly supporting science concepts.
- If a student asks about something unrelated, warmly redirect them back to {topic_title}.
- Use simple analogies and real-world examples that 8th graders can relate to.
- If a student is confused or stuck, be extra patient and encouraging."""


def lesson_prompt(topic_title: str, topic_description: str = None, standard: str = None) -> str:
    parts = [f'Generate a mini-lesson for the topic: "{topic_title}"']
    if standard:
        parts.append(f"Science standard: {standard}")
    if topic_description:
        parts.append(f"Topic context: {topic_description}")
    parts.append('Return the lesson as JSON following your instructions.')
    return '\n'.join(parts)


def normalize_history(history: List[Dict[str, str]]) -> List[Dict[str, str]]:
    """Chat history as OpenAI-style messages ('model' turns become 'assistant')"""
    messages = []
    for item in history or []:
        content = (item or {}).get('content')
        if not content:
            continue
        role = 'user' if item.get('role') == 'user' else 'assistant'
        messages.append({'role': role, 'content': content})
    return messages


def parse_lesson(raw: str) -> Dict[str, Any]:
    """
    Parse and check a mini-lesson returned by the model

    Args:
        raw: Raw model output

    Returns:
        Dict with 'hook', 'concepts' and 'quickTip'

    Raises:
        LessonFormatError: If the output is not a lesson
    """
    text = (raw or '').strip()
    # Extract JSON from response
    if '```json' in text:
        text = text.split('```json')[1].split('```')[0].strip()
    elif '```' in text:
        text = text.split('```')[1].split('```')[0].strip()

    try:
        lesson = json.loads(text)
    except json.JSONDecodeError as e:
        raise LessonFormatError('Failed to generate lesson') from e

    if not isinstance(lesson, dict):
        raise LessonFormatError('Failed to generate lesson')

    concepts = lesson.get('concepts')
    if (not isinstance(lesson.get('hook'), str)
            or not isinstance(lesson.get('quickTip'), str)
            or not isinstance(concepts, list)
            or not 3 <= len(concepts) <= 4
            or not all(isinstance(c, dict) and c.get('title') and c.get('explanation') for c in concepts)):
        raise LessonFormatError('Failed to generate lesson')

    return {
        'hook': lesson['hook'],
        'concepts': [{
            'emoji': c.get('emoji', ''),
            'title': c['title'],
            'explanation': c['explanation']
        } for c in concepts],
        'quickTip': lesson['quickTip']
    }


class AIEngine(ABC):
    """Abstract base class for AI engines"""

    name = None

    def __init__(self, api_key: str = None, model: str = None, **kwargs):
        """
        Initialize AI Engine

        Args:
            api_key: API key for the service (if required)
            model: Model name/identifier
            **kwargs: Additional configuration parameters
        """
        self.api_key = api_key
        self.model = model
        self.config = kwargs

    @abstractmethod
    def chat(self, topic_title: str, topic_description: str, history: List[Dict[str, str]],
             message: str) -> str:
        """
        Answer a student's question about a topic

        Args:
            topic_title: The topic being reviewed
            topic_description: Optional topic summary
            history: Previous turns as dicts with 'role' and 'content'
            message: The student's new message

        Returns:
            Tutor reply text
        """
        pass

    @abstractmethod
    def generate_lesson(self, topic_title: str, topic_description: str = None,
                        standard: str = None) -> Dict[str, Any]:
        """
        Generate a pre-quiz mini-lesson

        Args:
            topic_title: The topic name
            topic_description: Optional topic summary
            standard: Optional science standard code

        Returns:
            Dict with 'hook', 'concepts' (3-4) and 'quickTip'
        """
        pass
