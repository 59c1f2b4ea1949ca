"""
Configuration settings for SciLingo
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///scilingo.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_INIT_DB = os.getenv('AUTO_INIT_DB', 'true').lower() == 'true'
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Forms are posted by the quiz client as JSON, not HTML forms
    WTF_CSRF_ENABLED = False

    # AI Engine settings
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OLLAMA_BASE_URL = os.getenv('OLLAMA_BASE_URL', 'http://localhost:11434')
    OLLAMA_MODEL = os.getenv('OLLAMA_MODEL', 'llama3')
    ACTIVE_AI_ENGINE = os.getenv('ACTIVE_AI_ENGINE', 'openai')
    ACTIVE_AI_MODEL = os.getenv('ACTIVE_AI_MODEL', 'gpt-4o-mini')

    # Lesson cache settings, read by cache_service.init_app (empty REDIS_HOST disables caching)
    REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
    REDIS_PORT = int(os.getenv('REDIS_PORT', 6379))
    REDIS_DB = int(os.getenv('REDIS_DB', 0))
    LESSON_CACHE_TTL = int(os.getenv('LESSON_CACHE_TTL', 86400))

    # Classroom settings
    CLASS_SECTIONS = ['8A', '8B', '8C', '8D', '8E', '8F']
    STUDENT_EMAIL_DOMAIN = os.getenv('STUDENT_EMAIL_DOMAIN', 'scilingoapp.internal')
    PRACTICE_QUESTION_COUNT = 10
    COMPETITION_SECONDS_PER_QUESTION = 15

    # XP price of each power-up
    POWER_UP_COSTS = {
        'fifty_fifty': 50,
        'hint': 30,
        'streak_shield': 100,
    }


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False

    # Database connection pooling for better performance
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 10,              # Number of connections to keep open
        'pool_recycle': 3600,          # Recycle connections after 1 hour
        'pool_pre_ping': True,         # Test connections before using
        'max_overflow': 20,            # Extra connections beyond pool_size
        'pool_timeout': 30             # Timeout for getting connection from pool
    }


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    AUTO_INIT_DB = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    OPENAI_API_KEY = 'test-key'
    REDIS_HOST = ''


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
