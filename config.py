import os
from dotenv import load_dotenv

load_dotenv()


#All settings come from the environment (or a local .env file) and land on this class
class Config:
    DB_PATH = os.getenv('DB_PATH', 'blog.db')

    # Bearer tokens are issued by the identity provider and only verified here
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_DECODE_AUDIENCE = os.getenv('JWT_AUDIENCE') or None
    JWT_TOKEN_LOCATION = ['headers']

    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY')
    GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemma-3-1b-it')

    BAD_WORDS = ["fuck", "shit", "damn", "bitch", "fuckoff"]
    EXCERPT_MAX_LENGTH = 200
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    JWT_SECRET_KEY = 'test-secret-key-with-enough-length-for-hs256'
    JWT_DECODE_AUDIENCE = None
    GEMINI_API_KEY = None
