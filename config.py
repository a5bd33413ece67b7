import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Application configuration"""

    # Flask settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'True').lower() == 'true'

    # Settlement settings
    # Strict builds abort on a failed balance check; hardened builds fall back
    # to the naive transfer list with a warning.
    STRICT_VALIDATION = os.getenv('STRICT_VALIDATION', str(DEBUG)).lower() == 'true'
    DEFAULT_STRATEGY = os.getenv('DEFAULT_STRATEGY', 'greedy')

    # Application settings
    MAX_PARTICIPANTS = int(os.getenv('MAX_PARTICIPANTS', '5000'))
    MAX_AMOUNT = 1000000000
