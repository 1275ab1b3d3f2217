import os

class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev_secret_key')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///parts.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # inventory snapshot key in the blob table
    INVENTORY_STORAGE_KEY = os.getenv('INVENTORY_STORAGE_KEY', 'partlife_manager_data')
    SEED_DEFAULT_PARTS = os.getenv('SEED_DEFAULT_PARTS', '1') not in ('0', 'false', 'no')

    # maintenance advisor (Gemini REST API)
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')
    ADVISOR_MODEL = os.getenv('ADVISOR_MODEL', 'gemini-2.5-flash')
    ADVISOR_BASE_URL = os.getenv('ADVISOR_BASE_URL', 'https://generativelanguage.googleapis.com/v1beta')
    ADVISOR_TIMEOUT = float(os.getenv('ADVISOR_TIMEOUT', '30'))
