import os
from dotenv import load_dotenv

load_dotenv()


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Single shared constitution unless the client selects another one
    DEFAULT_CONSTITUTION_ID = os.getenv("DEFAULT_CONSTITUTION_ID", "ieee-ucsd-constitution")
    DEFAULT_CONSTITUTION_TITLE = os.getenv(
        "DEFAULT_CONSTITUTION_TITLE", "IEEE at UC San Diego Constitution"
    )
    DEFAULT_ORGANIZATION_NAME = os.getenv("DEFAULT_ORGANIZATION_NAME", "IEEE at UC San Diego")

    # Print layout
    TOC_ENTRIES_PER_PAGE = int(os.getenv("TOC_ENTRIES_PER_PAGE", 25))
    CHARS_PER_ESTIMATED_PAGE = int(os.getenv("CHARS_PER_ESTIMATED_PAGE", 2000))

    AUDIT_READ_LIMIT = int(os.getenv("AUDIT_READ_LIMIT", 100))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///constitution-dev.db")


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "testing-secret-key-with-enough-length"
    DEFAULT_CONSTITUTION_ID = "ieee-ucsd-constitution"


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
