"""Configuration settings for the contact relay API.

This module manages environment variables and application settings.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings.

    Attributes:
        API_PREFIX: Path prefix for the relay endpoints
        PROJECT_NAME: Name of the project
        DEBUG: Debug mode flag
        PORT: Port the server listens on
        API_KEY: Shared secret expected in the x-api-key header
        SMTP_HOST: SMTP host; when unset a disposable test mailbox is used
        SMTP_PORT: SMTP port, kept as the raw string from the environment
        SMTP_USER: SMTP username
        SMTP_PASS: SMTP password
        FROM_EMAIL: Sender address of relayed messages
        TO_EMAIL: Recipient address of relayed messages
    """
    def __init__(self):
        self.API_PREFIX = "/api"
        self.PROJECT_NAME = "Contact Relay API"
        self.DEBUG = os.getenv("DEBUG", "False").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.PORT = int(os.getenv("PORT") or 3001)

        # Shared secret
        self.API_KEY = os.getenv("API_KEY", "")

        # SMTP Settings
        self.SMTP_HOST = os.getenv("SMTP_HOST")
        self.SMTP_PORT = os.getenv("SMTP_PORT")
        self.SMTP_USER = os.getenv("SMTP_USER")
        self.SMTP_PASS = os.getenv("SMTP_PASS")

        # Email Settings
        self.FROM_EMAIL = os.getenv("FROM_EMAIL")
        self.TO_EMAIL = os.getenv("TO_EMAIL")
        self.SUBJECT_PREFIX = os.getenv("SUBJECT_PREFIX", "[Web問合せ]")

        # Test mailbox (Ethereal) Settings
        self.TEST_ACCOUNT_API_URL = os.getenv("TEST_ACCOUNT_API_URL", "https://api.nodemailer.com/user")

        self.INCLUDE_ERROR_DETAILS = (
            os.getenv("INCLUDE_ERROR_DETAILS", "False").lower() == "true" or self.DEBUG
        )


settings = Settings()
