"""
storefront/config.py - Application configuration and Firestore initialization.

This module defines a Pydantic BaseSettings class to load configuration from the
environment, and builds the Firestore client through the Firebase Admin SDK
using the provided credentials. Nothing here runs at import time: the client is
created by `init_firestore()` and handed to the repositories explicitly.
"""
from functools import lru_cache
from typing import Literal, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # "memory" keeps everything in-process (local development, tests)
    store_backend: Literal["firestore", "memory"] = Field("firestore")
    firebase_collection_prefix: str = Field("")

    firebase_cred_file: str = Field("firebase_service_account.json")
    firebase_project_id: Optional[str] = None

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = None
    firebase_private_key: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_client_id: Optional[str] = None
    firebase_auth_uri: Optional[str] = None
    firebase_token_uri: Optional[str] = None
    firebase_auth_provider_x509_cert_url: Optional[str] = None
    firebase_client_x509_cert_url: Optional[str] = None

    # Used by the /login proxy (Identity Toolkit REST API)
    firebase_web_api_key: str = Field("")

    # Accept `mock_jwt_token_<uid>` bearer tokens (development only)
    allow_mock_tokens: bool = Field(False)

    # Off: an empty cart checks out with total 0
    require_non_empty_cart: bool = Field(False)

    debug: bool = Field(False)
    allowed_origins: str = Field("*")  # Comma-separated list or '*' for all

    log_level: str = Field("INFO")
    log_format: str = Field("%(asctime)s %(levelname)s %(name)s: %(message)s")

    smtp_host: str = "localhost"
    smtp_port: int = 465
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from: Optional[str] = None
    smtp_use_starttls: bool = False  # true for 587
    smtp_sender_name: Optional[str] = "Book Shop"

    receipt_shop_name: str = "Book Shop"
    receipt_tin: str = "123456789"

    def collection(self, name: str) -> str:
        """Collection name with the optional FIREBASE_COLLECTION_PREFIX applied."""
        prefix = (self.firebase_collection_prefix or "").strip()
        return f"{prefix}{name}" if prefix else name

    def cors_origins(self) -> list:
        if not self.allowed_origins:
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def _credential(settings: Settings):
    # Prefer split env vars (Cloud Run); fall back to the service account file
    if all([
        settings.firebase_private_key_id,
        settings.firebase_private_key,
        settings.firebase_client_email,
        settings.firebase_client_id,
        settings.firebase_auth_uri,
        settings.firebase_token_uri,
        settings.firebase_auth_provider_x509_cert_url,
        settings.firebase_client_x509_cert_url,
    ]):
        cred_dict = {
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "private_key_id": settings.firebase_private_key_id,
            "private_key": settings.firebase_private_key.replace("\\n", "\n"),
            "client_email": settings.firebase_client_email,
            "client_id": settings.firebase_client_id,
            "auth_uri": settings.firebase_auth_uri,
            "token_uri": settings.firebase_token_uri,
            "auth_provider_x509_cert_url": settings.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": settings.firebase_client_x509_cert_url,
        }
        return credentials.Certificate(cred_dict)
    return credentials.Certificate(settings.firebase_cred_file)


def init_firestore(settings: Settings):
    """Initialize the Firebase Admin SDK (once) and return a Firestore client."""
    try:
        firebase_app = firebase_admin.get_app()
    except ValueError:
        options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
        firebase_app = firebase_admin.initialize_app(_credential(settings), options)
    return firestore.client(app=firebase_app)
