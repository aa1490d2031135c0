"""Firebase foundation: app and Firestore client factories."""

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud.firestore import Client

from shared.config import FirebaseConfig


def create_firebase_app(
    config: FirebaseConfig, name: str | None = None
) -> firebase_admin.App:
    """Initialise a Firebase app from configuration.

    Uses the service-account file at ``credentials_path`` when set and
    Application Default Credentials otherwise (Cloud Run, GKE, local
    ``gcloud auth application-default login``). Without *name* the
    default app is created.
    """
    if config.credentials_path:
        cred = credentials.Certificate(config.credentials_path)
    else:
        cred = credentials.ApplicationDefault()

    options = {"projectId": config.project_id} if config.project_id else None
    if name is None:
        return firebase_admin.initialize_app(cred, options)
    return firebase_admin.initialize_app(cred, options, name=name)


def create_firestore_client(app: firebase_admin.App) -> Client:
    """Return the Firestore client bound to *app*."""
    return firestore.client(app)


def close_firebase_app(app: firebase_admin.App) -> None:
    """Release the app's cached service clients."""
    firebase_admin.delete_app(app)
