# explorer/utils/firestore.py
import pathlib
from functools import lru_cache

from google.cloud import firestore
from google.oauth2 import service_account

from explorer.utils.config import settings
from explorer.utils.logger import logger


@lru_cache(maxsize=1)
def get_firestore_client() -> firestore.AsyncClient:
    """Create the Firestore client once from the configured credentials."""
    path = settings.firestore_credentials_path
    if path and pathlib.Path(path).exists():
        creds = service_account.Credentials.from_service_account_file(path)
        project = settings.firestore_project or creds.project_id
        logger.info(f"Connecting to Firestore project '{project}' with service account credentials.")
        return firestore.AsyncClient(project=project, credentials=creds)

    # Fall back to application default credentials
    logger.info("Connecting to Firestore with application default credentials.")
    return firestore.AsyncClient(project=settings.firestore_project)
