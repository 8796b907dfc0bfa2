"""
Data layer

Hosted-service facade, entity vocabularies and Pydantic schemas.
"""

from clerkdesk.db.backend import BackendError, HostedBackend, Result, get_backend
from clerkdesk.db import models, schemas

__all__ = [
    'BackendError',
    'HostedBackend',
    'Result',
    'get_backend',
    'models',
    'schemas'
]
