"""
Store-facing services. Each takes the request's principal explicitly and
returns either its result or a Failure.
"""

from artibrain.services.posts import PostService
from artibrain.services.taxonomy import TaxonomyService
from artibrain.services.uploads import UploadService
from artibrain.services.users import UserService

__all__ = [
    "PostService",
    "TaxonomyService",
    "UploadService",
    "UserService",
]
