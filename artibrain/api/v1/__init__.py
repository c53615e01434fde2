"""
API v1 routes.
"""

from fastapi import APIRouter

from artibrain.api.v1 import auth, authors, manage_posts, posts, upload, users
from artibrain.api.v1.taxonomy import categories_router, tags_router

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(posts.router, prefix="/posts", tags=["Posts"])
router.include_router(manage_posts.router, prefix="/manage/posts", tags=["Post Management"])
router.include_router(categories_router, prefix="/categories", tags=["Categories"])
router.include_router(tags_router, prefix="/tags", tags=["Tags"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(authors.router, prefix="/authors", tags=["Authors"])
router.include_router(upload.router, prefix="/upload", tags=["Uploads"])
