"""
KBlog Backend — Post Route Handlers
====================================

What:  GET/POST /posts, GET/DELETE /posts/{post_id}, GET /posts/{post_id}/comments.
How:   Each handler calls exactly one BlogStore operation. Absence is turned
       into NotFoundError here; the global handler picks the status code.

Status codes:
    Every success is 200, including create and delete. A missing id answers
    with settings.not_found_status (500 unless configured to 404), and a
    malformed body or non-integer id answers 500.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from kblog.exceptions import NotFoundError
from kblog.repositories.store import BlogStore, get_store
from kblog.schemas.blog import Comment, ErrorResponse, Post

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

# Which of the two a missing id answers with depends on NOT_FOUND_STATUS
NOT_FOUND_RESPONSES = {
    404: {"description": "Post not found (NOT_FOUND_STATUS=404)", "model": ErrorResponse},
    500: {"description": "Post not found, or server error", "model": ErrorResponse},
}


@router.get("", response_model=List[Post], summary="List all posts")
def list_posts(store: BlogStore = Depends(get_store)) -> List[Post]:
    """All posts in creation order."""
    return store.posts.get_all()


@router.post(
    "",
    response_model=Post,
    responses={500: {"description": "Malformed post body", "model": ErrorResponse}},
    summary="Create a post",
)
def create_post(post: Post, store: BlogStore = Depends(get_store)) -> Post:
    """
    Store a new post and return it with its assigned id.

    Bodies normally omit id. If one is given the post is stored under that id,
    replacing any post already there.
    """
    saved = store.posts.save(post)
    logger.info("Created post %d", saved.id)
    return saved


@router.get(
    "/{post_id}",
    response_model=Post,
    responses=NOT_FOUND_RESPONSES,
    summary="Get a single post by ID",
)
def get_post(post_id: int, store: BlogStore = Depends(get_store)) -> Post:
    post = store.posts.get_by_id(post_id)
    if post is None:
        raise NotFoundError(resource="post", resource_id=post_id)
    return post


@router.delete(
    "/{post_id}",
    response_class=Response,
    responses=NOT_FOUND_RESPONSES,
    summary="Delete a post",
)
def delete_post(post_id: int, store: BlogStore = Depends(get_store)) -> Response:
    """
    Delete a post. Its comments are left in place and keep their post_id.
    """
    if not store.posts.remove(post_id):
        raise NotFoundError(resource="post", resource_id=post_id)
    return Response(status_code=200)


@router.get(
    "/{post_id}/comments",
    response_model=List[Comment],
    summary="List the comments of a post",
)
def list_post_comments(post_id: int, store: BlogStore = Depends(get_store)) -> List[Comment]:
    """
    Comments whose postId equals post_id, in creation order.

    The post itself is not looked up: an unknown post simply has no comments.
    """
    return store.comments_for_post(post_id)
