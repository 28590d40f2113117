"""
KBlog Backend — Comment Route Handlers
=======================================

What:  GET/POST /comments and GET/DELETE /comments/{comment_id}.
How:   Same shape as the post handlers. Creating a comment does not look at
       the post repository, so postId may name a post that does not exist.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from kblog.exceptions import NotFoundError
from kblog.repositories.store import BlogStore, get_store
from kblog.schemas.blog import Comment, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["Comments"])

NOT_FOUND_RESPONSES = {
    404: {"description": "Comment not found (NOT_FOUND_STATUS=404)", "model": ErrorResponse},
    500: {"description": "Comment not found, or server error", "model": ErrorResponse},
}


@router.get("", response_model=List[Comment], summary="List all comments")
def list_comments(store: BlogStore = Depends(get_store)) -> List[Comment]:
    return store.comments.get_all()


@router.post(
    "",
    response_model=Comment,
    responses={500: {"description": "Malformed comment body", "model": ErrorResponse}},
    summary="Create a comment",
)
def create_comment(comment: Comment, store: BlogStore = Depends(get_store)) -> Comment:
    saved = store.comments.save(comment)
    logger.info("Created comment %d on post %d", saved.id, saved.post_id)
    return saved


@router.get(
    "/{comment_id}",
    response_model=Comment,
    responses=NOT_FOUND_RESPONSES,
    summary="Get a single comment by ID",
)
def get_comment(comment_id: int, store: BlogStore = Depends(get_store)) -> Comment:
    comment = store.comments.get_by_id(comment_id)
    if comment is None:
        raise NotFoundError(resource="comment", resource_id=comment_id)
    return comment


@router.delete(
    "/{comment_id}",
    response_class=Response,
    responses=NOT_FOUND_RESPONSES,
    summary="Delete a comment",
)
def delete_comment(comment_id: int, store: BlogStore = Depends(get_store)) -> Response:
    if not store.comments.remove(comment_id):
        raise NotFoundError(resource="comment", resource_id=comment_id)
    return Response(status_code=200)
