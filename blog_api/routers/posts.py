"""Post router for creating, reading, updating, deleting and searching posts."""

import logging
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_api.database import get_db
from blog_api.models import Post, PostTag
from blog_api.schemas import PostCreate, PostUpdate, PostDetail, MessageResponse
from blog_api.auth import AuthenticatedIdentity, get_current_identity

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/post", tags=["Posts"])


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_details(posts: List[Post]) -> List[PostDetail]:
    return [PostDetail.model_validate(post) for post in posts]


def _commit(db: Session, failure_detail: str) -> None:
    """
    Commit the session, mapping store failures to a 500 response.

    Raises:
        HTTPException: If the commit fails
    """
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(failure_detail)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_detail
        )


def _get_post_or_404(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if not post:
        logger.warning(f"Post not found: {post_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return post


def _get_owned_post(db: Session, post_id: int, identity: AuthenticatedIdentity) -> Post:
    """
    Load a post the caller is allowed to modify.

    Raises:
        HTTPException: 404 if the post does not exist, 403 if the caller is not its author
    """
    post = _get_post_or_404(db, post_id)
    if post.author_id != identity.id:
        logger.warning(f"User {identity.id} denied access to post {post_id} owned by {post.author_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized access"
        )
    return post


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PostDetail)
def create_post(
    post_data: PostCreate,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """
    Create a new post owned by the caller.

    Args:
        post_data: Title, content, cover image, tags and published flag
        identity: Authenticated caller
        db: Database session

    Returns:
        PostDetail: The created post
    """
    logger.info(f"Creating new post for user {identity.id}: {post_data.title}")

    new_post = Post(
        title=post_data.title,
        content=post_data.content,
        cover_image=post_data.cover_image,
        author_id=identity.id,
        published=post_data.published
    )
    new_post.tags = post_data.tags
    db.add(new_post)
    _commit(db, "Failed to create post")
    db.refresh(new_post)

    logger.info(f"Post created successfully: {new_post.id}")
    return PostDetail.model_validate(new_post)


@router.get("", response_model=List[PostDetail])
def list_posts(db: Session = Depends(get_db)):
    """
    List all posts with their authors.

    Returns:
        List[PostDetail]: Every post
    """
    logger.info("Fetching all posts")
    posts = db.query(Post).order_by(Post.id).all()
    logger.info(f"Found {len(posts)} posts")
    return _to_details(posts)


# GET /api/post/tags is served by the unfiltered listing
router.add_api_route("/tags", list_posts, methods=["GET"], response_model=List[PostDetail])


@router.get("/all-tags", response_model=List[str])
def list_tags(db: Session = Depends(get_db)):
    """
    List every distinct tag in use.

    Returns:
        List[str]: Sorted tag names
    """
    rows = db.query(PostTag.name).distinct().order_by(PostTag.name).all()
    return [row.name for row in rows]


@router.get("/tags/{tag}", response_model=List[PostDetail])
def list_posts_by_tag(
    tag: str,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """
    List posts carrying the exact tag.

    Raises:
        HTTPException: If no post has the tag
    """
    logger.info(f"Fetching posts with tag: {tag}")
    posts = (
        db.query(Post)
        .filter(Post.tag_rows.any(PostTag.name == tag))
        .order_by(Post.id)
        .all()
    )
    if not posts:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return _to_details(posts)


@router.get("/search/{query}", response_model=List[PostDetail])
def search_posts(query: str, db: Session = Depends(get_db)):
    """
    Case-insensitive substring search over title, content and tags.

    Args:
        query: Text to look for
        db: Database session

    Returns:
        List[PostDetail]: Matching posts

    Raises:
        HTTPException: If nothing matches
    """
    logger.info(f"Searching posts for: {query}")
    pattern = f"%{_escape_like(query)}%"
    posts = (
        db.query(Post)
        .filter(or_(
            Post.title.ilike(pattern, escape="\\"),
            Post.content.ilike(pattern, escape="\\"),
            Post.tag_rows.any(PostTag.name.ilike(pattern, escape="\\"))
        ))
        .order_by(Post.id)
        .all()
    )
    logger.info(f"Search '{query}' matched {len(posts)} posts")
    if not posts:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return _to_details(posts)


@router.get("/user/posts/{user_id}", response_model=List[PostDetail])
def list_posts_by_user(
    user_id: int,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """
    List posts written by a user.

    Raises:
        HTTPException: If the user has no posts
    """
    logger.info(f"Fetching posts of user {user_id}")
    posts = db.query(Post).filter(Post.author_id == user_id).order_by(Post.id).all()
    if not posts:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No posts found for this user"
        )
    return _to_details(posts)


@router.get("/{post_id}", response_model=PostDetail)
def get_post(post_id: int, db: Session = Depends(get_db)):
    """
    Get a single post with its author.

    Raises:
        HTTPException: If post not found
    """
    logger.info(f"Fetching post {post_id}")
    return PostDetail.model_validate(_get_post_or_404(db, post_id))


@router.put("/{post_id}", response_model=PostDetail)
def update_post(
    post_id: int,
    update_data: PostUpdate,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """
    Partially update a post owned by the caller.

    Args:
        post_id: Post ID
        update_data: Fields to update
        identity: Authenticated caller
        db: Database session

    Returns:
        PostDetail: The updated post

    Raises:
        HTTPException: If post not found or the caller is not the author
    """
    logger.info(f"Updating post {post_id}")
    post = _get_owned_post(db, post_id, identity)

    if update_data.title:
        post.title = update_data.title
        logger.debug(f"Updated title for post {post_id}")

    if update_data.content:
        post.content = update_data.content
        logger.debug(f"Updated content for post {post_id}")

    if update_data.cover_image:
        post.cover_image = update_data.cover_image
        logger.debug(f"Updated cover_image for post {post_id}")

    if update_data.tags is not None:
        post.tags = update_data.tags
        logger.debug(f"Updated tags for post {post_id}")

    if update_data.published is not None:
        post.published = update_data.published
        logger.debug(f"Updated published for post {post_id}")

    post.updated_at = datetime.utcnow()
    _commit(db, "Failed to update the post")
    db.refresh(post)

    logger.info(f"Post {post_id} updated successfully")
    return PostDetail.model_validate(post)


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: int,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """
    Delete a post owned by the caller.

    Raises:
        HTTPException: If post not found or the caller is not the author
    """
    logger.info(f"Deleting post {post_id}")
    post = _get_owned_post(db, post_id, identity)

    db.delete(post)
    _commit(db, "Failed to delete post")

    logger.info(f"Post {post_id} deleted successfully")
    return {"message": "Post deleted successfully"}
