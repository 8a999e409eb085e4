# 📄 File: sprout/modules/community/presentation/api/v1/forums.py
# 🧭 Purpose (Layman Explanation):
# The web addresses for community boards: browsing, creating and running boards, and
# posting, commenting and voting inside them.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router over ForumService. Reading is public; every write needs a signed-in
# member.
#
# 🔗 Dependencies:
# - FastAPI router, UploadFile
# - ForumService, forum and user schemas
#
# 🔄 Connected Modules / Calls From:
# - sprout.api.v1.router

from fastapi import APIRouter, Depends, File, UploadFile, status

from sprout.modules.community.domain.services.forum_service import ForumService
from sprout.modules.community.presentation.api.schemas.forum_schemas import (
    CommentCreateRequest,
    CommentListResponse,
    CommentResponse,
    ForumCreateRequest,
    ForumListResponse,
    ForumResponse,
    ForumUpdateRequest,
    ModeratorAddRequest,
    ModeratorListResponse,
    PostCreateRequest,
    PostListResponse,
    PostResponse,
    VoteRequest,
)
from sprout.modules.user_management.presentation.api.schemas.user_schemas import PublicProfileResponse
from sprout.shared.core.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/forums", tags=["Community"])


# =============================================================================
# FORUMS
# =============================================================================

@router.get("", response_model=ForumListResponse, summary="List forums")
async def get_forums(forum_service: ForumService = Depends()) -> ForumListResponse:
    forums = await forum_service.get_forums()
    return ForumListResponse(forums=[ForumResponse.from_domain(f) for f in forums])


@router.post("", response_model=ForumResponse, status_code=status.HTTP_201_CREATED, summary="Create a forum")
async def create_forum(
    request: ForumCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> ForumResponse:
    forum = await forum_service.create_forum(current_user.user_id, request.name, request.description)
    return ForumResponse.from_domain(forum)


@router.get("/{forum_id}", response_model=ForumResponse, summary="Get a forum")
async def get_forum(forum_id: str, forum_service: ForumService = Depends()) -> ForumResponse:
    return ForumResponse.from_domain(await forum_service.get_forum_by_id(forum_id))


@router.patch(
    "/{forum_id}",
    response_model=ForumResponse,
    summary="Update forum settings",
    responses={403: {"description": "Not a moderator"}},
)
async def update_forum(
    forum_id: str,
    request: ForumUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> ForumResponse:
    forum = await forum_service.update_forum_settings(
        forum_id, current_user.user_id, name=request.name, description=request.description
    )
    return ForumResponse.from_domain(forum)


@router.post("/{forum_id}/banner", response_model=ForumResponse, summary="Upload a forum banner")
async def upload_forum_banner(
    forum_id: str,
    file: UploadFile = File(...),
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> ForumResponse:
    data = await file.read()
    forum = await forum_service.upload_forum_banner(
        forum_id,
        current_user.user_id,
        filename=file.filename or "banner",
        data=data,
        content_type=file.content_type or "application/octet-stream",
    )
    return ForumResponse.from_domain(forum)


@router.delete(
    "/{forum_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a forum",
    responses={403: {"description": "Not the creator"}},
)
async def delete_forum(
    forum_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> None:
    await forum_service.delete_forum(forum_id, current_user.user_id)


@router.post("/{forum_id}/join", response_model=ForumResponse, summary="Join a forum")
async def join_forum(
    forum_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> ForumResponse:
    return ForumResponse.from_domain(await forum_service.join_forum(forum_id, current_user.user_id))


@router.post("/{forum_id}/leave", response_model=ForumResponse, summary="Leave a forum")
async def leave_forum(
    forum_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> ForumResponse:
    return ForumResponse.from_domain(await forum_service.leave_forum(forum_id, current_user.user_id))


# =============================================================================
# MODERATORS
# =============================================================================

@router.get("/{forum_id}/moderators", response_model=ModeratorListResponse, summary="List moderators")
async def get_moderators(forum_id: str, forum_service: ForumService = Depends()) -> ModeratorListResponse:
    moderators = await forum_service.get_moderators(forum_id)
    return ModeratorListResponse(moderators=[PublicProfileResponse.from_domain(u) for u in moderators])


@router.post("/{forum_id}/moderators", response_model=ForumResponse, summary="Add a moderator by username")
async def add_moderator(
    forum_id: str,
    request: ModeratorAddRequest,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> ForumResponse:
    forum = await forum_service.add_moderator(forum_id, current_user.user_id, request.username)
    return ForumResponse.from_domain(forum)


@router.delete("/{forum_id}/moderators/{user_id}", response_model=ForumResponse, summary="Remove a moderator")
async def remove_moderator(
    forum_id: str,
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> ForumResponse:
    forum = await forum_service.remove_moderator(forum_id, current_user.user_id, user_id)
    return ForumResponse.from_domain(forum)


# =============================================================================
# POSTS
# =============================================================================

@router.get("/{forum_id}/posts", response_model=PostListResponse, summary="List posts")
async def get_posts(forum_id: str, forum_service: ForumService = Depends()) -> PostListResponse:
    posts = await forum_service.get_posts_for_forum(forum_id)
    return PostListResponse(posts=[PostResponse.from_domain(p) for p in posts])


@router.post(
    "/{forum_id}/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Write a post",
)
async def create_post(
    forum_id: str,
    request: PostCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> PostResponse:
    post = await forum_service.add_forum_post(
        forum_id, current_user.user_id, request.title, request.content, image_url=request.image_url
    )
    return PostResponse.from_domain(post)


@router.get("/{forum_id}/posts/{post_id}", response_model=PostResponse, summary="Get a post")
async def get_post(forum_id: str, post_id: str, forum_service: ForumService = Depends()) -> PostResponse:
    return PostResponse.from_domain(await forum_service.get_post_by_id(forum_id, post_id))


@router.delete(
    "/{forum_id}/posts/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a post",
    responses={403: {"description": "Not the author or a moderator"}},
)
async def delete_post(
    forum_id: str,
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> None:
    await forum_service.delete_post(forum_id, post_id, current_user.user_id)


@router.post(
    "/{forum_id}/posts/{post_id}/vote",
    response_model=PostResponse,
    summary="Vote on a post",
    description="Voting the same way twice removes the vote; voting the other way switches it",
)
async def vote_on_post(
    forum_id: str,
    post_id: str,
    request: VoteRequest,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> PostResponse:
    post = await forum_service.toggle_post_vote(forum_id, post_id, current_user.user_id, request.vote)
    return PostResponse.from_domain(post)


# =============================================================================
# COMMENTS
# =============================================================================

@router.get("/{forum_id}/posts/{post_id}/comments", response_model=CommentListResponse, summary="List comments")
async def get_comments(
    forum_id: str,
    post_id: str,
    forum_service: ForumService = Depends(),
) -> CommentListResponse:
    comments = await forum_service.get_comments_for_post(forum_id, post_id)
    return CommentListResponse(comments=[CommentResponse.from_domain(c) for c in comments])


@router.post(
    "/{forum_id}/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
)
async def create_comment(
    forum_id: str,
    post_id: str,
    request: CommentCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    forum_service: ForumService = Depends(),
) -> CommentResponse:
    comment = await forum_service.add_comment_to_post(forum_id, post_id, current_user.user_id, request.text)
    return CommentResponse.from_domain(comment)
