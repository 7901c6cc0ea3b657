from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile
from sqlalchemy.orm import Session

from rcc_portal.core.config import DEFAULT_PAGE_SIZE
from rcc_portal.database.db import get_db
from rcc_portal.deps import get_optional_profile, require_staff
from rcc_portal.models.profiles import Profile
from rcc_portal.schemas.news import NewsCreate, NewsListOut, NewsOut, NewsSummaryOut, NewsUpdate
from rcc_portal.schemas.pagination import window_out
from rcc_portal.services.errors import InvalidUploadError, NotFoundError
from rcc_portal.services.news import (
    create_news,
    delete_news,
    get_news,
    list_all,
    list_published,
    set_news_image,
    update_news,
)
from rcc_portal.services.storage import get_storage
from rcc_portal.utils.files import save_upload

router = APIRouter(prefix="/news", tags=["news"])


@router.get("", response_model=NewsListOut)
def news_list(
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db),
):
    items, total = list_published(db, page=page, page_size=page_size)
    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "pagination": window_out(page, total, page_size),
    }


@router.get("/manage", response_model=list[NewsSummaryOut])
def manage_news(_: Profile = Depends(require_staff), db: Session = Depends(get_db)):
    return list_all(db)


@router.post("", response_model=NewsOut, status_code=201)
def new_post(payload: NewsCreate, profile: Profile = Depends(require_staff), db: Session = Depends(get_db)):
    return create_news(db, payload, autor_id=profile.id)


@router.get("/{news_id}", response_model=NewsOut)
def news_detail(
    news_id: int,
    profile: Optional[Profile] = Depends(get_optional_profile),
    db: Session = Depends(get_db),
):
    try:
        return get_news(db, news_id, include_unpublished=bool(profile and profile.is_staff))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{news_id}", response_model=NewsOut)
def edit_post(
    news_id: int,
    payload: NewsUpdate,
    _: Profile = Depends(require_staff),
    db: Session = Depends(get_db),
):
    try:
        return update_news(db, news_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{news_id}", status_code=204)
def remove_post(news_id: int, _: Profile = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        post = delete_news(db, news_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    get_storage().delete_by_url("news_images", post.imagem_url)
    return Response(status_code=204)


@router.post("/{news_id}/image", response_model=NewsOut)
async def upload_news_image(
    news_id: int,
    file: UploadFile = File(...),
    profile: Profile = Depends(require_staff),
    db: Session = Depends(get_db),
):
    try:
        get_news(db, news_id, include_unpublished=True)
        stored = await save_upload(file, "news_images", str(profile.id))
        post, previous = set_news_image(db, news_id, stored.url)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if previous and previous != post.imagem_url:
        get_storage().delete_by_url("news_images", previous)
    return post
