import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rcc_portal.models.news import NewsPost
from rcc_portal.schemas.news import NewsCreate, NewsUpdate
from rcc_portal.services.errors import NotFoundError

logger = logging.getLogger(__name__)


def list_published(db: Session, *, page: int = 1, page_size: int = 9) -> tuple[list[NewsPost], int]:
    total = db.scalar(select(func.count(NewsPost.id)).where(NewsPost.publicado.is_(True)))
    stmt = (
        select(NewsPost)
        .where(NewsPost.publicado.is_(True))
        .order_by(NewsPost.created_at.desc(), NewsPost.id.desc())
        .offset((max(page, 1) - 1) * page_size)
        .limit(page_size)
    )
    return list(db.scalars(stmt)), int(total or 0)


def list_all(db: Session) -> list[NewsPost]:
    return list(db.scalars(select(NewsPost).order_by(NewsPost.created_at.desc(), NewsPost.id.desc())))


def get_news(db: Session, news_id: int, *, include_unpublished: bool = False) -> NewsPost:
    post = db.get(NewsPost, news_id)
    if not post or (not post.publicado and not include_unpublished):
        raise NotFoundError("Publicação não encontrada.")
    return post


def create_news(db: Session, payload: NewsCreate, *, autor_id: Optional[int]) -> NewsPost:
    post = NewsPost(**payload.model_dump(), autor_id=autor_id)
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("News post %s created by profile %s", post.id, autor_id)
    return post


def update_news(db: Session, news_id: int, payload: NewsUpdate) -> NewsPost:
    post = get_news(db, news_id, include_unpublished=True)
    values = payload.model_dump(exclude_unset=True)
    for key, value in values.items():
        setattr(post, key, value)
    db.commit()
    db.refresh(post)
    logger.info("News post %s updated (%s)", post.id, ", ".join(sorted(values)))
    return post


def delete_news(db: Session, news_id: int) -> NewsPost:
    post = get_news(db, news_id, include_unpublished=True)
    db.delete(post)
    db.commit()
    logger.info("News post %s deleted", news_id)
    return post


def set_news_image(db: Session, news_id: int, url: str) -> tuple[NewsPost, Optional[str]]:
    """Point the post at a new image; returns the post and the replaced URL."""
    post = get_news(db, news_id, include_unpublished=True)
    previous = post.imagem_url
    post.imagem_url = url
    db.commit()
    db.refresh(post)
    return post, previous
