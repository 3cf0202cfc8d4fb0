import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError

from src.config import Settings
from src.database import AsyncSession
from src.links.constants import LINKS_PAGE_SIZE
from src.links.exceptions import (
    DuplicateKeyError,
    InvalidExpirationError,
    KeyGenerationError,
    LinkNotFoundError,
    TagNotFoundError,
)
from src.links.metatags import METATAG_FIELDS, fetch_metatags
from src.links.models import Link, link_tags
from src.links.schemes import CreateLinkRequest, GetLinksQuery, LinkResponse, LinksCountQuery, LinksQuery, \
    UpdateLinkRequest
from src.links.utils import build_qr_code, build_short_link, invalidate_cache, utm_params_from_url
from src.tags.models import Tag
from src.tags.schemes import TagResponse
from src.workspaces.models import Workspace

logger = logging.getLogger(__name__)

settings = Settings()

KEY_ALPHABET = string.ascii_letters + string.digits

SORT_COLUMNS = {
    "createdAt": Link.created_at,
    "clicks": Link.clicks,
    "lastClicked": Link.last_clicked,
}


class LinkService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, workspace: Workspace, link_id: str) -> Link:
        link = (await self.session.execute(
            select(Link).filter(
                Link.id == link_id,
                Link.workspace_id == workspace.id
            )
        )).scalar_one_or_none()
        if not link:
            raise LinkNotFoundError()
        return link

    async def get_by_domain_key(self, workspace: Workspace, domain: str, key: str) -> Link:
        link = (await self.session.execute(
            select(Link).filter(
                Link.domain == domain,
                Link.key == key,
                Link.workspace_id == workspace.id
            )
        )).scalar_one_or_none()
        if not link:
            raise LinkNotFoundError()
        return link

    async def create(
            self,
            workspace: Workspace,
            data: CreateLinkRequest,
            user_id: Optional[str] = None
    ) -> Link:
        link = await self._build_link(workspace, data, user_id=user_id)

        try:
            self.session.add(link)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateKeyError(link.domain, link.key)

        logger.info(f"Created link {link.domain}/{link.key} in workspace {workspace.id}")
        return link

    async def bulk_create(
            self,
            workspace: Workspace,
            items: list[CreateLinkRequest],
            user_id: Optional[str] = None
    ) -> list[Link]:
        # вся пачка создается одной транзакцией: либо все ссылки, либо ни одной
        links = []
        reserved = set()
        for data in items:
            link = await self._build_link(workspace, data, user_id=user_id, reserved=reserved)
            reserved.add((link.domain, link.key))
            links.append(link)
        pairs = [(link.domain, link.key) for link in links]

        try:
            self.session.add_all(links)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            # ключ успели занять параллельно, ищем какой именно
            for domain, key in pairs:
                if not await self._is_key_available(domain, key):
                    raise DuplicateKeyError(domain, key)
            raise

        logger.info(f"Created {len(links)} links in workspace {workspace.id}")
        return links

    async def update(
            self,
            workspace: Workspace,
            link_id: str,
            data: UpdateLinkRequest
    ) -> Link:
        link = await self.get(workspace, link_id)
        old_domain, old_key = link.domain, link.key

        changes = data.model_dump(exclude_unset=True)
        changes.pop("prefix", None)
        tag_ids = changes.pop("tag_ids", None)
        tag_names = changes.pop("tag_names", None)

        domain = changes.get("domain", link.domain)
        key = changes.get("key", link.key)
        if (domain, key) != (old_domain, old_key) and not await self._is_key_available(domain, key):
            raise DuplicateKeyError(domain, key)

        if "expires_at" in changes:
            changes["expires_at"] = parse_expires_at(changes["expires_at"])
        if "url" in changes:
            changes.update(utm_params_from_url(changes["url"]))
        # метатеги перезапрашиваются при смене url или proxy либо при сбросе одного из них
        refetch = "url" in changes or "proxy" in changes or any(
            field in changes and changes[field] is None for field in METATAG_FIELDS
        )
        if refetch and changes.get("proxy", link.proxy):
            current = {field: changes.get(field, getattr(link, field)) for field in METATAG_FIELDS}
            changes.update(await self._with_metatags(changes.get("url", link.url), current))

        for field, value in changes.items():
            setattr(link, field, value)
        if tag_ids is not None or tag_names is not None:
            link.tags = await self.find_tags_by_ids_or_names(workspace.id, tag_ids, tag_names)

        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateKeyError(domain, key)

        await invalidate_cache(workspace_id=workspace.id, domain=old_domain, key=old_key)
        logger.info(f"Updated link {link.id}: {', '.join(sorted(changes)) or 'no changes'}")
        return link

    async def find_tags_by_ids_or_names(
            self,
            workspace_id: str,
            ids: Optional[list[str]] = None,
            names: Optional[list[str]] = None
    ) -> list[Tag]:
        tags = []

        if ids:
            found = {tag.id: tag for tag in (await self.session.execute(
                select(Tag).filter(Tag.workspace_id == workspace_id, Tag.id.in_(ids))
            )).scalars().all()}
            missing = [tag_id for tag_id in ids if tag_id not in found]
            if missing:
                raise TagNotFoundError(missing)
            tags.extend(found[tag_id] for tag_id in ids)

        if names:
            # имена тегов сравниваются без учета регистра
            found = {tag.name.lower(): tag for tag in (await self.session.execute(
                select(Tag).filter(
                    Tag.workspace_id == workspace_id,
                    func.lower(Tag.name).in_([name.lower() for name in names])
                )
            )).scalars().all()}
            missing = [name for name in names if name.lower() not in found]
            if missing:
                raise TagNotFoundError(missing)
            for name in names:
                if found[name.lower()] not in tags:
                    tags.append(found[name.lower()])

        return tags

    async def get_links(self, workspace: Workspace, query: GetLinksQuery) -> list[Link]:
        page = max(query.page or 1, 1)
        result = (await self.session.execute(
            select(Link)
            .filter(*self._filters(workspace, query))
            .order_by(SORT_COLUMNS[query.sort].desc().nulls_last(), Link.id)
            .offset((page - 1) * LINKS_PAGE_SIZE)
            .limit(LINKS_PAGE_SIZE)
        )).scalars().all()
        return [row for row in result]

    async def count_links(self, workspace: Workspace, query: LinksCountQuery):
        filters = self._filters(workspace, query)

        if query.group_by == "domain":
            rows = (await self.session.execute(
                select(Link.domain, func.count(Link.id))
                .filter(*filters)
                .group_by(Link.domain)
                .order_by(func.count(Link.id).desc(), Link.domain)
            )).all()
            return [{"domain": domain, "count": count} for domain, count in rows]

        if query.group_by == "tagId":
            grouped = link_tags.alias("grouped_tags")
            rows = (await self.session.execute(
                select(grouped.c.tag_id, func.count(Link.id))
                .select_from(Link)
                .join(grouped, grouped.c.link_id == Link.id)
                .filter(*filters)
                .group_by(grouped.c.tag_id)
                .order_by(func.count(Link.id).desc(), grouped.c.tag_id)
            )).all()
            return [{"tagId": tag_id, "count": count} for tag_id, count in rows]

        return (await self.session.execute(
            select(func.count(Link.id)).filter(*filters)
        )).scalar_one()

    async def generate_key(self, domain: str, prefix: Optional[str] = None, reserved=frozenset()) -> str:
        for _ in range(settings.KEY_GENERATION_ATTEMPTS):
            key = random_key(prefix)
            if (domain, key) not in reserved and await self._is_key_available(domain, key):
                return key
            logger.warning(f"Key collision for {domain}/{key}")
        raise KeyGenerationError(domain)

    def _filters(self, workspace: Workspace, query: LinksQuery) -> list:
        filters = [Link.workspace_id == workspace.id]
        if query.domain:
            filters.append(Link.domain == query.domain)
        if query.tag_ids:
            filters.append(Link.tags.any(Tag.id.in_(query.tag_ids)))
        if query.tag_names:
            filters.append(Link.tags.any(func.lower(Tag.name).in_([name.lower() for name in query.tag_names])))
        if query.search:
            filters.append(or_(
                Link.key.ilike(f"%{query.search}%"),
                Link.url.ilike(f"%{query.search}%")
            ))
        if query.user_id:
            filters.append(Link.user_id == query.user_id)
        if not query.show_archived:
            filters.append(Link.archived.is_(False))
        if query.with_tags:
            filters.append(Link.tags.any())
        return filters

    async def _build_link(
            self,
            workspace: Workspace,
            data: CreateLinkRequest,
            user_id: Optional[str] = None,
            reserved=frozenset()
    ) -> Link:
        domain = data.domain or settings.SHORT_DOMAIN

        if data.key:
            key = data.key
            if (domain, key) in reserved or not await self._is_key_available(domain, key):
                raise DuplicateKeyError(domain, key)
        else:
            key = await self.generate_key(domain, data.prefix, reserved)

        tags = await self.find_tags_by_ids_or_names(workspace.id, data.tag_ids, data.tag_names)

        fields = data.model_dump(exclude={"domain", "key", "prefix", "tag_ids", "tag_names"})
        fields["expires_at"] = parse_expires_at(fields["expires_at"])
        fields.update(utm_params_from_url(data.url))
        if data.proxy:
            fields.update(await self._with_metatags(data.url, fields))

        return Link(
            domain=domain,
            key=key,
            workspace_id=workspace.id,
            user_id=user_id,
            tags=tags,
            **fields
        )

    async def _with_metatags(self, url: str, fields: dict) -> dict:
        if all(fields.get(field) is not None for field in METATAG_FIELDS):
            return {}
        metatags = await fetch_metatags(url)
        return {
            field: fields.get(field) if fields.get(field) is not None else metatags.get(field)
            for field in METATAG_FIELDS
        }

    async def _is_key_available(self, domain: str, key: str) -> bool:
        result = (await self.session.execute(
            select(Link.id).filter(Link.domain == domain, Link.key == key)
        )).scalar_one_or_none()
        return result is None


def random_key(prefix: Optional[str] = None) -> str:
    key = "".join(secrets.choice(KEY_ALPHABET) for _ in range(settings.SHORT_KEY_LENGTH))
    prefix = prefix.strip("/") if prefix else None
    return f"{prefix}/{key}" if prefix else key


def parse_expires_at(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        expires_at = datetime.fromisoformat(value)
    except ValueError:
        raise InvalidExpirationError(value)
    if expires_at.tzinfo is not None:
        expires_at = expires_at.astimezone(timezone.utc).replace(tzinfo=None)
    return expires_at


def transform_link(link: Link) -> LinkResponse:
    short_link = build_short_link(link.domain, link.key)
    tags = [TagResponse.model_validate(tag) for tag in link.tags]
    return LinkResponse(
        id=link.id,
        domain=link.domain,
        key=link.key,
        url=link.url,
        archived=link.archived,
        expires_at=link.expires_at,
        expired_url=link.expired_url,
        password=link.password,
        proxy=link.proxy,
        title=link.title,
        description=link.description,
        image=link.image,
        rewrite=link.rewrite,
        ios=link.ios,
        android=link.android,
        geo=link.geo,
        public_stats=link.public_stats,
        tag_id=tags[0].id if tags else None,
        tags=tags,
        comments=link.comments,
        short_link=short_link,
        qr_code=build_qr_code(short_link),
        utm_source=link.utm_source,
        utm_medium=link.utm_medium,
        utm_campaign=link.utm_campaign,
        utm_term=link.utm_term,
        utm_content=link.utm_content,
        user_id=link.user_id,
        workspace_id=link.workspace_id,
        project_id=link.workspace_id,
        clicks=link.clicks,
        last_clicked=link.last_clicked,
        check_disabled=link.check_disabled,
        created_at=link.created_at,
        updated_at=link.updated_at
    )
