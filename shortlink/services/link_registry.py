"""
Link Registry

This service owns the short_links table:
- Creating links with a generated or user-requested short code
- Resolving a short code on the redirect path
- Listing, updating and deleting links on behalf of their owner

Design Decisions:
- Expected failures (bad URL, code taken, storage trouble) are returned as
  Failure values so callers can show a specific message
- Code uniqueness is enforced by the unique index on short_links.code; the
  existence check before insert only saves a round of IntegrityError
- Generated codes are retried a bounded number of times on collision
- Deleting a link removes its visit records in the same transaction
"""

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.exceptions import ErrorKind, Failure
from shortlink.core.setting import settings
from shortlink.core.validators import is_valid_custom_code, is_valid_url, to_naive_utc
from shortlink.db.models import ShortLink, VisitRecord
from shortlink.services.code_generator import generate_short_code

logger = logging.getLogger(__name__)

# Fields an owner may change after creation
UPDATABLE_FIELDS = frozenset({"title", "expires_at"})


class LinkRegistry:
    """
    Core business logic for short links.

    Handles URL validation, code allocation and the owner-scoped CRUD
    operations. Separated from the API layer for testability.
    """

    def __init__(
        self,
        session: AsyncSession,
        code_generator: Callable[[int], str] = generate_short_code,
        code_length: Optional[int] = None,
        max_retries: Optional[int] = None,
    ):
        """
        Initialize the link registry.

        Args:
            session: Database session
            code_generator: Callable producing a random code of a given length
            code_length: Length of generated codes (default from settings)
            max_retries: Attempts at finding a free generated code (default from settings)
        """
        self.session = session
        self.code_generator = code_generator
        self.code_length = settings.SHORT_CODE_LENGTH if code_length is None else code_length
        self.max_retries = settings.SHORT_CODE_MAX_RETRIES if max_retries is None else max_retries

    async def code_exists(self, code: str) -> bool:
        statement = select(ShortLink.id).where(ShortLink.code == code).limit(1)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none() is not None

    async def create(
        self,
        destination_url: str,
        owner_id: int,
        title: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        requested_code: Optional[str] = None,
    ) -> Union[ShortLink, Failure]:
        """
        Create a new short link.

        Args:
            destination_url: Absolute http(s) URL to redirect to
            owner_id: Authenticated user creating the link
            title: Optional dashboard label
            expires_at: Optional expiry time
            requested_code: Optional custom short code

        Returns:
            The persisted ShortLink, or a Failure of kind INVALID_URL,
            INVALID_CODE, CODE_TAKEN or TRANSIENT
        """
        if not is_valid_url(destination_url):
            return Failure(
                ErrorKind.INVALID_URL,
                "Invalid URL format. URL must use http:// or https:// and have a valid domain"
            )

        expires_at = to_naive_utc(expires_at)

        try:
            if requested_code is not None:
                return await self._create_with_code(
                    destination_url, owner_id, title, expires_at, requested_code
                )
            return await self._create_with_generated_code(
                destination_url, owner_id, title, expires_at
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to create short link for owner {owner_id}: {e}", exc_info=True)
            return Failure(ErrorKind.TRANSIENT, "Storage is unavailable, please try again")

    async def _create_with_code(
        self,
        destination_url: str,
        owner_id: int,
        title: Optional[str],
        expires_at: Optional[datetime],
        code: str,
    ) -> Union[ShortLink, Failure]:
        if not is_valid_custom_code(code):
            return Failure(
                ErrorKind.INVALID_CODE,
                "Custom codes must be 3-32 characters of letters, digits, '-' or '_'"
            )

        if await self.code_exists(code):
            return Failure(ErrorKind.CODE_TAKEN, f"The code '{code}' is already taken")

        link = await self._insert(destination_url, owner_id, title, expires_at, code)
        if link is None:
            # Lost the race to a concurrent create of the same code
            logger.info(f"Custom code '{code}' taken by a concurrent request")
            return Failure(ErrorKind.CODE_TAKEN, f"The code '{code}' is already taken")
        return link

    async def _create_with_generated_code(
        self,
        destination_url: str,
        owner_id: int,
        title: Optional[str],
        expires_at: Optional[datetime],
    ) -> Union[ShortLink, Failure]:
        for attempt in range(1, self.max_retries + 1):
            code = self.code_generator(self.code_length)

            if await self.code_exists(code):
                logger.warning(f"Generated code collision on attempt {attempt}: {code}")
                continue

            link = await self._insert(destination_url, owner_id, title, expires_at, code)
            if link is not None:
                return link
            logger.warning(f"Generated code lost insert race on attempt {attempt}: {code}")

        logger.error(f"Could not allocate a free short code after {self.max_retries} attempts")
        return Failure(ErrorKind.TRANSIENT, "Could not allocate a short code, please try again")

    async def _insert(
        self,
        destination_url: str,
        owner_id: int,
        title: Optional[str],
        expires_at: Optional[datetime],
        code: str,
    ) -> Optional[ShortLink]:
        """Insert and commit a link. Returns None if the code violates the unique index."""
        link = ShortLink(
            owner_id=owner_id,
            destination_url=destination_url,
            code=code,
            title=title,
            expires_at=expires_at,
        )
        self.session.add(link)
        try:
            await self.session.flush()
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            return None

        await self.session.refresh(link)
        return link

    async def resolve(self, code: str) -> Optional[ShortLink]:
        """
        Look up a link by its short code.

        This is the redirect read path: it never mutates, and storage errors
        are logged and reported as a miss.

        Args:
            code: The short code to look up

        Returns:
            ShortLink if found, None otherwise
        """
        try:
            statement = select(ShortLink).where(ShortLink.code == code)
            result = await self.session.execute(statement)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to resolve short code '{code}': {e}", exc_info=True)
            return None

    async def get_owned(self, link_id: int, owner_id: int) -> Optional[ShortLink]:
        """Fetch a link only if it belongs to owner_id."""
        statement = select(ShortLink).where(
            ShortLink.id == link_id,
            ShortLink.owner_id == owner_id,
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_by_owner(self, owner_id: int, limit: Optional[int] = None) -> list[ShortLink]:
        """
        List an owner's links, newest first.

        Args:
            owner_id: The owning user
            limit: Optional maximum number of links

        Returns:
            List of ShortLink (empty if none)
        """
        statement = (
            select(ShortLink)
            .where(ShortLink.owner_id == owner_id)
            .order_by(ShortLink.created_at.desc(), ShortLink.id.desc())
        )
        if limit is not None:
            statement = statement.limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(
        self,
        link_id: int,
        owner_id: int,
        changes: Mapping[str, Any],
    ) -> Union[bool, Failure]:
        """
        Update title and/or expires_at of an owned link.

        Only keys present in ``changes`` are written; passing None clears the
        field.

        Returns:
            True if an owned link matched, False if not (unknown or not
            owner), or a TRANSIENT Failure on storage errors

        Raises:
            ValueError: If changes names a field that cannot be updated
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        values = dict(changes)
        if "expires_at" in values:
            values["expires_at"] = to_naive_utc(values["expires_at"])

        try:
            if not values:
                return await self.get_owned(link_id, owner_id) is not None

            statement = (
                update(ShortLink)
                .where(ShortLink.id == link_id, ShortLink.owner_id == owner_id)
                .values(**values)
            )
            result = await self.session.execute(statement)
            await self.session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to update link {link_id}: {e}", exc_info=True)
            return Failure(ErrorKind.TRANSIENT, "Storage is unavailable, please try again")

    async def delete(self, link_id: int, owner_id: int) -> Union[bool, Failure]:
        """
        Delete an owned link together with its visit records.

        Ownership is checked before anything is removed, and the visit
        records and the link row go in one transaction.

        Returns:
            True if deleted, False if no owned link matched, or a TRANSIENT
            Failure on storage errors (nothing is deleted in that case)
        """
        try:
            owned = await self.session.execute(
                select(ShortLink.id)
                .where(ShortLink.id == link_id, ShortLink.owner_id == owner_id)
            )
            if owned.scalar_one_or_none() is None:
                return False

            await self.session.execute(
                delete(VisitRecord).where(VisitRecord.link_id == link_id)
            )
            result = await self.session.execute(
                delete(ShortLink)
                .where(ShortLink.id == link_id, ShortLink.owner_id == owner_id)
            )
            await self.session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to delete link {link_id}: {e}", exc_info=True)
            return Failure(ErrorKind.TRANSIENT, "Storage is unavailable, please try again")
