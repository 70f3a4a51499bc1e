"""Animals & Comments — group-scoped custody records and the notes members leave on them.

Invariants:
    - Callers authorize MEMBER on the owning group first
    - Deletion is soft: rows keep their id and drop out of every listing and aggregate
    - Comment tags must be live tags of the animal's own group, otherwise nothing is written
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.core.domain_types import AnimalStatus, GroupId
from shelterhub.core.errors import ValidationFailedError
from shelterhub.models.animal import Animal
from shelterhub.models.animal_comment import AnimalComment
from shelterhub.models.comment_tag import CommentTag

logger = logging.getLogger(__name__)


class AnimalService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_animals(
        self, group_id: GroupId, status: AnimalStatus | None = None,
    ) -> list[Animal]:
        query = (
            select(Animal)
            .where(Animal.group_id == group_id)
            .where(Animal.deleted_at.is_(None))
        )
        if status is not None:
            query = query.where(Animal.status == status.value)
        result = await self.db.execute(query.order_by(Animal.name, Animal.id))
        return list(result.scalars().all())

    async def create_animal(
        self,
        group_id: GroupId,
        name: str,
        status: AnimalStatus = AnimalStatus.AVAILABLE,
        image_url: str = "",
    ) -> Animal:
        animal = Animal(
            group_id=group_id, name=name, status=status.value, image_url=image_url,
        )
        self.db.add(animal)
        await self.db.commit()
        await self.db.refresh(animal)
        logger.info(f"Animal created: {animal.id}", extra={"group_id": group_id})
        return animal

    async def delete_animal(self, animal: Animal) -> None:
        animal.soft_delete()
        await self.db.commit()
        logger.info(f"Animal deleted: {animal.id}", extra={"group_id": animal.group_id})

    async def list_comment_tags(self, group_id: GroupId) -> list[CommentTag]:
        result = await self.db.execute(
            select(CommentTag)
            .where(CommentTag.group_id == group_id)
            .where(CommentTag.deleted_at.is_(None))
            .order_by(CommentTag.name, CommentTag.id)
        )
        return list(result.scalars().all())

    async def add_comment(
        self,
        animal: Animal,
        author_id: int,
        content: str,
        image_url: str = "",
        tag_ids: list[int] | None = None,
    ) -> AnimalComment:
        tags: list[CommentTag] = []
        requested = list(dict.fromkeys(tag_ids or []))
        if requested:
            result = await self.db.execute(
                select(CommentTag)
                .where(CommentTag.id.in_(requested))
                .where(CommentTag.group_id == animal.group_id)
                .where(CommentTag.deleted_at.is_(None))
            )
            tags = list(result.scalars().all())
            found = {tag.id for tag in tags}
            invalid = [tag_id for tag_id in requested if tag_id not in found]
            if invalid:
                raise ValidationFailedError(
                    "One or more tag IDs do not belong to this group",
                    field="tag_ids",
                    details={"group_id": animal.group_id, "invalid_tag_ids": invalid},
                )

        comment = AnimalComment(
            animal_id=animal.id,
            user_id=author_id,
            content=content,
            image_url=image_url,
            tags=tags,
        )
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment, attribute_names=["author", "tags"])
        logger.info(
            f"Comment added to animal {animal.id}",
            extra={"user_id": author_id, "group_id": animal.group_id},
        )
        return comment

    async def delete_comment(self, comment: AnimalComment) -> None:
        comment.soft_delete()
        await self.db.commit()
