"""Resource Lookups — resolve ids to live rows or raise ResourceNotFoundError.

Invariants:
    - Soft-deleted rows resolve as "not found"
    - Comments resolve transitively through their animal; a comment on a deleted
      animal is not found
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.core.errors import ResourceNotFoundError
from shelterhub.models.animal import Animal
from shelterhub.models.animal_comment import AnimalComment
from shelterhub.models.group import Group
from shelterhub.models.update import Update
from shelterhub.models.user import User


async def get_group_or_404(db: AsyncSession, group_id: int) -> Group:
    result = await db.execute(
        select(Group).where(Group.id == group_id).where(Group.deleted_at.is_(None)),
    )
    group = result.scalar_one_or_none()
    if not group:
        raise ResourceNotFoundError("Group", group_id)
    return group


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(
        select(User).where(User.id == user_id).where(User.deleted_at.is_(None)),
    )
    user = result.scalar_one_or_none()
    if not user:
        raise ResourceNotFoundError("User", user_id)
    return user


async def get_animal_or_404(db: AsyncSession, animal_id: int) -> Animal:
    result = await db.execute(
        select(Animal)
        .join(Group, Group.id == Animal.group_id)
        .where(Animal.id == animal_id)
        .where(Animal.deleted_at.is_(None))
        .where(Group.deleted_at.is_(None))
    )
    animal = result.scalar_one_or_none()
    if not animal:
        raise ResourceNotFoundError("Animal", animal_id)
    return animal


async def get_comment_or_404(db: AsyncSession, comment_id: int) -> tuple[AnimalComment, int]:
    """Return the comment and the id of the group that owns it."""
    result = await db.execute(
        select(AnimalComment, Animal.group_id)
        .join(Animal, Animal.id == AnimalComment.animal_id)
        .where(AnimalComment.id == comment_id)
        .where(AnimalComment.deleted_at.is_(None))
        .where(Animal.deleted_at.is_(None))
    )
    row = result.one_or_none()
    if not row:
        raise ResourceNotFoundError("Comment", comment_id)
    return row[0], row[1]


async def get_update_or_404(db: AsyncSession, update_id: int) -> Update:
    result = await db.execute(
        select(Update).where(Update.id == update_id).where(Update.deleted_at.is_(None)),
    )
    update = result.scalar_one_or_none()
    if not update:
        raise ResourceNotFoundError("Update", update_id)
    return update
