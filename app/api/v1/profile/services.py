"""
Profile service layer
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid
import logging

from app.models import User, Address
from app.core.exceptions import NotFoundException, BadRequestException, DuplicateResourceException
from app.utils.validators import validate_phone_number, validate_min_length, validate_birth_date
from .schemas import ProfileUpdate, AddressInput

logger = logging.getLogger(__name__)

# Columns an address cannot be created without
REQUIRED_ADDRESS_FIELDS = {
    "full_name": "Full name is required",
    "phone": "Phone number is required",
    "address_line_one": "Address is required",
    "city": "City is required",
    "country": "Country is required",
}

def _check(errors: List[str], validator, *args):
    """Run a validator, collecting its message instead of raising"""
    try:
        return validator(*args)
    except ValueError as exc:
        errors.append(str(exc))
        return None

class ProfileService:
    """Profile of the signed-in user and their saved address"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user_id: uuid.UUID, refresh: bool = False) -> User:
        query = select(User).where(User.id == user_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundException("User not found")
        return user

    def _validate(self, user: User, data: ProfileUpdate) -> tuple[dict, dict]:
        errors: List[str] = []
        user_changes = data.model_dump(exclude_unset=True, exclude={"address"})
        if "name" in user_changes and user_changes["name"] is None:
            user_changes.pop("name")

        if user_changes.get("name") is not None:
            user_changes["name"] = _check(
                errors, validate_min_length, user_changes["name"], 2, "Name must be at least 2 characters"
            )
        if user_changes.get("username") is not None:
            user_changes["username"] = _check(
                errors, validate_min_length, user_changes["username"], 2, "Username must be more than 2 characters"
            )
        if "birth_date" in user_changes:
            _check(errors, validate_birth_date, user_changes["birth_date"])

        address_changes = {}
        if data.address is not None:
            address_changes = self._address_changes(user, data.address, errors)

        if errors:
            raise BadRequestException("Validation failed", errors=errors)
        return user_changes, address_changes

    def _address_changes(self, user: User, address: AddressInput, errors: List[str]) -> dict:
        changes = address.model_dump(exclude_unset=True)

        if changes.get("phone") is not None:
            changes["phone"] = _check(errors, validate_phone_number, changes["phone"])
        if changes.get("full_name") is not None:
            changes["full_name"] = _check(
                errors, validate_min_length, changes["full_name"], 2, "Full name must be more than 2 characters"
            )
        if changes.get("address_line_one") is not None:
            changes["address_line_one"] = _check(
                errors, validate_min_length, changes["address_line_one"], 5, "Address must be more than 5 characters"
            )

        if user.address is None and changes:
            for field, message in REQUIRED_ADDRESS_FIELDS.items():
                if not changes.get(field) and message not in errors:
                    errors.append(message)

        return changes

    async def update_profile(self, user_id: uuid.UUID, data: ProfileUpdate) -> User:
        """
        Update user fields and create or update the saved address

        Raises:
            BadRequestException: With one entry in ``errors`` per invalid field
            DuplicateResourceException: If the username is taken
        """
        user = await self.get_profile(user_id)
        user_changes, address_changes = self._validate(user, data)

        username = user_changes.get("username")
        if username and username != user.username:
            taken = await self.db.scalar(
                select(User.id).where(User.username == username, User.id != user_id)
            )
            if taken:
                raise DuplicateResourceException("User", "username", username)

        try:
            for field, value in user_changes.items():
                setattr(user, field, value)

            if address_changes:
                if user.address is None:
                    user.address = Address(**address_changes)
                else:
                    for field, value in address_changes.items():
                        if value is not None:
                            setattr(user.address, field, value)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Profile updated for user {user_id}")
        return await self.get_profile(user_id, refresh=True)
