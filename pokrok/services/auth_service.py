"""Authentication service - business logic for user auth."""
import logging
from datetime import datetime

from pokrok.models.user import User
from pokrok.utils.auth import create_access_token, hash_password, verify_password
from pokrok.utils.ids import to_object_id

logger = logging.getLogger(__name__)

# Collections holding per-user documents, wiped by a data reset
USER_DATA_COLLECTIONS = ["habits", "daily_steps", "areas", "goals", "daily_reviews"]


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.users = db["users"]

    def _doc_to_user(self, doc: dict) -> User:
        return User(
            _id=str(doc["_id"]),
            email=doc["email"],
            name=doc["name"],
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def register_user(self, email: str, password: str, name: str) -> User:
        """
        Register a new user.

        Args:
            email: User email address
            password: Plain text password
            name: Display name

        Returns:
            User object (without password)

        Raises:
            ValueError: If email is already registered
        """
        email = email.lower()
        existing = await self.users.find_one({"email": email})
        if existing:
            raise ValueError("Email already registered")

        now = datetime.utcnow()
        user_doc = {
            "email": email,
            "hashed_password": hash_password(password),
            "name": name,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.users.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id
        logger.info("Registered user %s", user_doc["_id"])

        return self._doc_to_user(user_doc)

    async def login(self, email: str, password: str) -> str:
        """
        Check credentials and return a JWT access token.

        Raises:
            ValueError: If credentials are invalid
        """
        user_doc = await self.users.find_one({"email": email.lower()})
        if not user_doc or not verify_password(password, user_doc["hashed_password"]):
            raise ValueError("Invalid email or password")

        return create_access_token(user_id=str(user_doc["_id"]))

    async def get_user_by_id(self, user_id: str) -> User:
        """
        Get user by ID.

        Raises:
            ValueError: If the ID is malformed or the user does not exist
        """
        object_id = to_object_id(user_id, "user")

        user_doc = await self.users.find_one({"_id": object_id})
        if not user_doc:
            raise ValueError("User not found")

        return self._doc_to_user(user_doc)

    async def reset_user_data(self, user_id: str) -> dict:
        """
        Delete every habit, step, area, goal and review owned by a user.

        The account itself is kept.

        Returns:
            Mapping of collection name to number of deleted documents
        """
        deleted = {}
        for name in USER_DATA_COLLECTIONS:
            result = await self.db[name].delete_many({"user_id": user_id})
            deleted[name] = result.deleted_count

        logger.info("Reset data for user %s: %s", user_id, deleted)
        return deleted
