from __future__ import annotations

import copy
import threading
from datetime import datetime, timezone
from typing import Optional, Protocol

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError


def normalize_email(email: str) -> str:
    return (email or "").lower().strip()


class UserStore(Protocol):
    def find_by_email(self, email: str) -> Optional[dict]:
        ...

    def find_by_id(self, user_id: str) -> Optional[dict]:
        ...

    def create(self, name: str, email: str, password_hash: str) -> dict:
        ...


class MongoUserStore:
    def __init__(self, collection: Collection):
        self.collection = collection

    def find_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": normalize_email(email)})

    def find_by_id(self, user_id: str) -> Optional[dict]:
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return self.collection.find_one({"_id": oid}, {"password_hash": 0})

    def create(self, name: str, email: str, password_hash: str) -> dict:
        doc = {
            "name": name,
            "email": normalize_email(email),
            "password_hash": password_hash,
            "created_at": datetime.now(timezone.utc),
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc


class InMemoryUserStore:
    def __init__(self):
        self._lock = threading.Lock()
        self.users: dict[ObjectId, dict] = {}

    def reset(self) -> None:
        with self._lock:
            self.users.clear()

    def find_by_email(self, email: str) -> Optional[dict]:
        email = normalize_email(email)
        with self._lock:
            for u in self.users.values():
                if u["email"] == email:
                    return copy.deepcopy(u)
        return None

    def find_by_id(self, user_id: str) -> Optional[dict]:
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        with self._lock:
            u = self.users.get(oid)
            if u is None:
                return None
            return {k: copy.deepcopy(v) for k, v in u.items() if k != "password_hash"}

    def create(self, name: str, email: str, password_hash: str) -> dict:
        doc = {
            "_id": ObjectId(),
            "name": name,
            "email": normalize_email(email),
            "password_hash": password_hash,
            "created_at": datetime.now(timezone.utc),
        }
        with self._lock:
            if any(u["email"] == doc["email"] for u in self.users.values()):
                raise DuplicateKeyError(f"E11000 duplicate key error: email {doc['email']}", 11000)
            self.users[doc["_id"]] = doc
        return copy.deepcopy(doc)
