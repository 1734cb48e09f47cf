from __future__ import annotations

from typing import Optional

from rentdesk.models.user import UserBase, user_from_dict
from rentdesk.services.common import _store, repo, time_based_id
from rentdesk.utils.constants import Collection, Role
from rentdesk.utils.security import generate_hash, check_hash

ROLES = (Role.SUPERADMIN, Role.ADMIN, Role.DRIVER, Role.PARTNER)


class UserService:
    """Local credential table: authenticate and admin create/delete."""

    @staticmethod
    def find(username: str, store=None) -> Optional[dict]:
        for u in repo(Collection.USERS, store).list():
            if u.get("username") == username:
                return u
        return None

    @staticmethod
    def get(user_id: str, store=None) -> Optional[UserBase]:
        return user_from_dict(repo(Collection.USERS, store).get_by_id(user_id))

    @staticmethod
    def authenticate(username: str, password: str, store=None) -> Optional[UserBase]:
        u = UserService.find((username or "").strip(), store)
        if not u or not check_hash(password or "", u.get("password_hash")):
            return None
        return user_from_dict(u)

    @staticmethod
    def admin_create_user(username: str, role: str, password: str, name: str = "",
                          linked_id: Optional[str] = None, store=None):
        st = store or _store()
        username = (username or "").strip()
        role = (role or "").lower().strip()
        if not username or not password:
            return False, "Username and password are required", None
        if role not in ROLES:
            return False, f"Role must be one of: {'/'.join(ROLES)}", None
        if UserService.find(username, st):
            return False, "Username exists", None

        users = repo(Collection.USERS, st)
        uid = time_based_id([str(u.get("id")) for u in users.list()], prefix="u")
        record = {
            "id": uid,
            "username": username,
            "name": (name or "").strip() or username,
            "role": role,
            "password_hash": generate_hash(password),
        }
        if role == Role.DRIVER:
            record["linked_driver_id"] = linked_id
        elif role == Role.PARTNER:
            record["linked_partner_id"] = linked_id
        users.upsert(record, prepend=False)
        return True, "User created", uid

    @staticmethod
    def admin_delete_user(user_id: str, store=None):
        ok = repo(Collection.USERS, store).delete(user_id)
        return ok, "User deleted" if ok else "User not found"
