from __future__ import annotations

from core.tracking import enforce_all_props_set
from core.users.models import UserEntityProps, UserPersistenceProps


class UserMapper:
    @staticmethod
    @enforce_all_props_set
    def from_persistence(persisted: UserPersistenceProps) -> UserEntityProps:
        user = UserEntityProps()
        user.first_name = persisted.FirstName
        user.last_name = persisted.LastName
        user.birthday = persisted.Birthday__c
        user.username = persisted.Username__c
        return user

    @staticmethod
    @enforce_all_props_set
    def to_persistence(user: UserEntityProps) -> UserPersistenceProps:
        persisted = UserPersistenceProps()
        persisted.FirstName = user.first_name
        persisted.LastName = user.last_name
        persisted.Birthday__c = user.birthday
        persisted.Username__c = user.username
        return persisted
