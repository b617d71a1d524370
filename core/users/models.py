from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from core.tracking import track_props


# init=False: fields start unset and are filled in by the mappers
@track_props
@dataclass(init=False)
class UserEntityProps:
    first_name: str
    last_name: str
    birthday: date
    username: str
    # mentoring_topics: List[str]  # uncomment to see the mappers reject their own output


@track_props
@dataclass(init=False)
class UserPersistenceProps:
    FirstName: str
    LastName: str
    Birthday__c: date
    Username__c: str
