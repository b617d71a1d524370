"""
main.py: round-trips a user through the checked mappers and logs the result.
"""

import logging
from datetime import date

from config import settings
from core.tracking import IncompleteObjectError
from core.users.mappers import UserMapper
from core.users.models import UserEntityProps

# -------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("trackprops")


def build_user() -> UserEntityProps:
    user = UserEntityProps()
    user.first_name = "John"
    user.last_name = "Doe"
    user.birthday = date(1990, 2, 1)
    user.username = "johndoe123"
    return user


def main() -> int:
    user = build_user()
    logger.info("All user fields set: %s", user.is_complete)

    try:
        persisted = UserMapper.to_persistence(user)
        logger.info("persisted user: %s", persisted)

        mapped_back = UserMapper.from_persistence(persisted)
        logger.info("mapped back: %s", mapped_back)
    except IncompleteObjectError as e:
        logger.error("Mapping failed in %s: missing %s", e.function_name, ", ".join(e.missing_fields))
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
