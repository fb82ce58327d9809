"""ORM Models - SQLAlchemy declarative models for the off-chain store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Chain objects (claims, arguments, stakes) are never stored here, only referenced by id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from octopus.models.user import User  # noqa: F401
from octopus.models.invite import Invite  # noqa: F401
from octopus.models.flagged_story import FlaggedStory  # noqa: F401
from octopus.models.comment import Comment  # noqa: F401
from octopus.models.reaction import Reaction  # noqa: F401
from octopus.models.notification_event import NotificationEvent  # noqa: F401
from octopus.models.device_token import DeviceToken  # noqa: F401
from octopus.models.user_metric import UserMetric  # noqa: F401
from octopus.models.claim_of_the_day import ClaimOfTheDay  # noqa: F401
