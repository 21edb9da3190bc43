from linkdb.schemas.actress import ActressCreate, ActressRead
from linkdb.schemas.link import LinkCreate, LinkRead, LinkUpdate
from linkdb.schemas.metadata import MetadataRead, MetadataRequest
from linkdb.schemas.user import UserCreate, UserRead, UserWithApiKey

__all__ = [
    "ActressCreate",
    "ActressRead",
    "LinkCreate",
    "LinkRead",
    "LinkUpdate",
    "MetadataRead",
    "MetadataRequest",
    "UserCreate",
    "UserRead",
    "UserWithApiKey",
]
