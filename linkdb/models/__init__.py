from linkdb.models.actress import Actress
from linkdb.models.base import Base
from linkdb.models.link import Link
from linkdb.models.user import User

__all__ = ["Actress", "Base", "Link", "User"]
