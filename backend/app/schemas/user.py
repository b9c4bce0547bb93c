"""
Pydantic schema for user models.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserSummary(BaseModel):
    """
    Public view of a user embedded in activity responses.

    Attributes:
        id (int): User ID.
        name (Optional[str]): Display name.
        github_username (Optional[str]): GitHub login.
    """

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: int
    name: Optional[str]
    github_username: Optional[str]
