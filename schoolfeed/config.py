# schoolfeed/config.py
from typing import Optional

from pydantic import BaseModel, field_validator

from schoolfeed.encoding import check_key_name

class SyncConfig(BaseModel):
    """Connection settings for one sync run. Blank values are rejected."""
    base_url: str
    username: str
    password: str
    import_key: str
    upload_url: str
    line_prefix: str
    updated_param: str
    filter_marks_by_range: bool = False

    @field_validator("base_url", "username", "password", "import_key", "upload_url",
                     "line_prefix", "updated_param", mode="before")
    @classmethod
    def _not_blank(cls, v: Optional[str]) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("must be a non-empty string")
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("line_prefix", "updated_param")
    @classmethod
    def _key_name(cls, v: str) -> str:
        return check_key_name(v)
