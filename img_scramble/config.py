from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


Scheme = Literal["GILBERT", "BLOCK"]


class Settings(BaseModel):
    default_scheme: Scheme = Field(default="GILBERT")

    # Block shuffle
    block_level: int = Field(default=40, ge=2)
    block_key: str = Field(default="tool.hadsky.com")

    # Export
    jpeg_quality: int = Field(default=95, ge=1, le=100)
    output_dir: str = Field(default="out")

    # Batch
    workers: int = Field(default=4, ge=1)

    @field_validator("default_scheme", mode="before")
    @classmethod
    def _upper_scheme(cls, v: str) -> str:
        return v.upper()


class ProcessingOptions(BaseModel):
    """Choices made for a single run over one or more images."""

    scheme: Scheme = Field(default="GILBERT")
    # None falls back to settings
    block_level: Optional[int] = Field(default=None, ge=2)
    block_key: Optional[str] = Field(default=None)

    @field_validator("scheme", mode="before")
    @classmethod
    def _upper_scheme(cls, v: str) -> str:
        return v.upper()

    def scheme_kwargs(self) -> dict:
        if self.scheme == "BLOCK":
            return {"level": self.block_level, "key": self.block_key}
        return {}


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    return Settings(
        default_scheme=os.getenv("IMG_SCRAMBLE_SCHEME", "GILBERT"),
        block_level=int(os.getenv("IMG_SCRAMBLE_BLOCK_LEVEL", "40")),
        block_key=os.getenv("IMG_SCRAMBLE_BLOCK_KEY", "tool.hadsky.com"),
        jpeg_quality=int(os.getenv("IMG_SCRAMBLE_JPEG_QUALITY", "95")),
        output_dir=os.getenv("IMG_SCRAMBLE_OUTPUT_DIR", "out"),
        workers=int(os.getenv("IMG_SCRAMBLE_WORKERS", "4")),
    )
