# -*- coding: utf-8 -*-
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

DefaultMarketplace = Literal["openvsx", "ms", "cursor"]


class Config(BaseModel):
    """Root config (config.json)."""

    model_config = {"populate_by_name": True}

    # Marketplace the fork editor should use; it may ignore product.json
    # and rely on this instead.
    default_marketplace: DefaultMarketplace = Field(
        default="openvsx",
        alias="defaultMarketplace",
    )
    editor_binary: Optional[str] = Field(
        default=None,
        alias="editorBinary",
        description="Override for the editor CLI used to install .vsix",
    )

    @field_validator("default_marketplace", mode="before")
    @classmethod
    def _fallback_marketplace(cls, value):
        if value in ("openvsx", "ms", "cursor"):
            return value
        return "openvsx"
