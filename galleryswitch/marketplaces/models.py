# -*- coding: utf-8 -*-
"""Pydantic models for registry search results."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MarketplaceExtension(BaseModel):
    """One extension as returned by a registry search or lookup."""

    id: str = Field(..., description='Extension id, "publisher.name"')
    publisher: str = Field(default="", description="Publisher / namespace")
    name: str = Field(default="", description="Extension name")
    display_name: str = Field(default="", alias="displayName")
    description: str = Field(default="")
    version: str = Field(default="", description="Latest version")

    model_config = {"populate_by_name": True}
