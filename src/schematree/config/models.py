"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, schematree.toml only contains
overrides. An empty (or missing) file is a valid configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- schematree.toml sections ---


class ClassifyConfig(BaseModel):
    """[classify] section."""

    model_config = {"frozen": True}

    warn_unresolved: bool = True


class WalkConfig(BaseModel):
    """[walk] section.

    ``max_depth`` bounds CLI listings so recursive types stay finite.
    0 disables the limit.
    """

    model_config = {"frozen": True}

    max_depth: int = Field(default=32, ge=0)


class AttributionConfig(BaseModel):
    """[attribution] section: raw chunks consumed per leaf shape."""

    model_config = {"frozen": True}

    bool_chunks: int = Field(default=1, ge=0)
    int_chunks: int = Field(default=1, ge=0)
    float_chunks: int = Field(default=1, ge=0)
    string_chunks: int = Field(default=2, ge=0)
    undefined_chunks: int = Field(default=1, ge=0)


class ExportConfig(BaseModel):
    """[export] section."""

    model_config = {"frozen": True}

    graph_format: Literal["dot", "json"] = "dot"
