"""Pydantic models for bundleconsole API responses."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class DisplayRowModel(BaseModel):
    """One label/value line of the bundle details."""

    key: str
    value: str


class ActionModel(BaseModel):
    """A lifecycle action button."""

    enabled: bool
    name: str
    link: str
    title: Optional[str] = None


class BundleInfo(BaseModel):
    """Summary of a bundle, with details when a single bundle is shown."""

    id: int
    name: str
    state: str
    actions: List[Union[ActionModel, bool]] = Field(
        default_factory=list,
        description="Action descriptors, or plain False flags for the system bundle.",
    )
    props: Optional[List[DisplayRowModel]] = None


class BundleStatus(BaseModel):
    """Counts shown above the bundle list."""

    total: int
    active: int
    resolved: int
    installed: int
    text: List[str] = Field(default_factory=list)


class BundleListResponse(BaseModel):
    """Response for the bundle list."""

    startLevel: Optional[int] = None
    numActions: int
    status: BundleStatus
    data: Optional[List[BundleInfo]] = None
    error: Optional[str] = None


class BundlePropertiesResponse(BaseModel):
    """Response for ``/bundles/<id>.json``."""

    bundleId: int
    props: List[DisplayRowModel]


class ActionResponse(BaseModel):
    """Result of a POSTed action: bundle info, a bundle id, or a reload hint."""

    id: Optional[int] = None
    name: Optional[str] = None
    state: Optional[str] = None
    actions: Optional[List[Union[ActionModel, bool]]] = None
    props: Optional[List[DisplayRowModel]] = None
    bundleId: Optional[int] = None
    reload: Optional[bool] = None
