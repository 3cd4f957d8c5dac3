"""Tenant model and the organization-scoping queryset shared by every app."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Self

from django.db import models

from apps.core.conf import SLUG_MAX_LENGTH, Region

if TYPE_CHECKING:
    from uuid import UUID


class OrganizationScopedQuerySet(models.QuerySet):
    """
    Base queryset for tenant-owned rows.

    Subclasses set `organization_lookup` to the ORM path that reaches the
    owning organization's primary key.
    """

    organization_lookup: str = "organization_id"

    def for_organization(self, organization_id: UUID | str) -> Self:
        """Restricts the queryset to rows owned by one organization."""
        return self.filter(**{self.organization_lookup: organization_id})


class Organization(models.Model):
    """An esports team or organization; the tenant boundary for all data."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=SLUG_MAX_LENGTH, unique=True)
    region = models.CharField(max_length=8, choices=Region.choices, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "organizations"
        ordering = ["name"]
        verbose_name = "Organization"
        verbose_name_plural = "Organizations"

    def __str__(self) -> str:
        return self.name
