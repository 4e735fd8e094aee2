from __future__ import annotations

from django.contrib import admin

from erp_core.iam.models import BusinessUnitMembership


@admin.register(BusinessUnitMembership)
class BusinessUnitMembershipAdmin(admin.ModelAdmin):
    list_display = ("business_unit", "user", "role", "is_active", "created_at")
    list_filter = ("business_unit", "role", "is_active")
    search_fields = ("business_unit__name", "business_unit__code", "user__username", "user__email")
    autocomplete_fields = ("user",)
