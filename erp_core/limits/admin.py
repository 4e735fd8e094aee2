from django.contrib import admin

from erp_core.limits.models import Limit


@admin.register(Limit)
class LimitAdmin(admin.ModelAdmin):
    list_display = ("id", "payment_type", "surgical_category", "amount", "currency", "business_unit_id", "is_active")
    list_filter = ("currency", "is_active")
    search_fields = ("description",)
    readonly_fields = ("created_by", "updated_by", "created_at", "updated_at")
