from django.contrib import admin

from erp_core.masters.models import (
    Doctor,
    Hospital,
    ImplantSubcategory,
    ImplantType,
    PaymentType,
    Procedure,
    SurgicalCategory,
)


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ("short_name", "legal_name", "gst_number", "payment_terms", "business_unit_id", "is_active")
    list_filter = ("is_active", "payment_terms")
    search_fields = ("short_name", "legal_name", "gst_number")
    filter_horizontal = ("surgical_categories",)


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ("name", "phone_number", "email", "business_unit_id", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "email")
    filter_horizontal = ("surgical_categories",)


@admin.register(PaymentType)
class PaymentTypeAdmin(admin.ModelAdmin):
    list_display = ("code", "description", "has_soft_limit", "soft_limit_amount", "is_active")
    list_filter = ("is_active", "has_soft_limit")
    search_fields = ("code", "description")


@admin.register(SurgicalCategory)
class SurgicalCategoryAdmin(admin.ModelAdmin):
    list_display = ("code", "description", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "description")


@admin.register(Procedure)
class ProcedureAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "payment_type", "is_active")
    list_filter = ("is_active", "payment_type")
    search_fields = ("code", "name")
    filter_horizontal = ("surgical_categories",)


class ImplantSubcategoryInline(admin.TabularInline):
    model = ImplantSubcategory
    extra = 0


@admin.register(ImplantType)
class ImplantTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "business_unit_id", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)
    inlines = [ImplantSubcategoryInline]
