# erp_core/masters/models.py
from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

from erp_core.common.models import TimeStampedModel

GSTIN_VALIDATOR = RegexValidator(
    regex=r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$",
    message="Please enter a valid GST number.",
)
PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?[\d\s\-\(\)]{10,15}$",
    message="Please enter a valid phone number.",
)
PROCEDURE_CODE_VALIDATOR = RegexValidator(
    regex=r"^P\d{5}$",
    message="Procedure code must look like P00001.",
)


class MasterRecord(TimeStampedModel):
    """
    Reference data the billing rules point at.

    business_unit_id is NULL for master rows shared by every business unit
    (payment types, categories, procedures and doctors usually are).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    business_unit_id = models.UUIDField(null=True, blank=True, db_index=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        abstract = True


class SurgicalCategory(MasterRecord):
    code = models.CharField(max_length=32, unique=True)
    description = models.CharField(max_length=255)

    class Meta:
        db_table = "masters_surgical_category"
        ordering = ["description"]
        verbose_name_plural = "surgical categories"

    def __str__(self) -> str:
        return f"{self.code} - {self.description}"


class PaymentType(MasterRecord):
    code = models.CharField(max_length=6, unique=True)
    description = models.CharField(max_length=100)

    # when set, an invoice total must stay under soft_limit_amount
    has_soft_limit = models.BooleanField(default=False)
    soft_limit_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    class Meta:
        db_table = "masters_payment_type"
        ordering = ["description"]

    def __str__(self) -> str:
        return f"{self.code} - {self.description}"


class PaymentTerms(models.IntegerChoices):
    DAYS_15 = 15, "15 days"
    DAYS_30 = 30, "30 days"
    DAYS_45 = 45, "45 days"
    DAYS_60 = 60, "60 days"
    DAYS_90 = 90, "90 days"


class Hospital(MasterRecord):
    """
    Customer hospital. Always owned by exactly one business unit; every
    billing rule is anchored to one hospital.
    """
    business_unit_id = models.UUIDField(db_index=True)

    short_name = models.CharField(max_length=50)
    legal_name = models.CharField(max_length=100)
    address = models.CharField(max_length=200)
    gst_number = models.CharField(max_length=15, validators=[GSTIN_VALIDATOR])
    state_code = models.CharField(max_length=3)
    payment_terms = models.PositiveSmallIntegerField(choices=PaymentTerms.choices, default=PaymentTerms.DAYS_30)
    default_pricing = models.BooleanField(default=False)

    surgical_categories = models.ManyToManyField(SurgicalCategory, blank=True, related_name="hospitals")

    class Meta:
        db_table = "masters_hospital"
        ordering = ["short_name"]
        indexes = [
            models.Index(fields=["business_unit_id", "is_active"]),
        ]

    def __str__(self) -> str:
        return self.short_name


class Doctor(MasterRecord):
    name = models.CharField(max_length=50)
    phone_number = models.CharField(max_length=20, blank=True, default="", validators=[PHONE_VALIDATOR])
    email = models.EmailField(blank=True, default="")

    surgical_categories = models.ManyToManyField(SurgicalCategory, blank=True, related_name="doctors")
    consulting_doctor = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        related_name="consultees",
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "masters_doctor"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Procedure(MasterRecord):
    code = models.CharField(max_length=6, unique=True, validators=[PROCEDURE_CODE_VALIDATOR])
    name = models.CharField(max_length=200)
    description = models.CharField(max_length=500, blank=True, default="")

    payment_type = models.ForeignKey(PaymentType, on_delete=models.PROTECT, related_name="procedures")
    surgical_categories = models.ManyToManyField(SurgicalCategory, blank=True, related_name="procedures")

    class Meta:
        db_table = "masters_procedure"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["payment_type", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"


class ImplantType(MasterRecord):
    """Implant family (plates, screws, nails...) with its size variants."""
    name = models.CharField(max_length=100)

    class Meta:
        db_table = "masters_implant_type"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"]),
        ]

    def __str__(self) -> str:
        return self.name


class ImplantSubcategory(TimeStampedModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    implant_type = models.ForeignKey(ImplantType, on_delete=models.CASCADE, related_name="subcategories")
    sub_category = models.CharField(max_length=100)
    length = models.DecimalField(max_digits=8, decimal_places=2, validators=[MinValueValidator(Decimal("0.00"))])
    surgical_category = models.ForeignKey(
        SurgicalCategory, on_delete=models.PROTECT, related_name="implant_subcategories"
    )

    class Meta:
        db_table = "masters_implant_subcategory"
        ordering = ["sub_category", "length"]

    def __str__(self) -> str:
        return f"{self.sub_category} ({self.length})"
