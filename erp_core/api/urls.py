# erp_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from erp_core.audit.api.views import AuditEventViewSet
from erp_core.billing_rules.api.views import CreditNoteViewSet, DoctorAssignmentViewSet
from erp_core.business_units.api.views import BusinessUnitViewSet
from erp_core.iam.api.auth import LoginView, LogoutView, RefreshView
from erp_core.iam.api.me import MeView
from erp_core.limits.api.views import LimitViewSet
from erp_core.masters.api.views import (
    DoctorViewSet,
    HospitalViewSet,
    ImplantTypeViewSet,
    PaymentTypeViewSet,
    ProcedureViewSet,
    SurgicalCategoryViewSet,
)

router = DefaultRouter()

# Admin (no scope header)
router.register(r"business-units", BusinessUnitViewSet, basename="business-units")

# Master data
router.register(r"hospitals", HospitalViewSet, basename="hospitals")
router.register(r"doctors", DoctorViewSet, basename="doctors")
router.register(r"payment-types", PaymentTypeViewSet, basename="payment-types")
router.register(r"surgical-categories", SurgicalCategoryViewSet, basename="surgical-categories")
router.register(r"procedures", ProcedureViewSet, basename="procedures")
router.register(r"implant-types", ImplantTypeViewSet, basename="implant-types")

# Billing rules
router.register(r"credit-notes", CreditNoteViewSet, basename="credit-notes")
router.register(r"doctor-assignments", DoctorAssignmentViewSet, basename="doctor-assignments")
router.register(r"limits", LimitViewSet, basename="limits")

router.register(r"audit/events", AuditEventViewSet, basename="audit-events")

urlpatterns = [
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
