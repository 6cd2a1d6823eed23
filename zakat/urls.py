from django.urls import path
from .views import *

urlpatterns = [
    path("donors/", DonorListCreateView.as_view(), name="donor_list"),
    path("donors/<int:pk>/", DonorDetailView.as_view(), name="donor_detail"),
    path("categories/", CategoryListCreateView.as_view(), name="category_list"),
    path("categories/<int:pk>/", CategoryDetailView.as_view(), name="category_detail"),
    path("payments/", PaymentListCreateView.as_view(), name="payment_list"),
    path("payments/<int:pk>/", PaymentDetailView.as_view(), name="payment_detail"),
    path("recipients/resident/", ResidentRecipientListCreateView.as_view(), name="resident_recipient_list"),
    path("recipients/resident/<int:pk>/", ResidentRecipientDetailView.as_view(), name="resident_recipient_detail"),
    path("recipients/other/", OtherRecipientListCreateView.as_view(), name="other_recipient_list"),
    path("recipients/other/<int:pk>/", OtherRecipientDetailView.as_view(), name="other_recipient_detail"),
    path("entitlement/preview/", EntitlementPreviewView.as_view(), name="entitlement_preview"),
    path("settings/", ZakatSettingView.as_view(), name="zakat_settings"),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path("reports/summary/", ReportsView.as_view(), name="reports_summary"),
]
