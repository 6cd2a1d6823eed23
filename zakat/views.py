# zakat/views.py
from django.db import transaction
from drf_spectacular.utils import extend_schema, OpenApiResponse, OpenApiTypes
from rest_framework import generics, permissions, status
from rest_framework.views import APIView

from .models import Category, Donor, OtherRecipient, Payment, ResidentRecipient
from .serializers import (
    CategorySerializer,
    DonorSerializer,
    EntitlementPreviewSerializer,
    OtherRecipientSerializer,
    PaymentSerializer,
    ReportsInputSerializer,
    ResidentRecipientSerializer,
    ZakatSettingSerializer,
)
from .services import (
    compute_dashboard,
    compute_report,
    get_zakat_config,
    preview_entitlement,
    report_window,
    update_zakat_config,
)
from .utils import error_response, success_response


# --------------------------
# Dasar CRUD dengan format respons seragam
# --------------------------
class EnvelopeListCreateView(generics.ListCreateAPIView):
    permission_classes = [permissions.IsAuthenticated]
    created_message = "Data berhasil ditambahkan."

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return success_response(data=serializer.data)

    @transaction.atomic
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return error_response(serializer.errors)
        serializer.save()
        return success_response(data=serializer.data, message=[self.created_message],
                                code=status.HTTP_201_CREATED)


class EnvelopeDetailView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [permissions.IsAuthenticated]
    updated_message = "Data berhasil diperbarui."
    deleted_message = "Data berhasil dihapus."

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return success_response(data=serializer.data)

    @transaction.atomic
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        if not serializer.is_valid():
            return error_response(serializer.errors)
        serializer.save()
        return success_response(data=serializer.data, message=[self.updated_message])

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        data = {"id": instance.id}
        instance.delete()
        return success_response(data=data, message=[self.deleted_message])


# --------------------------
# Muzakki
# --------------------------
class DonorListCreateView(EnvelopeListCreateView):
    queryset = Donor.objects.all()
    serializer_class = DonorSerializer
    search_fields = ["name", "note"]
    ordering_fields = ["name", "dependents", "created_at"]
    ordering = ["name"]
    created_message = "Muzakki berhasil ditambahkan."


class DonorDetailView(EnvelopeDetailView):
    queryset = Donor.objects.all()
    serializer_class = DonorSerializer


# --------------------------
# Kategori mustahik
# --------------------------
class CategoryListCreateView(EnvelopeListCreateView):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    search_fields = ["name"]
    ordering_fields = ["name", "base_entitlement"]
    ordering = ["name"]
    created_message = "Kategori berhasil ditambahkan."


class CategoryDetailView(EnvelopeDetailView):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer


# --------------------------
# Bayar zakat
# --------------------------
class PaymentListCreateView(EnvelopeListCreateView):
    queryset = Payment.objects.all()
    serializer_class = PaymentSerializer
    filterset_fields = ["payment_kind"]
    search_fields = ["head_of_household"]
    ordering_fields = ["created_at", "head_of_household", "grain_amount", "cash_amount"]
    ordering = ["-created_at", "-id"]
    created_message = "Pembayaran zakat berhasil ditambahkan."


class PaymentDetailView(EnvelopeDetailView):
    queryset = Payment.objects.all()
    serializer_class = PaymentSerializer


# --------------------------
# Mustahik warga / lainnya
# --------------------------
class ResidentRecipientListCreateView(EnvelopeListCreateView):
    queryset = ResidentRecipient.objects.all()
    serializer_class = ResidentRecipientSerializer
    filterset_fields = ["category_name"]
    search_fields = ["name", "category_name"]
    ordering_fields = ["name", "category_name", "entitlement"]
    ordering = ["name"]
    created_message = "Mustahik warga berhasil ditambahkan."


class ResidentRecipientDetailView(EnvelopeDetailView):
    queryset = ResidentRecipient.objects.all()
    serializer_class = ResidentRecipientSerializer


class OtherRecipientListCreateView(EnvelopeListCreateView):
    queryset = OtherRecipient.objects.all()
    serializer_class = OtherRecipientSerializer
    filterset_fields = ["category_name"]
    search_fields = ["name", "category_name"]
    ordering_fields = ["name", "category_name", "entitlement"]
    ordering = ["name"]
    created_message = "Mustahik lainnya berhasil ditambahkan."


class OtherRecipientDetailView(EnvelopeDetailView):
    queryset = OtherRecipient.objects.all()
    serializer_class = OtherRecipientSerializer


# --------------------------
# Pratinjau hak saat memilih kategori + satuan
# --------------------------
class EntitlementPreviewView(generics.GenericAPIView):
    serializer_class = EntitlementPreviewSerializer
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return error_response(serializer.errors)
        category = Category.objects.get(name=serializer.validated_data["category_name"])
        data = preview_entitlement(category, serializer.validated_data["unit"], get_zakat_config())
        return success_response(data=data)


# --------------------------
# Pengaturan kurs & tarif
# --------------------------
class ZakatSettingView(generics.GenericAPIView):
    serializer_class = ZakatSettingSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return success_response(data=get_zakat_config().as_dict())

    def patch(self, request):
        serializer = self.get_serializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return error_response(serializer.errors)
        config = update_zakat_config(**serializer.validated_data)
        return success_response(data=config.as_dict(), message=["Pengaturan berhasil disimpan."])


# --------------------------
# Beranda & laporan
# --------------------------
class DashboardView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        tags=["Dashboard"],
        summary="Statistik beranda",
        request=None,
        responses={200: OpenApiResponse(description="Dashboard JSON", response=OpenApiTypes.OBJECT)},
    )
    def get(self, request):
        return success_response(data=compute_dashboard(), message=["Data beranda berhasil disusun."])


class ReportsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        tags=["Reports"],
        summary="Data laporan zakat fitrah",
        request=ReportsInputSerializer,
        responses={200: OpenApiResponse(description="Report JSON", response=OpenApiTypes.OBJECT)},
    )
    def post(self, request):
        ser = ReportsInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        start_dt, end_dt = report_window(data["filter"], data.get("start_date"), data.get("end_date"))
        result = compute_report(start_dt=start_dt, end_dt=end_dt)
        if result.get("status") != "ok":
            return error_response(errors=result.get("message") or ["Gagal menyusun laporan."])

        return success_response(data=result, message=["Laporan berhasil disusun."])
