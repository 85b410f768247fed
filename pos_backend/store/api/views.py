# store/api/views.py

"""
STORE API

- GET  /api/store/          -> active stores
- POST /api/store/install/  -> create store + seed system accounts
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView, ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from store.api.serializers import InstallStoreSerializer, StoreSerializer
from store.models import Store
from store.services.install import install_store


@extend_schema(tags=["store"])
class StoreListView(ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StoreSerializer
    queryset = Store.objects.filter(is_active=True).order_by("name")


class InstallStoreView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InstallStoreSerializer

    @extend_schema(
        tags=["store"],
        request=InstallStoreSerializer,
        responses={201: StoreSerializer, 400: dict},
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            store = install_store(
                name=data["name"],
                code=data.get("code"),
                address=data.get("address", ""),
                phone=data.get("phone", ""),
            )
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(StoreSerializer(store).data, status=status.HTTP_201_CREATED)
