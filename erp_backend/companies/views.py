# companies/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from companies.permissions import HasTenantSession, capabilities_for
from companies.session import resolve_session


class TenantSessionSerializer(serializers.Serializer):
    company_id = serializers.IntegerField()
    company_name = serializers.CharField()
    activity_id = serializers.IntegerField(allow_null=True)
    activity_name = serializers.CharField(allow_null=True)
    role = serializers.CharField()
    capabilities = serializers.ListField(child=serializers.CharField())


class CurrentSessionView(APIView):
    """
    The tenant context the API will use for this user (and headers).
    """

    permission_classes = [IsAuthenticated, HasTenantSession]

    @extend_schema(tags=["companies"], responses={200: TenantSessionSerializer})
    def get(self, request):
        session = resolve_session(request)
        payload = {
            "company_id": session.company_id,
            "company_name": session.company.name,
            "activity_id": session.activity_id,
            "activity_name": session.activity.name if session.activity else None,
            "role": session.role,
            "capabilities": sorted(capabilities_for(request.user, session.role)),
        }
        return Response(TenantSessionSerializer(payload).data, status=status.HTTP_200_OK)
