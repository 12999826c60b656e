"""
Grievance API views.

Views are thin.  Every view follows the same three steps:

    1. Parse / validate input via a serializer.
    2. Delegate to ``PgrService``.
    3. Wrap the result with a ``ResponseInfo`` block and return it.

Domain errors propagate to ``core.domain.exception_handler``; no view
catches them.  Callers are authenticated by the upstream gateway, which
forwards the caller in ``RequestInfo.userInfo``.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    DynamicDataQuerySerializer,
    RequestInfoWrapperSerializer,
    SearchCriteriaSerializer,
    ServiceRequestSerializer,
    ServiceWrapperSerializer,
)
from .services import build_pgr_service
from .utils import response_info

logger = logging.getLogger(__name__)

_SEARCH_PARAMETERS = [
    OpenApiParameter(name="tenantId", type=str, location=OpenApiParameter.QUERY, description="Tenant to search in (mandatory)."),
    OpenApiParameter(name="serviceCode", type=str, location=OpenApiParameter.QUERY, description="Comma-separated service codes."),
    OpenApiParameter(name="serviceRequestId", type=str, location=OpenApiParameter.QUERY, description="Business id of one grievance."),
    OpenApiParameter(name="applicationStatus", type=str, location=OpenApiParameter.QUERY, description="Comma-separated application statuses."),
    OpenApiParameter(name="mobileNumber", type=str, location=OpenApiParameter.QUERY, description="Reporter mobile number."),
    OpenApiParameter(name="ids", type=str, location=OpenApiParameter.QUERY, description="Comma-separated grievance ids."),
    OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY, description="Page size (clamped to the configured maximum)."),
    OpenApiParameter(name="offset", type=int, location=OpenApiParameter.QUERY, description="Rows to skip."),
]


class PgrAPIView(APIView):
    permission_classes = [AllowAny]

    def get_service(self):
        return build_pgr_service()


class GrievanceCreateView(PgrAPIView):
    @extend_schema(
        summary="File a grievance",
        request=ServiceRequestSerializer,
        responses={
            200: OpenApiResponse(response=ServiceWrapperSerializer(many=True), description="The created grievance."),
            400: OpenApiResponse(description="Invalid reporter, source or service code."),
            502: OpenApiResponse(description="A collaborator failed."),
        },
        tags=["Grievances"],
    )
    def post(self, request: Request) -> Response:
        """POST /pgr-services/v2/request/_create"""
        serializer = ServiceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        grievance_request = serializer.to_request()

        envelope = self.get_service().create(grievance_request)
        return Response(
            {
                "ResponseInfo": response_info(grievance_request.request_info),
                "ServiceWrappers": [ServiceWrapperSerializer(envelope).data],
            },
            status=status.HTTP_200_OK,
        )


class GrievanceUpdateView(PgrAPIView):
    @extend_schema(
        summary="Act on a grievance",
        description="Apply a workflow action (assign, resolve, reopen, rate...) to a grievance.",
        request=ServiceRequestSerializer,
        responses={
            200: OpenApiResponse(response=ServiceWrapperSerializer(many=True), description="The updated grievance."),
            400: OpenApiResponse(description="Invalid source, service code or assignment."),
            403: OpenApiResponse(description="Action not allowed for this caller."),
            404: OpenApiResponse(description="No such grievance."),
        },
        tags=["Grievances"],
    )
    def post(self, request: Request) -> Response:
        """POST /pgr-services/v2/request/_update"""
        serializer = ServiceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        grievance_request = serializer.to_request()

        envelope = self.get_service().update(grievance_request)
        return Response(
            {
                "ResponseInfo": response_info(grievance_request.request_info),
                "ServiceWrappers": [ServiceWrapperSerializer(envelope).data],
            },
            status=status.HTTP_200_OK,
        )


class GrievanceSearchView(PgrAPIView):
    @extend_schema(
        summary="Search grievances",
        request=RequestInfoWrapperSerializer,
        parameters=_SEARCH_PARAMETERS,
        responses={
            200: OpenApiResponse(response=ServiceWrapperSerializer(many=True), description="Matching grievances, newest first."),
            400: OpenApiResponse(description="Search not allowed for this caller."),
        },
        tags=["Grievances"],
    )
    def post(self, request: Request) -> Response:
        """POST /pgr-services/v2/request/_search"""
        body = RequestInfoWrapperSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        query = SearchCriteriaSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        request_info = body.to_request_info()

        envelopes = self.get_service().search(request_info, query.to_criteria())
        return Response(
            {
                "ResponseInfo": response_info(request_info),
                "ServiceWrappers": ServiceWrapperSerializer(envelopes, many=True).data,
            },
            status=status.HTTP_200_OK,
        )


class GrievanceCountView(PgrAPIView):
    @extend_schema(
        summary="Count grievances",
        request=RequestInfoWrapperSerializer,
        parameters=_SEARCH_PARAMETERS,
        responses={200: OpenApiResponse(description="Number of matching grievances.")},
        tags=["Grievances"],
    )
    def post(self, request: Request) -> Response:
        """POST /pgr-services/v2/request/_count"""
        body = RequestInfoWrapperSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        query = SearchCriteriaSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        request_info = body.to_request_info()

        count = self.get_service().count(request_info, query.to_criteria())
        return Response(
            {"ResponseInfo": response_info(request_info), "count": count},
            status=status.HTTP_200_OK,
        )


class DynamicDataView(PgrAPIView):
    @extend_schema(
        summary="Resolution statistics",
        description=(
            "Number of grievances closed after resolution in the tenant and "
            "their average resolution time in days."
        ),
        request=RequestInfoWrapperSerializer,
        parameters=[
            OpenApiParameter(name="tenantId", type=str, location=OpenApiParameter.QUERY, required=True),
        ],
        responses={200: OpenApiResponse(description="complaintsResolved and averageResolutionTime.")},
        tags=["Grievances"],
    )
    def post(self, request: Request) -> Response:
        """POST /pgr-services/v2/request/_dynamicData"""
        body = RequestInfoWrapperSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        query = DynamicDataQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        data = self.get_service().dynamic_data(query.validated_data["tenant_id"])
        return Response(
            {"ResponseInfo": response_info(body.to_request_info()), **data},
            status=status.HTTP_200_OK,
        )
