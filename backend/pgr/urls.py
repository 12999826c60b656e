"""
Grievance URL configuration.

All routes are mounted under ``/pgr-services/v2/request/``::

  POST _create       → file a grievance
  POST _update       → apply a workflow action to a grievance
  POST _search       → search (criteria in query params)
  POST _count        → count (criteria in query params)
  POST _dynamicData  → resolution statistics for a tenant
"""

from django.urls import path

from .views import (
    DynamicDataView,
    GrievanceCountView,
    GrievanceCreateView,
    GrievanceSearchView,
    GrievanceUpdateView,
)

urlpatterns = [
    path("_create", GrievanceCreateView.as_view(), name="pgr-create"),
    path("_update", GrievanceUpdateView.as_view(), name="pgr-update"),
    path("_search", GrievanceSearchView.as_view(), name="pgr-search"),
    path("_count", GrievanceCountView.as_view(), name="pgr-count"),
    path("_dynamicData", DynamicDataView.as_view(), name="pgr-dynamic-data"),
]
