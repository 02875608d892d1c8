"""
Catalog Views

Each lookup table is exposed at /api/catalog/<kind>/ with:
- GET    /api/catalog/<kind>/              list (any signed-in user)
- POST   /api/catalog/<kind>/              create (admin)
- PATCH  /api/catalog/<kind>/{id}/         update (admin)
- DELETE /api/catalog/<kind>/{id}/         delete (admin)

Kinds: material-names, units, egg-weights, expense-types, medicines, clients
"""

from rest_framework import permissions, status
from rest_framework.views import APIView

from accounts.permissions import IsAdmin
from core.actions import action_response, request_payload

from . import serializers
from .services import (
    ClientService,
    EggWeightService,
    ExpenseTypeService,
    MaterialNameService,
    MeasurementUnitService,
    MedicineService,
)


class LookupPermission(permissions.BasePermission):
    """Everyone signed in may read lookups; only admins may change them."""

    message = 'Unauthorized - Admin access required'

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return IsAdmin().has_permission(request, view)


class LookupListView(APIView):
    permission_classes = [LookupPermission]
    service = None
    serializer_class = None

    def get(self, request):
        if request.user.is_farmer:
            result = self.service.farmer_list()
        else:
            result = self.service.list()
        return action_response(result, self.serializer_class, many=True)

    def post(self, request):
        result = self.service.create(**request_payload(request))
        return action_response(result, self.serializer_class, success_status=status.HTTP_201_CREATED)


class LookupDetailView(APIView):
    permission_classes = [LookupPermission]
    service = None
    serializer_class = None

    def patch(self, request, record_id):
        return action_response(self.service.update(record_id, **request_payload(request)), self.serializer_class)

    def delete(self, request, record_id):
        return action_response(self.service.delete(record_id))


def lookup_views(service, serializer_class):
    """Build the (list, detail) view pair for one lookup table."""
    list_view = type(
        f"{service.model.__name__}ListView",
        (LookupListView,),
        {'service': service, 'serializer_class': serializer_class},
    )
    detail_view = type(
        f"{service.model.__name__}DetailView",
        (LookupDetailView,),
        {'service': service, 'serializer_class': serializer_class},
    )
    return list_view, detail_view


MaterialNameListView, MaterialNameDetailView = lookup_views(MaterialNameService, serializers.MaterialNameSerializer)
MeasurementUnitListView, MeasurementUnitDetailView = lookup_views(
    MeasurementUnitService, serializers.MeasurementUnitSerializer
)
EggWeightListView, EggWeightDetailView = lookup_views(EggWeightService, serializers.EggWeightSerializer)
ExpenseTypeListView, ExpenseTypeDetailView = lookup_views(ExpenseTypeService, serializers.ExpenseTypeSerializer)
MedicineListView, MedicineDetailView = lookup_views(MedicineService, serializers.MedicineSerializer)
ClientListView, ClientDetailView = lookup_views(ClientService, serializers.ClientSerializer)
