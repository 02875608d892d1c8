"""
Expense and attachment endpoints shared by every invoice-like parent.

Each app subclasses these with its service and permission classes:

- GET/POST    .../{parent_id}/expenses/
- PATCH/DELETE .../expenses/{expense_id}/
- GET/POST    .../{parent_id}/attachments/       (multipart field "file")
- DELETE      .../attachments/{attachment_id}/
"""

from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from .actions import action_response
from .serializers import AttachmentSerializer, AttachmentUploadSerializer, ExpenseSerializer, ExpenseWriteSerializer


def invalid(serializer):
    return Response({'success': False, 'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


class ExpenseListView(APIView):
    service = None

    def get(self, request, parent_id):
        return action_response(self.service.list(parent_id), ExpenseSerializer, many=True)

    def post(self, request, parent_id):
        serializer = ExpenseWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = self.service.create(parent_id, **serializer.validated_data)
        return action_response(result, ExpenseSerializer, success_status=status.HTTP_201_CREATED)


class ExpenseDetailView(APIView):
    service = None

    def patch(self, request, expense_id):
        serializer = ExpenseWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        return action_response(self.service.update(expense_id, **serializer.validated_data), ExpenseSerializer)

    def delete(self, request, expense_id):
        return action_response(self.service.delete(expense_id))


class AttachmentListView(APIView):
    service = None
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get(self, request, parent_id):
        return action_response(self.service.list(parent_id), AttachmentSerializer, many=True)

    def post(self, request, parent_id):
        serializer = AttachmentUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = self.service.create(parent_id, serializer.validated_data['file'])
        return action_response(result, AttachmentSerializer, success_status=status.HTTP_201_CREATED)


class AttachmentDetailView(APIView):
    service = None

    def delete(self, request, attachment_id):
        return action_response(self.service.delete(attachment_id))
