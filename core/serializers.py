"""
Read/write shapes shared by the expense and attachment endpoints of every
invoice-like parent.
"""

from rest_framework import serializers


class ExpenseSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    expense_type_id = serializers.UUIDField(allow_null=True)
    expense_type_name = serializers.SerializerMethodField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    account_name = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()

    def get_expense_type_name(self, obj):
        return obj.expense_type.name if obj.expense_type_id else None


class ExpenseWriteSerializer(serializers.Serializer):
    expense_type_id = serializers.UUIDField(required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
    account_name = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AttachmentSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    file_url = serializers.CharField()
    file_name = serializers.CharField()
    file_type = serializers.CharField(allow_blank=True)
    created_at = serializers.DateTimeField()


class AttachmentUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
