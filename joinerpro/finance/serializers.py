from decimal import Decimal
from django.conf import settings
from rest_framework import serializers
from .models import PAYMENT_METHOD_CHOICES, PayableAccount, ReceivableAccount
from .services import LedgerEntryRequest
from joinerpro.core.fields import LocalizedDecimalField
from joinerpro.projects.models import Project

CENT = Decimal('0.01')


class LedgerEntryRequestSerializer(serializers.Serializer):
    """Input for creating one or many ledger rows"""
    description = serializers.CharField(max_length=200)
    amount = LocalizedDecimalField(max_digits=12, decimal_places=2, min_value=CENT)
    due_date = serializers.DateField()
    installments = serializers.IntegerField(min_value=1, required=False, default=1)
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHOD_CHOICES, required=False)

    def validate_description(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Description is required.')
        return value

    def validate_installments(self, value):
        limit = settings.JOINERPRO_MAX_INSTALLMENTS
        if value > limit:
            raise serializers.ValidationError(f'At most {limit} installments are allowed.')
        return value

    def validate(self, attrs):
        # Every installment must be worth at least one cent
        installments = attrs.get('installments', 1)
        if attrs['amount'] < installments * CENT:
            raise serializers.ValidationError(
                {'amount': f'Amount is too small to split into {installments} installments.'}
            )
        return attrs

    def to_entry(self):
        return LedgerEntryRequest(**self.validated_data)


class ReceivableEntryRequestSerializer(LedgerEntryRequestSerializer):
    project = serializers.PrimaryKeyRelatedField(
        queryset=Project.objects.all(),
        required=False,
        allow_null=True,
        error_messages={'does_not_exist': 'The selected project does not exist.'},
    )


class SettleRequestSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)


class LedgerAccountSerializer(serializers.ModelSerializer):
    amount = LocalizedDecimalField(max_digits=12, decimal_places=2, min_value=CENT, required=False)
    payment_method_label = serializers.CharField(source='get_payment_method_display', read_only=True)

    class Meta:
        fields = [
            'id', 'description', 'amount', 'due_date', 'status', 'settled_at',
            'payment_method', 'payment_method_label', 'installment_number',
            'installment_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['installment_number', 'installment_count', 'created_at', 'updated_at']

    def validate(self, attrs):
        """
        Keep the settlement date in step with the status. Moving into the
        settled status without a date is rejected, and so is a date on an
        open row.
        """
        model = self.Meta.model
        status_value = attrs.get('status', getattr(self.instance, 'status', None))
        settled_at = attrs.get('settled_at', getattr(self.instance, 'settled_at', None))
        if 'status' in attrs and status_value != model.SETTLED_STATUS and 'settled_at' not in attrs:
            # Reopening a row clears its settlement date
            attrs['settled_at'] = settled_at = None
        if status_value == model.SETTLED_STATUS and settled_at is None:
            raise serializers.ValidationError({'settled_at': 'A settled account needs a settlement date.'})
        if status_value != model.SETTLED_STATUS and settled_at is not None:
            raise serializers.ValidationError({'settled_at': 'Only settled accounts carry a settlement date.'})
        return attrs


class PayableAccountSerializer(LedgerAccountSerializer):
    class Meta(LedgerAccountSerializer.Meta):
        model = PayableAccount


class ReceivableProjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = Project
        fields = ['id', 'name']


class ReceivableAccountSerializer(LedgerAccountSerializer):
    project_detail = ReceivableProjectSerializer(source='project', read_only=True)

    class Meta(LedgerAccountSerializer.Meta):
        model = ReceivableAccount
        fields = LedgerAccountSerializer.Meta.fields + ['project', 'project_detail']
        extra_kwargs = {
            'project': {'error_messages': {'does_not_exist': 'The selected project does not exist.'}},
        }
