"""
Serializers for account models.
"""
from rest_framework import serializers
from .models import Account


class AccountSerializer(serializers.ModelSerializer):
    """
    Serializer for Account with a write-only password.

    The password is required on create and re-hashed whenever it is supplied
    on update. The stored hash is never exposed.
    """
    password = serializers.CharField(
        write_only=True,
        required=False,
        min_length=6,
        trim_whitespace=False
    )

    class Meta:
        model = Account
        fields = [
            'id', 'email', 'password', 'role',
            'business_name', 'business_number', 'phone',
            'whatsapp', 'viber', 'contact_person', 'logo_url',
            'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'This field is required.'})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        account = Account(**validated_data)
        account.set_password(password)
        account.save()
        return account

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class AccountSummarySerializer(serializers.ModelSerializer):
    """Customer summary embedded in order listings."""
    class Meta:
        model = Account
        fields = [
            'id', 'email', 'business_name', 'business_number',
            'contact_person', 'phone', 'logo_url'
        ]


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)
