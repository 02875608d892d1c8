from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Serializer for user details."""
    is_banned = serializers.BooleanField(read_only=True)
    farm_id = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'email', 'full_name', 'role', 'is_active', 'is_banned',
            'farm_id', 'last_login', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_farm_id(self, obj):
        farm = getattr(obj, 'farm', None)
        return str(farm.id) if farm else None


class UserCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    full_name = serializers.CharField(required=False, allow_blank=True, default='')
    role = serializers.ChoiceField(choices=User.UserRole.choices, default=User.UserRole.FARMER)


class UserUpdateSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)
    full_name = serializers.CharField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=User.UserRole.choices, required=False)


class PasswordResetSerializer(serializers.Serializer):
    new_password = serializers.CharField(write_only=True)


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT login that also returns the signed-in user's profile.
    """
    def validate(self, attrs):
        data = super().validate(attrs)

        data['user'] = {
            'id': str(self.user.id),
            'email': self.user.email,
            'full_name': self.user.full_name,
            'role': self.user.role,
        }
        return data
