from rest_framework import serializers
from django.contrib.auth import get_user_model
from .models import PartnerProfile, PartnerSkill, DeviceToken

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'phone_number', 'role', 'avatar_url']
        read_only_fields = ['id', 'role', 'email']


class PartnerSkillSerializer(serializers.ModelSerializer):
    class Meta:
        model = PartnerSkill
        fields = ['category', 'is_approved']


class PartnerProfileSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)
    skills = PartnerSkillSerializer(many=True, read_only=True)

    class Meta:
        model = PartnerProfile
        fields = [
            'id',
            'user',
            'balance',
            'is_online',
            'is_locked',
            'last_online_at',
            'average_rating',
            'skills',
        ]
        read_only_fields = ['balance', 'is_locked', 'last_online_at', 'average_rating']


class DeviceTokenSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeviceToken
        fields = ['id', 'token', 'platform', 'created_at']
        read_only_fields = ['id', 'created_at']
        # Re-registering a token moves it to the current user in the view
        extra_kwargs = {'token': {'validators': []}}
