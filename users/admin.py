from django.contrib import admin
from .models import User, PartnerProfile, PartnerSkill, DeviceToken


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Admin interface for User model."""

    list_display = ['id', 'email', 'role', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff', 'date_joined']
    search_fields = ['id', 'email', 'first_name', 'last_name', 'phone_number']
    readonly_fields = ['date_joined']
    ordering = ['-date_joined']

    fieldsets = (
        ('Account Info', {
            'fields': ('email', 'password', 'role')
        }),
        ('Personal Info', {
            'fields': ('first_name', 'last_name', 'phone_number', 'avatar_url')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser')
        }),
        ('Timestamps', {
            'fields': ('date_joined',)
        }),
    )


class PartnerSkillInline(admin.TabularInline):
    model = PartnerSkill
    extra = 0


@admin.register(PartnerProfile)
class PartnerProfileAdmin(admin.ModelAdmin):
    """Admin interface for PartnerProfile model."""

    list_display = ['id', 'user', 'balance', 'is_online', 'is_locked', 'average_rating']
    list_filter = ['is_online', 'is_locked']
    search_fields = ['user__email', 'user__first_name', 'user__last_name']
    readonly_fields = ['balance', 'average_rating', 'last_online_at']
    inlines = [PartnerSkillInline]


@admin.register(DeviceToken)
class DeviceTokenAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'platform', 'created_at']
    search_fields = ['user__email', 'token']
