"""
Django admin customization.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from core import models

STATE_COLORS = {
    models.Property.STATE_IN_PREPARATION: '#6c757d',
    models.Property.STATE_PENDING: '#fd7e14',
    models.Property.STATE_APPROVED: '#28a745',
    models.Property.STATE_REJECTED: '#dc3545',
    models.Mandate.STATE_DRAFT: '#6c757d',
    models.Mandate.STATE_SENT: '#17a2b8',
    models.Mandate.STATE_SIGNED: '#28a745',
    models.Mandate.STATE_VOID: '#dc3545',
}


def state_badge(state, label):
    return format_html(
        '<span style="color: {}; font-weight: bold;">{}</span>',
        STATE_COLORS.get(state, '#000'),
        label
    )


class UserAdmin(BaseUserAdmin):
    """Define admin pages for users"""

    ordering = ["id"]
    list_display = ["email", "name", "role", "is_active", "is_staff"]
    list_filter = ['role', 'is_staff', 'is_superuser', 'is_active']

    fieldsets = (
        (None, {"fields": ("email", "password", "name", "role")}),
        (
            _("Permissions"),
            {"fields": (
                "is_active",
                "is_staff",
                "is_superuser",
            )}
        ),
        (
            _("Important dates"),
            {"fields": (
                "last_login",
            )}
        ),
    )
    readonly_fields = ["last_login"]

    search_fields = ['email', 'name']

    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": (
                "email",
                "password1",
                "password2",
                "name",
                "role",
                "is_active",
                "is_staff",
                "is_superuser",
            )
        }),
    )


class MandateInline(admin.StackedInline):
    model = models.Mandate
    extra = 0
    readonly_fields = ['signed_at', 'created_at', 'updated_at']


@admin.register(models.Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'owner_name', 'locality', 'advisor', 'state_display', 'created_at']
    list_filter = ['state', 'property_type', 'created_at']
    search_fields = ['title', 'owner_name', 'address', 'cadastral_reference', 'advisor__email']
    readonly_fields = ['created_at', 'updated_at']
    raw_id_fields = ['advisor']
    inlines = [MandateInline]

    fieldsets = (
        ('Property', {
            'fields': ('title', 'description', 'property_type', 'address', 'cadastral_reference', 'locality')
        }),
        ('Owners', {
            'fields': ('owner_name', 'owners')
        }),
        ('Review', {
            'fields': ('advisor', 'state', 'review_notes')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def state_display(self, obj):
        return state_badge(obj.state, obj.get_state_display())

    state_display.short_description = 'State'
    state_display.admin_order_field = 'state'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('advisor')


@admin.register(models.Mandate)
class MandateAdmin(admin.ModelAdmin):
    list_display = ['id', 'property_record', 'term_days', 'amount', 'currency', 'state_display', 'signed_at']
    list_filter = ['state', 'currency', 'created_at']
    search_fields = ['property_record__title', 'signed_by']
    readonly_fields = ['signed_at', 'created_at', 'updated_at']
    raw_id_fields = ['property_record']

    def state_display(self, obj):
        return state_badge(obj.state, obj.get_state_display())

    state_display.short_description = 'State'
    state_display.admin_order_field = 'state'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('property_record')


admin.site.register(models.User, UserAdmin)
