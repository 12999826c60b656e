from django.contrib import admin

from .models import Address, Service


class AddressInline(admin.StackedInline):
    model = Address
    extra = 0


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("service_request_id", "tenant_id", "service_code",
                    "application_status", "source", "created_time")
    list_filter = ("application_status", "service_code", "source")
    search_fields = ("service_request_id", "account_id", "description")
    inlines = [AddressInline]


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("parent", "tenant_id", "locality", "city", "pincode")
    search_fields = ("locality", "city")
