from django.contrib import admin

from availability.models import FacilitatorAvailability, FacilitatorBooking


@admin.register(FacilitatorAvailability)
class FacilitatorAvailabilityAdmin(admin.ModelAdmin):
    list_display = ["facilitator_id", "is_active", "timezone", "updated_at"]
    list_filter = ["is_active"]
    search_fields = ["facilitator_id"]


@admin.register(FacilitatorBooking)
class FacilitatorBookingAdmin(admin.ModelAdmin):
    list_display = ["facilitator_id", "starts_at", "ends_at", "status"]
    list_filter = ["status"]
